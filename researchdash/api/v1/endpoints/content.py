import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from researchdash.api.v1 import dependencies as deps
from researchdash.core.exceptions import ResearchDashError, UpstreamError
from researchdash.models.common import WriteResponse
from researchdash.models.content import ContentCreateRequest, ContentResponse
from researchdash.services.content_service import ContentService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=ContentResponse)
async def list_content(
    type: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    source: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Substring of the title."),
    content_service: ContentService = Depends(deps.get_content_service),
) -> ContentResponse:
    try:
        return await content_service.list_content(
            type=type, status=status, source=source, search=search
        )
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error listing content: {e}")
        raise UpstreamError("Failed to fetch research results") from e


@router.post("", response_model=WriteResponse, response_model_exclude_none=True)
async def create_content(
    body: ContentCreateRequest,
    content_service: ContentService = Depends(deps.get_content_service),
) -> WriteResponse:
    try:
        page_id = await content_service.create_content(body)
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error creating content: {e}")
        raise UpstreamError("Failed to create research result") from e
    return WriteResponse(success=True, id=page_id)
