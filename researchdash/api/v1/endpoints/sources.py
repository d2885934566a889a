import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from researchdash.api.v1 import dependencies as deps
from researchdash.core.exceptions import ResearchDashError, UpstreamError
from researchdash.models.common import WriteResponse
from researchdash.models.source import SourceCreateRequest, SourcesResponse
from researchdash.services.source_service import SourceService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=SourcesResponse)
async def list_sources(
    category: Optional[str] = Query(None),
    auth: Optional[str] = Query(None),
    is_free: Optional[str] = Query(
        None, alias="isFree", description='"true" keeps only free sources.'
    ),
    source_service: SourceService = Depends(deps.get_source_service),
) -> SourcesResponse:
    try:
        return await source_service.list_sources(
            category=category, auth=auth, is_free=is_free
        )
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error listing sources: {e}")
        raise UpstreamError("Failed to fetch sources") from e


@router.post("", response_model=WriteResponse, response_model_exclude_none=True)
async def create_source(
    body: SourceCreateRequest,
    source_service: SourceService = Depends(deps.get_source_service),
) -> WriteResponse:
    try:
        page_id = await source_service.create_source(body)
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error creating source: {e}")
        raise UpstreamError("Failed to create source") from e
    return WriteResponse(success=True, id=page_id)


@router.delete("", response_model=WriteResponse, response_model_exclude_none=True)
async def delete_source(
    id: Optional[str] = Query(None),
    source_service: SourceService = Depends(deps.get_source_service),
) -> WriteResponse:
    try:
        await source_service.delete_source(id)
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error deleting source {id}: {e}")
        raise UpstreamError("Failed to delete source") from e
    return WriteResponse(success=True)
