import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from researchdash.api.v1 import dependencies as deps
from researchdash.core.exceptions import ResearchDashError, UpstreamError
from researchdash.models.common import ClearResponse, WriteResponse
from researchdash.models.paper import SavedPapersResponse, SavePaperRequest
from researchdash.services.saved_paper_service import SavedPaperService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=SavedPapersResponse)
async def list_saved_papers(
    saved_service: SavedPaperService = Depends(deps.get_saved_paper_service),
) -> SavedPapersResponse:
    try:
        papers = await saved_service.list_papers()
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error listing saved papers: {e}")
        raise UpstreamError("Failed to fetch papers") from e
    return SavedPapersResponse(papers=papers)


@router.post("", response_model=WriteResponse, response_model_exclude_none=True)
async def save_paper(
    body: SavePaperRequest,
    saved_service: SavedPaperService = Depends(deps.get_saved_paper_service),
) -> WriteResponse:
    """Saves a paper unless one with the same title is already saved."""
    logger.info(f"Saving paper '{body.title}'")
    try:
        outcome = await saved_service.save_paper(body)
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error saving paper '{body.title}': {e}")
        raise UpstreamError("Failed to save") from e
    return WriteResponse(success=True, **outcome)


@router.delete("", response_model=WriteResponse, response_model_exclude_none=True)
async def remove_saved_paper(
    title: Optional[str] = Query(None, description="Exact title of the saved paper."),
    saved_service: SavedPaperService = Depends(deps.get_saved_paper_service),
) -> WriteResponse:
    try:
        await saved_service.remove_paper(title)
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error removing saved paper '{title}': {e}")
        raise UpstreamError("Failed to delete") from e
    return WriteResponse(success=True)


@router.patch("", response_model=ClearResponse)
async def clear_saved_papers(
    saved_service: SavedPaperService = Depends(deps.get_saved_paper_service),
) -> ClearResponse:
    """Archives every saved paper and reports how many archives succeeded and failed."""
    try:
        return await saved_service.clear_all()
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error clearing saved papers: {e}")
        raise UpstreamError("Failed to clear") from e
