import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from researchdash.api.v1 import dependencies as deps
from researchdash.core.exceptions import ResearchDashError, UpstreamError
from researchdash.models.area import AreasResponse, ToggleCreateRequest, ToggleUpdateRequest
from researchdash.models.common import WriteResponse
from researchdash.models.paper import AreaPapersResponse, PaperSearchResponse
from researchdash.services.area_service import AreaService
from researchdash.services.paper_service import PaperService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=AreasResponse)
async def list_areas(
    area_service: AreaService = Depends(deps.get_area_service),
) -> AreasResponse:
    """Lists research areas, or the configured defaults when none are stored."""
    try:
        areas = await area_service.list_areas()
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error listing areas: {e}")
        raise UpstreamError("Failed to fetch areas") from e
    return AreasResponse(areas=areas)


@router.post("", response_model=WriteResponse, response_model_exclude_none=True)
async def create_area(
    body: ToggleCreateRequest,
    area_service: AreaService = Depends(deps.get_area_service),
) -> WriteResponse:
    logger.info(f"Creating area '{body.name}'")
    try:
        page_id = await area_service.create(body)
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error creating area: {e}")
        raise UpstreamError("Failed to create area") from e
    return WriteResponse(success=True, id=page_id)


@router.patch("", response_model=WriteResponse, response_model_exclude_none=True)
async def update_area(
    body: ToggleUpdateRequest,
    area_service: AreaService = Depends(deps.get_area_service),
) -> WriteResponse:
    try:
        await area_service.update(body)
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error updating area {body.id}: {e}")
        raise UpstreamError("Failed to update area") from e
    return WriteResponse(success=True)


@router.delete("", response_model=WriteResponse, response_model_exclude_none=True)
async def delete_area(
    id: Optional[str] = Query(None, description="Notion page id of the area."),
    area_service: AreaService = Depends(deps.get_area_service),
) -> WriteResponse:
    try:
        await area_service.delete(id)
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error deleting area {id}: {e}")
        raise UpstreamError("Failed to delete area") from e
    return WriteResponse(success=True)


@router.get("/papers", response_model=AreaPapersResponse)
async def area_papers(
    tag: Optional[str] = Query(None, description="Area name; each word becomes one tag."),
    date_from: Optional[str] = Query(None, alias="from", description="YYYY-MM-DD"),
    date_to: Optional[str] = Query(None, alias="to", description="YYYY-MM-DD"),
    paper_service: PaperService = Depends(deps.get_paper_service),
) -> AreaPapersResponse:
    """Candidate papers for an area, collected by the n8n workflow."""
    logger.info(f"Fetching papers for area tag='{tag}' from={date_from} to={date_to}")
    try:
        papers = await paper_service.area_papers(tag, date_from, date_to)
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error fetching papers for '{tag}': {e}")
        raise UpstreamError("Failed to fetch papers") from e
    return AreaPapersResponse(papers=papers)


@router.get("/search", response_model=PaperSearchResponse)
async def search_papers(
    q: Optional[str] = Query(None, description="Free-text arXiv query."),
    keywords: Optional[str] = Query(None, description="Comma-separated keywords, ORed."),
    limit: Optional[int] = Query(
        None, ge=1, description="Maximum results (20 for q, 30 for keywords)."
    ),
    paper_service: PaperService = Depends(deps.get_paper_service),
) -> PaperSearchResponse:
    logger.info(f"arXiv search: q='{q}', keywords='{keywords}', limit={limit}")
    try:
        papers = await paper_service.search(query=q, keywords=keywords, limit=limit)
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error searching arXiv: {e}")
        raise UpstreamError("Failed to search arXiv") from e
    return PaperSearchResponse(papers=papers)


@router.get("/download", response_class=StreamingResponse)
async def download_pdf(
    url: Optional[str] = Query(None, description="URL of the PDF to fetch."),
    title: Optional[str] = Query(None, description="Used for the attachment filename."),
    paper_service: PaperService = Depends(deps.get_paper_service),
) -> StreamingResponse:
    """Relays a remote PDF as an attachment."""
    try:
        upstream, filename = await paper_service.open_pdf(url, title)
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error downloading {url}: {e}")
        raise UpstreamError("Failed to download PDF") from e

    logger.info(f"Streaming PDF from {url} as '{filename}'")
    return StreamingResponse(
        upstream.aiter_bytes(),
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        background=BackgroundTask(upstream.aclose),
    )
