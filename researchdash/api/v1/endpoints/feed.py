import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from researchdash.api.v1 import dependencies as deps
from researchdash.core.exceptions import ResearchDashError, UpstreamError
from researchdash.models.area import KeywordsResponse, ToggleCreateRequest, ToggleUpdateRequest
from researchdash.models.common import WriteResponse
from researchdash.models.paper import TopicPapersResponse
from researchdash.services.feed_service import KeywordService, TopicFeedService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/keywords", response_model=KeywordsResponse)
async def list_keywords(
    keyword_service: KeywordService = Depends(deps.get_keyword_service),
) -> KeywordsResponse:
    try:
        keywords = await keyword_service.list_keywords()
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error listing keywords: {e}")
        raise UpstreamError("Failed to fetch keywords") from e
    return KeywordsResponse(keywords=keywords)


@router.post("/keywords", response_model=WriteResponse, response_model_exclude_none=True)
async def create_keyword(
    body: ToggleCreateRequest,
    keyword_service: KeywordService = Depends(deps.get_keyword_service),
) -> WriteResponse:
    try:
        page_id = await keyword_service.create(body)
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error creating keyword: {e}")
        raise UpstreamError("Failed to create keyword") from e
    return WriteResponse(success=True, id=page_id)


@router.patch("/keywords", response_model=WriteResponse, response_model_exclude_none=True)
async def update_keyword(
    body: ToggleUpdateRequest,
    keyword_service: KeywordService = Depends(deps.get_keyword_service),
) -> WriteResponse:
    try:
        await keyword_service.update(body)
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error updating keyword {body.id}: {e}")
        raise UpstreamError("Failed to update keyword") from e
    return WriteResponse(success=True)


@router.delete("/keywords", response_model=WriteResponse, response_model_exclude_none=True)
async def delete_keyword(
    id: Optional[str] = Query(None),
    keyword_service: KeywordService = Depends(deps.get_keyword_service),
) -> WriteResponse:
    try:
        await keyword_service.delete(id)
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error deleting keyword {id}: {e}")
        raise UpstreamError("Failed to delete keyword") from e
    return WriteResponse(success=True)


@router.get("/papers", response_model=TopicPapersResponse)
async def topic_papers(
    topic: Optional[str] = Query(None, description="Topic name as configured."),
    feed_service: TopicFeedService = Depends(deps.get_topic_feed_service),
) -> TopicPapersResponse:
    try:
        papers = await feed_service.list_papers(topic)
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error fetching papers for topic '{topic}': {e}")
        raise UpstreamError("Failed to fetch papers") from e
    return TopicPapersResponse(papers=papers)
