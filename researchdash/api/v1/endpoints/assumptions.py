import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from researchdash.api.v1 import dependencies as deps
from researchdash.core.exceptions import ResearchDashError, UpstreamError
from researchdash.models.assumption import (
    AssumptionCreateRequest,
    AssumptionsResponse,
    AssumptionUpdateRequest,
)
from researchdash.models.common import WriteResponse
from researchdash.services.assumption_service import AssumptionService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=AssumptionsResponse)
async def list_assumptions(
    status: Optional[str] = Query(None, description='Status to match, or "all".'),
    confidence: Optional[str] = Query(None, description='Confidence to match, or "all".'),
    assumption_service: AssumptionService = Depends(deps.get_assumption_service),
) -> AssumptionsResponse:
    try:
        return await assumption_service.list_assumptions(status=status, confidence=confidence)
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error listing assumptions: {e}")
        raise UpstreamError("Failed to fetch assumptions") from e


@router.post("", response_model=WriteResponse, response_model_exclude_none=True)
async def create_assumption(
    body: AssumptionCreateRequest,
    assumption_service: AssumptionService = Depends(deps.get_assumption_service),
) -> WriteResponse:
    try:
        page_id = await assumption_service.create_assumption(body)
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error creating assumption: {e}")
        raise UpstreamError("Failed to create assumption") from e
    return WriteResponse(success=True, id=page_id)


@router.patch("", response_model=WriteResponse, response_model_exclude_none=True)
async def update_assumption(
    body: AssumptionUpdateRequest,
    assumption_service: AssumptionService = Depends(deps.get_assumption_service),
) -> WriteResponse:
    try:
        await assumption_service.update_assumption(body)
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error updating assumption {body.id}: {e}")
        raise UpstreamError("Failed to update assumption") from e
    return WriteResponse(success=True)


@router.delete("", response_model=WriteResponse, response_model_exclude_none=True)
async def delete_assumption(
    id: Optional[str] = Query(None),
    assumption_service: AssumptionService = Depends(deps.get_assumption_service),
) -> WriteResponse:
    try:
        await assumption_service.delete_assumption(id)
    except ResearchDashError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error deleting assumption {id}: {e}")
        raise UpstreamError("Failed to delete assumption") from e
    return WriteResponse(success=True)
