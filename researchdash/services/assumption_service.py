import logging
from typing import Any, Dict, List, Optional

from researchdash.core.exceptions import InvalidRequestError
from researchdash.models.assumption import (
    ASSUMPTION_STATUSES,
    CONFIDENCE_LEVELS,
    Assumption,
    AssumptionCreateRequest,
    AssumptionFilters,
    AssumptionsResponse,
    AssumptionUpdateRequest,
)
from researchdash.repositories import notion_properties as props
from researchdash.services.base import (
    NotionBackedService,
    distinct,
    is_selected,
    require_id,
)

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "Pending"
DEFAULT_CONFIDENCE = "Medium"


class AssumptionService(NotionBackedService):
    """Hypotheses tracked in Notion: title, description, status, confidence, evidence."""

    resource_label = "Assumptions database"

    @staticmethod
    def _flatten(page: Dict[str, Any]) -> Assumption:
        properties = page.get("properties") or {}
        return Assumption(
            id=page.get("id", ""),
            title=props.read_title(properties, "Name") or "Untitled",
            description=props.read_rich_text(properties, "Description") or None,
            status=props.read_select(properties, "Status") or DEFAULT_STATUS,
            confidence=props.read_select(properties, "Confidence") or DEFAULT_CONFIDENCE,
            evidence=props.read_rich_text(properties, "Evidence") or None,
            created_at=page.get("created_time"),
            notion_url=page.get("url"),
        )

    async def list_assumptions(
        self, status: Optional[str] = None, confidence: Optional[str] = None
    ) -> AssumptionsResponse:
        filters: List[Dict[str, Any]] = []
        if is_selected(status):
            filters.append(props.select_equals("Status", status))  # type: ignore[arg-type]
        if is_selected(confidence):
            filters.append(props.select_equals("Confidence", confidence))  # type: ignore[arg-type]

        pages = await self._query(
            "Failed to fetch assumptions",
            filter=props.all_of(filters),
            sorts=props.CREATED_TIME_DESCENDING,
        )
        items = [self._flatten(page) for page in pages]

        return AssumptionsResponse(
            items=items,
            filters=AssumptionFilters(
                statuses=distinct(item.status for item in items) or list(ASSUMPTION_STATUSES),
                confidences=distinct(item.confidence for item in items)
                or list(CONFIDENCE_LEVELS),
            ),
        )

    async def create_assumption(self, request: AssumptionCreateRequest) -> str:
        self._require_database()
        title = (request.title or "").strip()
        if not title:
            raise InvalidRequestError("Title is required")

        properties: Dict[str, Any] = {
            "Name": props.title_value(title),
            "Status": props.select_value(request.status or DEFAULT_STATUS),
            "Confidence": props.select_value(request.confidence or DEFAULT_CONFIDENCE),
        }
        if request.description:
            properties["Description"] = props.rich_text_value(request.description)
        if request.evidence:
            properties["Evidence"] = props.rich_text_value(request.evidence)

        return await self._create("Failed to create assumption", properties)

    async def update_assumption(self, request: AssumptionUpdateRequest) -> None:
        """
        Writes only the fields present in the request body. A field sent as
        "" or null clears the property; the title cannot be cleared.
        """
        self._require_database()
        page_id = require_id(request.id)
        sent = request.model_fields_set

        properties: Dict[str, Any] = {}
        if "title" in sent:
            title = (request.title or "").strip()
            if not title:
                raise InvalidRequestError("Title cannot be empty")
            properties["Name"] = props.title_value(title)
        if "status" in sent:
            properties["Status"] = props.select_value(request.status)
        if "confidence" in sent:
            properties["Confidence"] = props.select_value(request.confidence)
        if "description" in sent:
            properties["Description"] = props.rich_text_value(request.description)
        if "evidence" in sent:
            properties["Evidence"] = props.rich_text_value(request.evidence)

        await self._update("Failed to update assumption", page_id, properties)

    async def delete_assumption(self, page_id: Optional[str]) -> None:
        self._require_database()
        await self._archive("Failed to delete assumption", require_id(page_id))
