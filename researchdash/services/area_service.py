"""
Research areas and feed keywords.

Both live in Notion databases whose pages are a title plus an `Active`
checkbox, and both support the same list/create/update/archive operations;
`KeywordService` in `researchdash.services.feed_service` builds on
`AreaService`.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from researchdash.core.exceptions import InvalidRequestError
from researchdash.models.area import Area, ToggleCreateRequest, ToggleUpdateRequest
from researchdash.repositories import notion_properties as props
from researchdash.repositories.notion_repo import NotionRepository
from researchdash.services.base import NotionBackedService, require_id, slugify

logger = logging.getLogger(__name__)

TITLE_PROPERTY = "Title"
ACTIVE_PROPERTY = "Active"


class AreaService(NotionBackedService):
    resource_label = "Areas database"
    item_label = "area"
    name_required_message = "Area name is required"

    def __init__(
        self,
        notion_repo: NotionRepository,
        database_id: Optional[str],
        default_names: Optional[Sequence[str]] = None,
    ):
        super().__init__(notion_repo, database_id)
        self.default_names = list(default_names or [])

    def _flatten(self, page: Dict[str, Any]) -> Area:
        properties = page.get("properties") or {}
        return Area(
            id=page.get("id", ""),
            name=props.find_title(properties) or "Untitled",
            active=props.read_checkbox(properties, ACTIVE_PROPERTY, default=True),
        )

    def default_areas(self) -> List[Area]:
        return [Area(id=slugify(name), name=name, active=True) for name in self.default_names]

    async def list_areas(self) -> List[Area]:
        # Oldest first
        pages = await self._query(
            f"Failed to fetch {self.item_label}s", sorts=props.CREATED_TIME_ASCENDING
        )
        areas = [self._flatten(page) for page in pages]
        if not areas and self.default_names:
            logger.info(
                f"{self.resource_label} is empty; serving {len(self.default_names)} default entries"
            )
            return self.default_areas()
        return areas

    async def create(self, request: ToggleCreateRequest) -> str:
        self._require_database()
        name = (request.name or "").strip()
        if not name:
            raise InvalidRequestError(self.name_required_message)
        return await self._create(
            f"Failed to create {self.item_label}",
            {TITLE_PROPERTY: props.title_value(name)},
        )

    async def update(self, request: ToggleUpdateRequest) -> None:
        self._require_database()
        page_id = require_id(request.id)

        properties: Dict[str, Any] = {}
        if "name" in request.model_fields_set:
            name = (request.name or "").strip()
            if not name:
                raise InvalidRequestError(self.name_required_message)
            properties[TITLE_PROPERTY] = props.title_value(name)
        if isinstance(request.active, bool):
            properties[ACTIVE_PROPERTY] = props.checkbox_value(request.active)

        await self._update(f"Failed to update {self.item_label}", page_id, properties)

    async def delete(self, page_id: Optional[str]) -> None:
        self._require_database()
        await self._archive(f"Failed to delete {self.item_label}", require_id(page_id))
