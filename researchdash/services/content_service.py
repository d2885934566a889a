import datetime
import logging
from typing import Any, Dict, List, Optional

from researchdash.core.exceptions import InvalidRequestError
from researchdash.models.content import (
    DEFAULT_CONTENT_STATUS,
    ContentCreateRequest,
    ContentFilters,
    ContentItem,
    ContentResponse,
)
from researchdash.repositories import notion_properties as props
from researchdash.services.base import NotionBackedService, distinct, is_selected

logger = logging.getLogger(__name__)


class ContentService(NotionBackedService):
    """Articles, videos and other research results collected for later review."""

    resource_label = "Content database"

    @staticmethod
    def _flatten(page: Dict[str, Any]) -> ContentItem:
        properties = page.get("properties") or {}
        return ContentItem(
            id=page.get("id", ""),
            title=props.read_title(properties, "Name", "Title") or "Untitled",
            url=props.read_url(properties, "URL"),
            type=props.read_select(properties, "Type"),
            source=props.read_select(properties, "Source"),
            status=props.read_select(properties, "Status") or DEFAULT_CONTENT_STATUS,
            date_added=props.read_date_start(properties, "Date Added")
            or page.get("created_time"),
            description=props.read_rich_text(properties, "Description") or None,
            tags=props.read_multi_select(properties, "Tags"),
            notion_url=page.get("url"),
        )

    async def list_content(
        self,
        type: Optional[str] = None,
        status: Optional[str] = None,
        source: Optional[str] = None,
        search: Optional[str] = None,
    ) -> ContentResponse:
        filters: List[Dict[str, Any]] = []
        if is_selected(type):
            filters.append(props.select_equals("Type", type))  # type: ignore[arg-type]
        if is_selected(status):
            filters.append(props.select_equals("Status", status))  # type: ignore[arg-type]
        if is_selected(source):
            filters.append(props.select_equals("Source", source))  # type: ignore[arg-type]
        if search:
            filters.append(props.title_contains("Name", search))

        pages = await self._query(
            "Failed to fetch research results",
            filter=props.all_of(filters),
            sorts=props.property_sort("Date Added", "descending"),
        )
        items = [self._flatten(page) for page in pages]

        return ContentResponse(
            items=items,
            filters=ContentFilters(
                types=distinct(item.type for item in items),
                sources=distinct(item.source for item in items),
                statuses=distinct(item.status for item in items),
            ),
        )

    async def create_content(self, request: ContentCreateRequest) -> str:
        self._require_database()
        title = (request.title or "").strip()
        if not title:
            raise InvalidRequestError("Title is required")

        properties: Dict[str, Any] = {
            "Name": props.title_value(title),
            "Status": props.select_value(request.status or DEFAULT_CONTENT_STATUS),
            "Date Added": props.date_value(
                datetime.datetime.now(datetime.timezone.utc).date().isoformat()
            ),
        }
        if request.url:
            properties["URL"] = props.url_value(request.url)
        if request.type:
            properties["Type"] = props.select_value(request.type)
        if request.source:
            properties["Source"] = props.select_value(request.source)
        if request.description:
            properties["Description"] = props.rich_text_value(request.description)

        return await self._create("Failed to create research result", properties)
