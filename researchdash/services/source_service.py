import logging
from typing import Any, Dict, List, Optional

from researchdash.core.exceptions import InvalidRequestError
from researchdash.models.source import (
    AUTH_METHODS,
    SOURCE_CATEGORIES,
    Source,
    SourceCreateRequest,
    SourceFilters,
    SourcesResponse,
)
from researchdash.repositories import notion_properties as props
from researchdash.services.base import (
    NotionBackedService,
    distinct,
    is_selected,
    require_id,
)

logger = logging.getLogger(__name__)


class SourceService(NotionBackedService):
    """Catalogue of external data sources (APIs, datasets) kept in Notion."""

    resource_label = "Sources database"

    @staticmethod
    def _flatten(page: Dict[str, Any]) -> Source:
        properties = page.get("properties") or {}
        return Source(
            id=page.get("id", ""),
            name=props.read_title(properties, "Name") or "Untitled",
            description=props.read_rich_text(properties, "Description") or None,
            category=props.read_select(properties, "Category"),
            url=props.read_url(properties, "URL"),
            docs_url=props.read_url(properties, "Docs URL"),
            auth=props.read_select(properties, "Auth") or "None",
            rate_limit=props.read_rich_text(properties, "Rate Limit") or None,
            formats=props.read_multi_select(properties, "Formats"),
            is_free=props.read_checkbox(properties, "Is Free", default=False),
            tags=props.read_multi_select(properties, "Tags"),
            created_at=page.get("created_time"),
            notion_url=page.get("url"),
        )

    async def list_sources(
        self,
        category: Optional[str] = None,
        auth: Optional[str] = None,
        is_free: Optional[str] = None,
    ) -> SourcesResponse:
        filters: List[Dict[str, Any]] = []
        if is_selected(category):
            filters.append(props.select_equals("Category", category))  # type: ignore[arg-type]
        if is_selected(auth):
            filters.append(props.select_equals("Auth", auth))  # type: ignore[arg-type]
        # Only "true" narrows the list; any other value shows paid and free alike
        if is_free == "true":
            filters.append(props.checkbox_equals("Is Free", True))

        pages = await self._query(
            "Failed to fetch sources",
            filter=props.all_of(filters),
            sorts=props.property_sort("Name", "ascending"),
        )
        items = [self._flatten(page) for page in pages]

        return SourcesResponse(
            items=items,
            filters=SourceFilters(
                categories=distinct(item.category for item in items)
                or list(SOURCE_CATEGORIES),
                auth_methods=distinct(item.auth for item in items) or list(AUTH_METHODS),
            ),
        )

    async def create_source(self, request: SourceCreateRequest) -> str:
        self._require_database()
        name = (request.name or "").strip()
        if not name:
            raise InvalidRequestError("Name is required")

        properties: Dict[str, Any] = {
            "Name": props.title_value(name),
            "Is Free": props.checkbox_value(
                True if request.is_free is None else request.is_free
            ),
        }
        if request.description:
            properties["Description"] = props.rich_text_value(request.description)
        if request.category:
            properties["Category"] = props.select_value(request.category)
        if request.url:
            properties["URL"] = props.url_value(request.url)
        if request.docs_url:
            properties["Docs URL"] = props.url_value(request.docs_url)
        if request.auth:
            properties["Auth"] = props.select_value(request.auth)
        if request.rate_limit:
            properties["Rate Limit"] = props.rich_text_value(request.rate_limit)
        if request.formats:
            properties["Formats"] = props.multi_select_value(request.formats)
        if request.tags:
            properties["Tags"] = props.multi_select_value(request.tags)

        return await self._create("Failed to create source", properties)

    async def delete_source(self, page_id: Optional[str]) -> None:
        self._require_database()
        await self._archive("Failed to delete source", require_id(page_id))
