"""
Common plumbing for services backed by one Notion database.

Subclasses set `resource_label` (used in "<label> not configured") and call
the `_query` / `_create` / `_update` / `_archive` helpers with the generic
message to show when Notion fails. The underlying Notion error is logged here
and kept on the raised `UpstreamError` as `detail`.
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from researchdash.core.exceptions import (
    InvalidRequestError,
    NotConfiguredError,
    NotionAPIError,
    UpstreamError,
)
from researchdash.repositories.notion_repo import NotionRepository

logger = logging.getLogger(__name__)

ALL = "all"


def is_selected(value: Optional[str]) -> bool:
    """A query filter applies unless it is missing, empty or the sentinel "all"."""
    return bool(value) and value != ALL


def distinct(values: Iterable[Optional[str]]) -> List[str]:
    """Unique non-empty values in order of first appearance."""
    seen: Dict[str, None] = {}
    for value in values:
        if value and value not in seen:
            seen[value] = None
    return list(seen)


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def require_id(page_id: Optional[str]) -> str:
    if not page_id or not page_id.strip():
        raise InvalidRequestError("ID is required")
    return page_id.strip()


class NotionBackedService:
    resource_label = "Database"

    def __init__(self, notion_repo: NotionRepository, database_id: Optional[str]):
        self.notion_repo = notion_repo
        self.database_id = database_id

    def _require_database(self) -> str:
        if not self.database_id or not self.notion_repo.is_configured():
            logger.error(f"{self.resource_label} requested but not configured")
            raise NotConfiguredError(f"{self.resource_label} not configured")
        return self.database_id

    async def _query(
        self,
        public_message: str,
        filter: Optional[Dict[str, Any]] = None,
        sorts: Optional[List[Dict[str, Any]]] = None,
    ) -> List[Dict[str, Any]]:
        database_id = self._require_database()
        try:
            return await self.notion_repo.query_pages(
                database_id, filter=filter, sorts=sorts
            )
        except NotionAPIError as e:
            logger.error(f"{public_message}: {e}")
            raise UpstreamError(public_message, detail=str(e)) from e

    async def _create(self, public_message: str, properties: Dict[str, Any]) -> str:
        database_id = self._require_database()
        try:
            page = await self.notion_repo.create_page(database_id, properties)
        except NotionAPIError as e:
            logger.error(f"{public_message}: {e}")
            raise UpstreamError(public_message, detail=str(e)) from e
        return str(page.get("id", ""))

    async def _update(
        self, public_message: str, page_id: str, properties: Dict[str, Any]
    ) -> None:
        self._require_database()
        try:
            await self.notion_repo.update_page(page_id, properties)
        except NotionAPIError as e:
            logger.error(f"{public_message} ({page_id}): {e}")
            raise UpstreamError(public_message, detail=str(e)) from e

    async def _archive(self, public_message: str, page_id: str) -> None:
        self._require_database()
        try:
            await self.notion_repo.archive_page(page_id)
        except NotionAPIError as e:
            logger.error(f"{public_message} ({page_id}): {e}")
            raise UpstreamError(public_message, detail=str(e)) from e
