"""
Saved papers (the reading list).

Papers are keyed by title on the client side, so saving checks for an
existing non-archived page with the same title before creating one, and
removal archives the first page with that title. Both are check-then-act
sequences against Notion with no locking; two concurrent saves of the same
title can create two pages.
"""

import asyncio
import datetime
import logging
from typing import Any, Dict, List, Optional

from dateutil import parser as date_parser

from researchdash.core.exceptions import (
    InvalidRequestError,
    NotFoundError,
    NotionAPIError,
    UpstreamError,
)
from researchdash.models.common import ClearResponse
from researchdash.models.paper import SavedPaper, SavePaperRequest
from researchdash.repositories import notion_properties as props
from researchdash.repositories.notion_repo import NotionRepository
from researchdash.services.base import NotionBackedService

logger = logging.getLogger(__name__)

TITLE_PROPERTY = "Title"
# Fills the parts a partial date leaves out: "2026" -> 2026-01-01
DATE_DEFAULT = datetime.datetime(2000, 1, 1)


def normalize_date(raw: str) -> str:
    """
    "29 January, 2026" -> "2026-01-29", "March 2025" -> "2025-03-01".
    Strings dateutil cannot read are returned unchanged.
    """
    try:
        return date_parser.parse(raw, default=DATE_DEFAULT).date().isoformat()
    except (ValueError, OverflowError):
        logger.debug(f"Keeping unparseable date as-is: '{raw}'")
        return raw


class SavedPaperService(NotionBackedService):
    resource_label = "Saved papers database"

    def __init__(
        self,
        notion_repo: NotionRepository,
        database_id: Optional[str],
        clear_concurrency: int = 8,
        text_limit: int = 2000,
    ):
        super().__init__(notion_repo, database_id)
        self.clear_concurrency = max(1, clear_concurrency)
        self.text_limit = text_limit

    @staticmethod
    def _flatten(page: Dict[str, Any]) -> SavedPaper:
        properties = page.get("properties") or {}
        return SavedPaper(
            id=page.get("id", ""),
            title=props.read_title(properties, TITLE_PROPERTY),
            authors=props.read_rich_text(properties, "Authors"),
            description=props.read_rich_text(properties, "Description"),
            pdf_link=props.read_url(properties, "pdf Link") or "",
            date=props.read_date_start(properties, "Submission") or "",
        )

    async def _pages_with_title(self, database_id: str, title: str) -> List[Dict[str, Any]]:
        return await self.notion_repo.query_pages(
            database_id, filter=props.title_equals(TITLE_PROPERTY, title)
        )

    async def list_papers(self) -> List[SavedPaper]:
        """Newest first. A Notion failure yields an empty list rather than an error."""
        database_id = self._require_database()
        try:
            pages = await self.notion_repo.query_pages(
                database_id, sorts=props.CREATED_TIME_DESCENDING
            )
        except NotionAPIError as e:
            logger.error(f"Could not list saved papers, returning none: {e}")
            return []
        return [self._flatten(page) for page in pages]

    def _build_properties(self, request: SavePaperRequest, title: str) -> Dict[str, Any]:
        properties: Dict[str, Any] = {TITLE_PROPERTY: props.title_value(title)}
        authors = request.author_text()
        if authors:
            properties["Authors"] = props.rich_text_value(authors, limit=self.text_limit)
        description = request.description_text()
        if description:
            properties["Description"] = props.rich_text_value(
                description, limit=self.text_limit
            )
        if request.pdf_link:
            properties["pdf Link"] = props.url_value(request.pdf_link)
        raw_date = request.date_text()
        if raw_date:
            properties["Submission"] = props.date_value(normalize_date(raw_date))
        return properties

    async def save_paper(self, request: SavePaperRequest) -> Dict[str, Any]:
        """
        Returns `{"message": "Already saved"}` when a page with this exact title
        exists, otherwise `{"id": <new page id>}`.
        """
        database_id = self._require_database()
        title = (request.title or "").strip()
        if not title:
            raise InvalidRequestError("Title is required")

        try:
            existing = await self._pages_with_title(database_id, title)
        except NotionAPIError as e:
            # The duplicate check is advisory; carry on and create the page
            logger.warning(f"Duplicate check for '{title}' failed, saving anyway: {e}")
            existing = []
        if existing:
            logger.info(f"Paper '{title}' is already saved")
            return {"message": "Already saved"}

        page_id = await self._create("Failed to save", self._build_properties(request, title))
        return {"id": page_id}

    async def remove_paper(self, title: Optional[str]) -> None:
        database_id = self._require_database()
        title = (title or "").strip()
        if not title:
            raise InvalidRequestError("Title is required")

        try:
            pages = await self._pages_with_title(database_id, title)
        except NotionAPIError as e:
            logger.error(f"Lookup of saved paper '{title}' failed: {e}")
            raise UpstreamError("Failed to find paper", detail=str(e)) from e
        if not pages:
            raise NotFoundError("Paper not found")

        await self._archive("Failed to delete", pages[0]["id"])

    async def clear_all(self) -> ClearResponse:
        """
        Archives every non-archived saved paper, at most `clear_concurrency`
        at a time. One failed archive does not stop the others.
        """
        database_id = self._require_database()
        try:
            pages = await self.notion_repo.query_all_pages(database_id)
        except NotionAPIError as e:
            logger.error(f"Could not fetch saved papers to clear: {e}")
            raise UpstreamError("Failed to fetch papers", detail=str(e)) from e

        semaphore = asyncio.Semaphore(self.clear_concurrency)

        async def archive(page_id: str) -> bool:
            async with semaphore:
                try:
                    await self.notion_repo.archive_page(page_id)
                    return True
                except NotionAPIError as e:
                    logger.warning(f"Could not archive saved paper {page_id}: {e}")
                    return False

        outcomes = await asyncio.gather(*(archive(page["id"]) for page in pages))
        archived = sum(1 for ok in outcomes if ok)
        failed = len(outcomes) - archived
        logger.info(f"Cleared saved papers: {archived} archived, {failed} failed")
        return ClearResponse(success=True, archived=archived, failed=failed)
