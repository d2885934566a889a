import logging
from typing import Any, Dict, List, Optional

import httpx

from researchdash.core.exceptions import NotionAPIError

logger = logging.getLogger(__name__)

NOTION_PAGE_SIZE = 100


class NotionRepository:
    """
    Thin async wrapper over the Notion REST API (databases and pages).

    Uses the application's shared `httpx.AsyncClient`. Every call is a single
    attempt; a non-2xx answer or a transport error is raised as
    `NotionAPIError` carrying Notion's own message when it sent one.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: Optional[str],
        api_base: str = "https://api.notion.com/v1",
        notion_version: str = "2022-06-28",
    ):
        self.client = client
        self.token = token
        self.api_base = api_base.rstrip("/")
        self.notion_version = notion_version
        self.logger = logger

    def is_configured(self) -> bool:
        return bool(self.token)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Notion-Version": self.notion_version,
            "Content-Type": "application/json",
        }

    async def _request(
        self, method: str, path: str, payload: Dict[str, Any]
    ) -> Dict[str, Any]:
        url = f"{self.api_base}{path}"
        try:
            response = await self.client.request(
                method, url, json=payload, headers=self._headers()
            )
        except httpx.HTTPError as e:
            self.logger.error(f"Notion request {method} {path} failed: {e!r}")
            raise NotionAPIError(f"Request failed: {e!r}") from e

        if response.is_error:
            message = _error_message(response)
            self.logger.error(
                f"Notion returned {response.status_code} for {method} {path}: {message}"
            )
            raise NotionAPIError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise NotionAPIError(
                "Response was not JSON", status_code=response.status_code
            ) from e
        return data if isinstance(data, dict) else {}

    async def query_database(
        self,
        database_id: str,
        filter: Optional[Dict[str, Any]] = None,
        sorts: Optional[List[Dict[str, Any]]] = None,
        page_size: Optional[int] = NOTION_PAGE_SIZE,
        start_cursor: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Runs one database query and returns Notion's raw response body."""
        payload: Dict[str, Any] = {}
        if filter:
            payload["filter"] = filter
        if sorts:
            payload["sorts"] = sorts
        if page_size is not None:
            payload["page_size"] = page_size
        if start_cursor:
            payload["start_cursor"] = start_cursor
        self.logger.debug(f"Querying Notion database {database_id}: {payload}")
        return await self._request("POST", f"/databases/{database_id}/query", payload)

    async def query_pages(
        self,
        database_id: str,
        filter: Optional[Dict[str, Any]] = None,
        sorts: Optional[List[Dict[str, Any]]] = None,
        page_size: Optional[int] = NOTION_PAGE_SIZE,
    ) -> List[Dict[str, Any]]:
        """The first page of results, with archived pages left out."""
        data = await self.query_database(
            database_id, filter=filter, sorts=sorts, page_size=page_size
        )
        return _live_pages(data)

    async def query_all_pages(
        self,
        database_id: str,
        filter: Optional[Dict[str, Any]] = None,
        sorts: Optional[List[Dict[str, Any]]] = None,
    ) -> List[Dict[str, Any]]:
        """Every non-archived page, following `next_cursor` until Notion reports no more."""
        pages: List[Dict[str, Any]] = []
        cursor: Optional[str] = None
        while True:
            data = await self.query_database(
                database_id, filter=filter, sorts=sorts, start_cursor=cursor
            )
            pages.extend(_live_pages(data))
            cursor = data.get("next_cursor")
            if not data.get("has_more") or not cursor:
                break
        return pages

    async def create_page(
        self, database_id: str, properties: Dict[str, Any]
    ) -> Dict[str, Any]:
        payload = {"parent": {"database_id": database_id}, "properties": properties}
        page = await self._request("POST", "/pages", payload)
        self.logger.info(f"Created Notion page {page.get('id')} in {database_id}")
        return page

    async def update_page(
        self, page_id: str, properties: Dict[str, Any]
    ) -> Dict[str, Any]:
        return await self._request(
            "PATCH", f"/pages/{page_id}", {"properties": properties}
        )

    async def archive_page(self, page_id: str) -> Dict[str, Any]:
        """Soft-deletes a page."""
        page = await self._request("PATCH", f"/pages/{page_id}", {"archived": True})
        self.logger.info(f"Archived Notion page {page_id}")
        return page


def _live_pages(data: Dict[str, Any]) -> List[Dict[str, Any]]:
    results = data.get("results")
    if not isinstance(results, list):
        return []
    return [
        page for page in results if isinstance(page, dict) and not page.get("archived")
    ]


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:500] or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase or f"HTTP {response.status_code}"
