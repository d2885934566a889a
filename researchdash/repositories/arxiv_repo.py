import logging
from typing import List, Sequence

import httpx

from researchdash.core.exceptions import ArxivAPIError
from researchdash.models.paper import ArxivPaper
from researchdash.parsing.arxiv_feed import parse_arxiv_feed

logger = logging.getLogger(__name__)


class ArxivRepository:
    """Queries the arXiv export API and returns parsed papers, newest submissions first."""

    def __init__(self, client: httpx.AsyncClient, api_url: str):
        self.client = client
        self.api_url = api_url

    async def search(self, query: str, max_results: int = 20) -> List[ArxivPaper]:
        params = {
            "search_query": f"all:{query}",
            "start": "0",
            "max_results": str(max_results),
            "sortBy": "submittedDate",
            "sortOrder": "descending",
        }
        logger.info(f"Searching arXiv: query='{query}', max_results={max_results}")
        try:
            response = await self.client.get(self.api_url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"arXiv request failed: {e!r}")
            raise ArxivAPIError(f"Request failed: {e!r}") from e

        if response.is_error:
            logger.error(f"arXiv returned HTTP {response.status_code}")
            raise ArxivAPIError(
                "Unexpected status", status_code=response.status_code
            )

        papers = parse_arxiv_feed(response.text)
        logger.info(f"arXiv returned {len(papers)} papers for '{query}'")
        return papers[:max_results]

    async def search_by_keywords(
        self, keywords: Sequence[str], max_results: int = 30
    ) -> List[ArxivPaper]:
        """ORs the keywords together into a single query."""
        if not keywords:
            return []
        return await self.search(" OR ".join(keywords), max_results)
