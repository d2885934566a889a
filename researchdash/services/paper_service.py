"""
论文服务 (Paper Service)

功能 (Function):
处理不依赖 Notion 的三类论文请求：
1. `search`: 通过 arXiv 接口按查询词或关键词列表搜索论文。
2. `area_papers`: 调用 n8n 工作流获取某个研究领域的候选论文，并映射为 `AreaPaper`。
3. `open_pdf`: 打开远程 PDF 的流式响应，并计算下载文件名，供下载端点转发。

交互 (Interaction):
- 依赖 (Depends on): `ArxivRepository`、`N8nWebhookClient`、`PdfDownloader`。
- 被调用 (Called by): `researchdash.api.v1.endpoints.areas`。

错误处理 (Error Handling):
- 输入错误抛出 `InvalidRequestError` (400)。
- 外部调用失败抛出 `UpstreamError`，对调用方只返回通用信息，细节仅写入日志。
"""

import logging
import re
import time
from typing import Any, Dict, List, Optional, Tuple

import httpx

from researchdash.core.exceptions import (
    ArxivAPIError,
    DownloadError,
    InvalidRequestError,
    NotConfiguredError,
    UpstreamError,
    WebhookError,
)
from researchdash.models.paper import AreaPaper, ArxivPaper
from researchdash.repositories.arxiv_repo import ArxivRepository
from researchdash.repositories.pdf_repo import PdfDownloader
from researchdash.repositories.webhook_repo import N8nWebhookClient

logger = logging.getLogger(__name__)

DEFAULT_QUERY_LIMIT = 20
DEFAULT_KEYWORD_LIMIT = 30
MAX_FILENAME_LENGTH = 80

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9\-_ ]")


def pdf_filename(title: Optional[str]) -> str:
    """
    Attachment name for a downloaded paper: the title with everything but
    ASCII letters, digits, space, "-" and "_" removed, cut to 80 characters.
    """
    cleaned = _UNSAFE_FILENAME_CHARS.sub("", title or "paper")
    return f"{cleaned[:MAX_FILENAME_LENGTH]}.pdf"


def split_keywords(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [word.strip() for word in raw.split(",") if word.strip()]


class PaperService:
    def __init__(
        self,
        arxiv_repo: ArxivRepository,
        webhook_client: N8nWebhookClient,
        pdf_downloader: PdfDownloader,
    ):
        self.arxiv_repo = arxiv_repo
        self.webhook_client = webhook_client
        self.pdf_downloader = pdf_downloader

    async def search(
        self,
        query: Optional[str] = None,
        keywords: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[ArxivPaper]:
        """
        Searches arXiv by free-text `query` or by comma-separated `keywords`
        (ORed together). Keywords win when both are given.

        Args:
            query: Free-text query.
            keywords: Comma-separated keywords; blanks are ignored.
            limit: Maximum number of results. Defaults to 20 for a query and 30 for keywords.

        Returns:
            List[ArxivPaper]: At most `limit` papers in the order arXiv returned them.
        """
        keyword_list = split_keywords(keywords)
        query = (query or "").strip()
        if not keyword_list and not query:
            raise InvalidRequestError("Query or keywords required")

        try:
            if keyword_list:
                max_results = limit if limit is not None else DEFAULT_KEYWORD_LIMIT
                papers = await self.arxiv_repo.search_by_keywords(keyword_list, max_results)
            else:
                max_results = limit if limit is not None else DEFAULT_QUERY_LIMIT
                papers = await self.arxiv_repo.search(query, max_results)
        except ArxivAPIError as e:
            logger.error(f"arXiv search failed: {e}")
            raise UpstreamError("Failed to search arXiv", detail=str(e)) from e

        return papers[:max_results]

    @staticmethod
    def _to_area_paper(item: Dict[str, Any], index: int, stamp: int) -> AreaPaper:
        return AreaPaper(
            id=f"n8n-{index}-{stamp}",
            title=str(item.get("title") or ""),
            authors=str(item.get("authors") or ""),
            description=str(item.get("abstract") or ""),
            date=str(item.get("date") or ""),
            pdf_link=str(item.get("pdf_url") or ""),
        )

    async def area_papers(
        self,
        tag: Optional[str],
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> List[AreaPaper]:
        """Candidate papers for a research area from the n8n workflow; items without a title are dropped."""
        if not tag or not tag.strip():
            raise InvalidRequestError("Tag is required")
        if not self.webhook_client.is_configured():
            raise NotConfiguredError("n8n webhook not configured")

        try:
            items = await self.webhook_client.fetch_papers(tag.strip(), date_from, date_to)
        except WebhookError as e:
            logger.error(f"Error fetching papers from n8n: {e}")
            raise UpstreamError("Failed to fetch papers", detail=str(e)) from e

        stamp = int(time.time() * 1000)
        papers = [self._to_area_paper(item, i, stamp) for i, item in enumerate(items)]
        return [paper for paper in papers if paper.title]

    async def open_pdf(
        self, url: Optional[str], title: Optional[str] = None
    ) -> Tuple[httpx.Response, str]:
        """
        Opens the remote PDF for streaming.

        Returns:
            Tuple[httpx.Response, str]: The upstream response (body unread; the
            caller must close it) and the attachment filename.
        """
        if not url or not url.strip():
            raise InvalidRequestError("URL is required")

        try:
            response = await self.pdf_downloader.open(url.strip())
        except DownloadError as e:
            logger.error(f"Error downloading PDF: {e}")
            raise UpstreamError("Failed to download PDF", detail=str(e)) from e

        return response, pdf_filename(title or "paper")
