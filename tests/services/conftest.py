# tests/services/conftest.py

"""
服务层测试共用的 Fixtures。

Notion 支撑的服务直接使用根 `conftest.py` 中的 `notion_repo`（真实仓库 + 内存版 Notion），
这样既能断言服务发出的查询 / 写入请求体，也能断言服务对返回数据的扁平化结果。
`PaperService` 的依赖 (arXiv / n8n / PDF) 则用 `AsyncMock(spec=...)` 替代。
"""

from unittest.mock import AsyncMock

import pytest

from researchdash.repositories.arxiv_repo import ArxivRepository
from researchdash.repositories.notion_repo import NotionRepository
from researchdash.repositories.pdf_repo import PdfDownloader
from researchdash.repositories.webhook_repo import N8nWebhookClient
from researchdash.services.area_service import AreaService
from researchdash.services.assumption_service import AssumptionService
from researchdash.services.content_service import ContentService
from researchdash.services.feed_service import KeywordService, TopicFeedService
from researchdash.services.paper_service import PaperService
from researchdash.services.saved_paper_service import SavedPaperService
from researchdash.services.source_service import SourceService


@pytest.fixture
def area_service(notion_repo: NotionRepository) -> AreaService:
    return AreaService(notion_repo, "db-areas", default_names=["Machine Learning", "ADHD"])


@pytest.fixture
def keyword_service(notion_repo: NotionRepository) -> KeywordService:
    return KeywordService(notion_repo, "db-keywords", {"Machine Learning": "db-ml"})


@pytest.fixture
def topic_feed_service(notion_repo: NotionRepository) -> TopicFeedService:
    return TopicFeedService(notion_repo, {"Machine Learning": "db-ml"})


@pytest.fixture
def assumption_service(notion_repo: NotionRepository) -> AssumptionService:
    return AssumptionService(notion_repo, "db-assumptions")


@pytest.fixture
def source_service(notion_repo: NotionRepository) -> SourceService:
    return SourceService(notion_repo, "db-sources")


@pytest.fixture
def content_service(notion_repo: NotionRepository) -> ContentService:
    return ContentService(notion_repo, "db-content")


@pytest.fixture
def saved_paper_service(notion_repo: NotionRepository) -> SavedPaperService:
    return SavedPaperService(notion_repo, "db-saved", clear_concurrency=2, text_limit=2000)


@pytest.fixture
def mock_arxiv_repo() -> AsyncMock:
    return AsyncMock(spec=ArxivRepository)


@pytest.fixture
def mock_webhook_client() -> AsyncMock:
    webhook = AsyncMock(spec=N8nWebhookClient)
    # is_configured is synchronous on the real class
    webhook.is_configured = lambda: True
    return webhook


@pytest.fixture
def mock_pdf_downloader() -> AsyncMock:
    return AsyncMock(spec=PdfDownloader)


@pytest.fixture
def paper_service(
    mock_arxiv_repo: AsyncMock,
    mock_webhook_client: AsyncMock,
    mock_pdf_downloader: AsyncMock,
) -> PaperService:
    return PaperService(mock_arxiv_repo, mock_webhook_client, mock_pdf_downloader)
