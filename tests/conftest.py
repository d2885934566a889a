# tests/conftest.py

"""
文件目的：定义 Pytest Fixtures 和测试配置

本文件定义了 ResearchDash 后端测试所需的 Fixtures：
- **测试配置** (`test_settings`): 一个独立于进程环境的 `Settings` 实例，所有外部地址都指向 `*.test` 域名。
- **测试应用实例** (`test_app`): 使用 `test_settings` 绑定 lifespan、注册异常处理器并挂载 v1 路由的 FastAPI 应用。
- **HTTP 测试客户端** (`client`): 通过 `LifespanManager` + `ASGITransport` 访问 `test_app`。
- **服务模拟对象**: `mock_*_service` 系列 fixture 用 `AsyncMock(spec=...)` 替换服务提供者，
  在测试结束后恢复原始的 `dependency_overrides`。
- **内存版 Notion** (`fake_notion`): 基于 `httpx.MockTransport` 的最小 Notion 实现，
  支持数据库查询（标题等值过滤）、创建页面、更新 / 归档页面，用于仓库层和服务层测试。
"""

import json
import logging
from functools import partial
from typing import Any, AsyncGenerator, Callable, Dict, Generator, List, Optional, Set
from unittest.mock import AsyncMock

import httpx
import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from researchdash.api.errors import register_exception_handlers
from researchdash.api.v1 import dependencies as deps
from researchdash.api.v1.api import api_router as api_v1_router
from researchdash.core.config import Settings
from researchdash.core.db import lifespan
from researchdash.repositories import notion_properties as props
from researchdash.repositories.notion_repo import NotionRepository
from researchdash.services.area_service import AreaService
from researchdash.services.assumption_service import AssumptionService
from researchdash.services.content_service import ContentService
from researchdash.services.feed_service import KeywordService, TopicFeedService
from researchdash.services.paper_service import PaperService
from researchdash.services.saved_paper_service import SavedPaperService
from researchdash.services.source_service import SourceService

logger = logging.getLogger(__name__)

NOTION_BASE = "https://notion.test/v1"


# --- 测试配置 ---
@pytest.fixture
def test_settings() -> Settings:
    """Settings pointing every external service at a *.test host."""
    return Settings(
        _env_file=None,
        project_name="ResearchDash Test",
        environment="test",
        notion_token="secret_test_token",
        notion_api_base=NOTION_BASE,
        notion_areas_database_id="db-areas",
        notion_keywords_database_id="db-keywords",
        notion_assumptions_database_id="db-assumptions",
        notion_sources_database_id="db-sources",
        notion_saved_database_id="db-saved",
        notion_content_database_id="db-content",
        notion_topic_databases={"Machine Learning": "db-ml"},
        n8n_webhook_url="https://n8n.test/webhook/papers",
        arxiv_api_url="https://arxiv.test/api/query",
        http_timeout_seconds=5.0,
        saved_clear_concurrency=2,
    )


# --- 测试应用实例 ---
@pytest.fixture
def test_app(test_settings: Settings) -> FastAPI:
    """FastAPI app wired like `researchdash.main`, minus CORS and request logging."""
    configured_lifespan = partial(lifespan, settings=test_settings)
    app = FastAPI(title="Test ResearchDash", lifespan=configured_lifespan)
    register_exception_handlers(app)
    app.include_router(api_v1_router, prefix="/api/v1")
    return app


@pytest_asyncio.fixture
async def client(test_app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Runs the app's lifespan and yields a client talking to it in-process."""
    async with LifespanManager(test_app) as manager:
        transport = ASGITransport(app=manager.app)
        async with AsyncClient(transport=transport, base_url="http://test") as async_client:
            yield async_client


# --- 服务模拟对象 ---
def _override(
    app: FastAPI, provider: Callable[..., Any], spec: type
) -> Generator[AsyncMock, None, None]:
    mock_service = AsyncMock(spec=spec)
    original_overrides = app.dependency_overrides.copy()
    app.dependency_overrides[provider] = lambda: mock_service
    try:
        yield mock_service
    finally:
        app.dependency_overrides = original_overrides


@pytest.fixture
def mock_area_service(test_app: FastAPI) -> Generator[AsyncMock, None, None]:
    yield from _override(test_app, deps.get_area_service, AreaService)


@pytest.fixture
def mock_keyword_service(test_app: FastAPI) -> Generator[AsyncMock, None, None]:
    yield from _override(test_app, deps.get_keyword_service, KeywordService)


@pytest.fixture
def mock_topic_feed_service(test_app: FastAPI) -> Generator[AsyncMock, None, None]:
    yield from _override(test_app, deps.get_topic_feed_service, TopicFeedService)


@pytest.fixture
def mock_assumption_service(test_app: FastAPI) -> Generator[AsyncMock, None, None]:
    yield from _override(test_app, deps.get_assumption_service, AssumptionService)


@pytest.fixture
def mock_source_service(test_app: FastAPI) -> Generator[AsyncMock, None, None]:
    yield from _override(test_app, deps.get_source_service, SourceService)


@pytest.fixture
def mock_content_service(test_app: FastAPI) -> Generator[AsyncMock, None, None]:
    yield from _override(test_app, deps.get_content_service, ContentService)


@pytest.fixture
def mock_saved_paper_service(test_app: FastAPI) -> Generator[AsyncMock, None, None]:
    yield from _override(test_app, deps.get_saved_paper_service, SavedPaperService)


@pytest.fixture
def mock_paper_service(test_app: FastAPI) -> Generator[AsyncMock, None, None]:
    yield from _override(test_app, deps.get_paper_service, PaperService)


# --- 内存版 Notion ---
class FakeNotion:
    """
    Just enough of the Notion API for the repository and services:
    database query (optionally filtered by title equality), page create and
    page update / archive. Every request is recorded in `requests`.
    """

    def __init__(self) -> None:
        self.pages: Dict[str, Dict[str, Any]] = {}
        self.requests: List[httpx.Request] = []
        self.fail_archive_ids: Set[str] = set()
        self.fail_queries = False
        self._counter = 0

    def add_page(
        self,
        database_id: str,
        properties: Dict[str, Any],
        archived: bool = False,
        created_time: Optional[str] = None,
    ) -> str:
        self._counter += 1
        page_id = f"page-{self._counter}"
        self.pages[page_id] = {
            "object": "page",
            "id": page_id,
            "parent": {"database_id": database_id},
            "archived": archived,
            "created_time": created_time or f"2026-01-{self._counter:02d}T00:00:00.000Z",
            "url": f"https://www.notion.so/{page_id}",
            "properties": dict(properties),
        }
        return page_id

    def live_pages(self, database_id: str) -> List[Dict[str, Any]]:
        return [
            page
            for page in self.pages.values()
            if page["parent"]["database_id"] == database_id and not page["archived"]
        ]

    def bodies(self, method: str, path_suffix: str) -> List[Dict[str, Any]]:
        return [
            json.loads(r.content or b"{}")
            for r in self.requests
            if r.method == method and r.url.path.endswith(path_suffix)
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = request.url.path.strip("/").split("/")
        body = json.loads(request.content or b"{}")

        if request.method == "POST" and parts[-1] == "query":
            if self.fail_queries:
                return httpx.Response(502, json={"message": "Bad gateway"})
            results = [
                p for p in self.pages.values() if p["parent"]["database_id"] == parts[-2]
            ]
            flt = body.get("filter") or {}
            if "title" in flt and "equals" in flt["title"]:
                results = [
                    p
                    for p in results
                    if props.read_title(p["properties"], flt["property"])
                    == flt["title"]["equals"]
                ]
            return httpx.Response(
                200,
                json={"object": "list", "results": results, "has_more": False, "next_cursor": None},
            )

        if request.method == "POST" and parts[-1] == "pages":
            page_id = self.add_page(body["parent"]["database_id"], body.get("properties", {}))
            return httpx.Response(200, json=self.pages[page_id])

        if request.method == "PATCH" and len(parts) >= 2 and parts[-2] == "pages":
            page_id = parts[-1]
            page = self.pages.get(page_id)
            if page is None:
                return httpx.Response(404, json={"message": f"Could not find page {page_id}"})
            if body.get("archived") and page_id in self.fail_archive_ids:
                return httpx.Response(500, json={"message": "Internal error"})
            if body.get("archived"):
                page["archived"] = True
            page["properties"].update(body.get("properties") or {})
            return httpx.Response(200, json=page)

        return httpx.Response(400, json={"message": "Unsupported request"})


@pytest.fixture
def fake_notion() -> FakeNotion:
    return FakeNotion()


@pytest_asyncio.fixture
async def notion_repo(fake_notion: FakeNotion) -> AsyncGenerator[NotionRepository, None]:
    """A real NotionRepository whose HTTP traffic goes to `fake_notion`."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_notion.handler)) as http:
        yield NotionRepository(http, token="secret_test_token", api_base=NOTION_BASE)
