# -*- coding: utf-8 -*-
"""
FastAPI 依赖注入 (Dependency Injection) 定义文件

此文件集中定义 API 端点所需依赖项的 "提供者" (provider) 函数：
1.  **共享资源**: `get_app_state`、`get_settings`、`get_http_client` 从 `lifespan`
    放入 `request.app.state` 的对象中取出配置和共享的 `httpx.AsyncClient`。
2.  **仓库 (Repository)**: `get_notion_repository`、`get_arxiv_repository`、
    `get_webhook_client`、`get_pdf_downloader` 基于共享客户端和配置构造外部 API 的访问对象。
3.  **服务 (Service)**: 每个资源一个服务提供者，把对应的数据库 ID 等配置传入服务。

测试通过 `app.dependency_overrides` 替换这里的任一函数（通常是服务提供者）。
"""

import logging
from typing import cast

import httpx
from fastapi import Depends, Request
from starlette.datastructures import State

from researchdash.core.config import Settings
from researchdash.core.exceptions import ServiceUnavailableError
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

logger = logging.getLogger(__name__)


# --- 共享资源获取函数 --- #


def get_app_state(request: Request) -> State:
    """依赖函数：返回由 `lifespan` 初始化的应用共享状态 (`app.state`)。"""
    if not hasattr(request.app, "state"):
        logger.error("应用状态 'request.app.state' 未找到！Lifespan 可能未正确执行。")
        raise ServiceUnavailableError("Application state not initialized")
    return cast(State, request.app.state)


def get_settings(state: State = Depends(get_app_state)) -> Settings:
    settings = getattr(state, "settings", None)
    if settings is None:
        logger.error("Settings not found in app.state; lifespan did not run.")
        raise ServiceUnavailableError("Application settings not available")
    return cast(Settings, settings)


def get_http_client(state: State = Depends(get_app_state)) -> httpx.AsyncClient:
    client = getattr(state, "http_client", None)
    if client is None:
        logger.error("Shared HTTP client not found in app.state.")
        raise ServiceUnavailableError("HTTP client not available")
    return cast(httpx.AsyncClient, client)


# --- 仓库 (Repository) 提供者 --- #


def get_notion_repository(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> NotionRepository:
    return NotionRepository(
        client=client,
        token=settings.notion_token,
        api_base=settings.notion_api_base,
        notion_version=settings.notion_version,
    )


def get_arxiv_repository(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> ArxivRepository:
    return ArxivRepository(client=client, api_url=settings.arxiv_api_url)


def get_webhook_client(
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> N8nWebhookClient:
    return N8nWebhookClient(client=client, webhook_url=settings.n8n_webhook_url)


def get_pdf_downloader(
    client: httpx.AsyncClient = Depends(get_http_client),
) -> PdfDownloader:
    return PdfDownloader(client=client)


# --- 服务 (Service) 提供者 --- #


def get_area_service(
    notion_repo: NotionRepository = Depends(get_notion_repository),
    settings: Settings = Depends(get_settings),
) -> AreaService:
    return AreaService(
        notion_repo,
        settings.notion_areas_database_id,
        default_names=settings.default_areas,
    )


def get_keyword_service(
    notion_repo: NotionRepository = Depends(get_notion_repository),
    settings: Settings = Depends(get_settings),
) -> KeywordService:
    return KeywordService(
        notion_repo,
        settings.notion_keywords_database_id,
        topic_databases=settings.notion_topic_databases,
    )


def get_topic_feed_service(
    notion_repo: NotionRepository = Depends(get_notion_repository),
    settings: Settings = Depends(get_settings),
) -> TopicFeedService:
    return TopicFeedService(notion_repo, settings.notion_topic_databases)


def get_assumption_service(
    notion_repo: NotionRepository = Depends(get_notion_repository),
    settings: Settings = Depends(get_settings),
) -> AssumptionService:
    return AssumptionService(notion_repo, settings.notion_assumptions_database_id)


def get_source_service(
    notion_repo: NotionRepository = Depends(get_notion_repository),
    settings: Settings = Depends(get_settings),
) -> SourceService:
    return SourceService(notion_repo, settings.notion_sources_database_id)


def get_content_service(
    notion_repo: NotionRepository = Depends(get_notion_repository),
    settings: Settings = Depends(get_settings),
) -> ContentService:
    return ContentService(notion_repo, settings.notion_content_database_id)


def get_saved_paper_service(
    notion_repo: NotionRepository = Depends(get_notion_repository),
    settings: Settings = Depends(get_settings),
) -> SavedPaperService:
    return SavedPaperService(
        notion_repo,
        settings.notion_saved_database_id,
        clear_concurrency=settings.saved_clear_concurrency,
        text_limit=settings.notion_text_limit,
    )


def get_paper_service(
    arxiv_repo: ArxivRepository = Depends(get_arxiv_repository),
    webhook_client: N8nWebhookClient = Depends(get_webhook_client),
    pdf_downloader: PdfDownloader = Depends(get_pdf_downloader),
) -> PaperService:
    return PaperService(arxiv_repo, webhook_client, pdf_downloader)
