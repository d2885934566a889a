# -*- coding: utf-8 -*-
"""
文件目的：测试 `/api/v1/feed` 端点（订阅关键词 CRUD 与按主题的论文列表），
以及不替换任何依赖时，真实的依赖注入链能否把请求送到服务层。
"""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from researchdash.core.exceptions import NotFoundError
from researchdash.models.area import FeedKeyword
from researchdash.models.paper import TopicPaper

pytestmark = pytest.mark.asyncio


async def test_list_keywords(client: AsyncClient, mock_keyword_service: AsyncMock) -> None:
    mock_keyword_service.list_keywords.return_value = [
        FeedKeyword(id="page-1", name="Machine Learning", active=True, database_id="db-ml"),
        FeedKeyword(id="page-2", name="Autism", active=False),
    ]

    response = await client.get("/api/v1/feed/keywords")

    assert response.status_code == 200
    assert response.json() == {
        "keywords": [
            {"id": "page-1", "name": "Machine Learning", "active": True, "databaseId": "db-ml"},
            {"id": "page-2", "name": "Autism", "active": False, "databaseId": None},
        ]
    }


async def test_keyword_writes(client: AsyncClient, mock_keyword_service: AsyncMock) -> None:
    mock_keyword_service.create.return_value = "page-3"

    created = await client.post("/api/v1/feed/keywords", json={"name": "EEG"})
    updated = await client.patch("/api/v1/feed/keywords", json={"id": "page-3", "active": False})
    deleted = await client.delete("/api/v1/feed/keywords", params={"id": "page-3"})

    assert created.json() == {"success": True, "id": "page-3"}
    assert updated.json() == {"success": True}
    assert deleted.json() == {"success": True}
    mock_keyword_service.delete.assert_awaited_once_with("page-3")


async def test_topic_papers(client: AsyncClient, mock_topic_feed_service: AsyncMock) -> None:
    mock_topic_feed_service.list_papers.return_value = [
        TopicPaper(id="page-1", title="Diffusion", pdf_link="https://x/1.pdf", subject="cs.LG")
    ]

    response = await client.get("/api/v1/feed/papers", params={"topic": "Machine Learning"})

    assert response.status_code == 200
    paper = response.json()["papers"][0]
    assert paper["pdfLink"] == "https://x/1.pdf"
    assert paper["subject"] == "cs.LG"
    mock_topic_feed_service.list_papers.assert_awaited_once_with("Machine Learning")


async def test_unknown_topic(client: AsyncClient, mock_topic_feed_service: AsyncMock) -> None:
    mock_topic_feed_service.list_papers.side_effect = NotFoundError("Unknown topic")

    response = await client.get("/api/v1/feed/papers", params={"topic": "Astrology"})

    assert response.status_code == 404
    assert response.json() == {"error": "Unknown topic"}


# --- 未替换依赖：真实的 provider 链 ---


async def test_real_providers_reject_before_calling_out(client: AsyncClient) -> None:
    unknown_topic = await client.get("/api/v1/feed/papers", params={"topic": "Astrology"})
    missing_title = await client.post("/api/v1/assumptions", json={"description": "x"})
    missing_query = await client.get("/api/v1/areas/search")

    assert unknown_topic.status_code == 404
    assert unknown_topic.json() == {"error": "Unknown topic"}
    assert missing_title.status_code == 400
    assert missing_title.json() == {"error": "Title is required"}
    assert missing_query.status_code == 400
    assert missing_query.json() == {"error": "Query or keywords required"}


async def test_unknown_route_uses_error_shape(client: AsyncClient) -> None:
    response = await client.get("/api/v1/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
