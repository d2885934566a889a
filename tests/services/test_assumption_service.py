# -*- coding: utf-8 -*-
"""
文件目的：测试 `AssumptionService`。

重点：
- 查询过滤：`status` / `confidence` 为空或 "all" 时不加过滤条件，按创建时间倒序。
- 过滤选项：从返回记录中去重得出，记录为空时回退到固定的候选列表。
- 创建：标题必填，状态 / 置信度默认 Pending / Medium。
- 部分更新：只写入请求体中出现的字段，"" 或 null 清空属性，标题不允许清空。
"""

import pytest

from researchdash.core.exceptions import InvalidRequestError, NotConfiguredError, UpstreamError
from researchdash.models.assumption import AssumptionCreateRequest, AssumptionUpdateRequest
from researchdash.repositories import notion_properties as props
from researchdash.services.assumption_service import AssumptionService

pytestmark = pytest.mark.asyncio


def assumption_page(title, status=None, confidence=None, description=None):
    properties = {"Name": props.title_value(title)}
    if status:
        properties["Status"] = props.select_value(status)
    if confidence:
        properties["Confidence"] = props.select_value(confidence)
    if description:
        properties["Description"] = props.rich_text_value(description)
    return properties


async def test_list_without_filters(assumption_service, fake_notion) -> None:
    page_id = fake_notion.add_page(
        "db-assumptions",
        assumption_page("Sleep affects focus", "Testing", "High", "Needs data"),
    )

    result = await assumption_service.list_assumptions(status="all", confidence=None)

    body = fake_notion.bodies("POST", "/query")[0]
    assert "filter" not in body
    assert body["sorts"] == [{"timestamp": "created_time", "direction": "descending"}]

    item = result.items[0]
    assert item.id == page_id
    assert item.title == "Sleep affects focus"
    assert item.status == "Testing"
    assert item.confidence == "High"
    assert item.description == "Needs data"
    assert item.evidence is None
    assert item.notion_url == f"https://www.notion.so/{page_id}"
    assert result.filters.statuses == ["Testing"]
    assert result.filters.confidences == ["High"]


async def test_list_with_filters(assumption_service, fake_notion) -> None:
    await assumption_service.list_assumptions(status="Validated", confidence="Low")

    body = fake_notion.bodies("POST", "/query")[0]
    assert body["filter"] == {
        "and": [
            {"property": "Status", "select": {"equals": "Validated"}},
            {"property": "Confidence", "select": {"equals": "Low"}},
        ]
    }


async def test_empty_list_uses_fallback_filters(assumption_service) -> None:
    result = await assumption_service.list_assumptions()

    assert result.items == []
    assert result.filters.statuses == ["Pending", "Testing", "Validated", "Invalidated"]
    assert result.filters.confidences == ["Low", "Medium", "High"]


async def test_defaults_for_missing_properties(assumption_service, fake_notion) -> None:
    fake_notion.add_page("db-assumptions", {})

    result = await assumption_service.list_assumptions()

    item = result.items[0]
    assert (item.title, item.status, item.confidence) == ("Untitled", "Pending", "Medium")


async def test_list_upstream_failure(assumption_service, fake_notion) -> None:
    fake_notion.fail_queries = True

    with pytest.raises(UpstreamError, match="Failed to fetch assumptions"):
        await assumption_service.list_assumptions()


async def test_create_applies_defaults(assumption_service, fake_notion) -> None:
    page_id = await assumption_service.create_assumption(
        AssumptionCreateRequest(title="Music helps coding", evidence="Anecdotal")
    )

    assert page_id in fake_notion.pages
    properties = fake_notion.bodies("POST", "/pages")[0]["properties"]
    assert properties["Status"] == {"select": {"name": "Pending"}}
    assert properties["Confidence"] == {"select": {"name": "Medium"}}
    assert properties["Evidence"] == {"rich_text": [{"text": {"content": "Anecdotal"}}]}
    assert "Description" not in properties


async def test_create_blank_choices_use_defaults(assumption_service, fake_notion) -> None:
    request = AssumptionCreateRequest.model_validate(
        {"title": "H2", "status": "", "confidence": " "}
    )

    await assumption_service.create_assumption(request)

    properties = fake_notion.bodies("POST", "/pages")[0]["properties"]
    assert properties["Status"] == {"select": {"name": "Pending"}}
    assert properties["Confidence"] == {"select": {"name": "Medium"}}


async def test_create_requires_title(assumption_service, fake_notion) -> None:
    with pytest.raises(InvalidRequestError, match="Title is required"):
        await assumption_service.create_assumption(AssumptionCreateRequest(description="x"))

    assert fake_notion.requests == []


async def test_update_writes_only_present_fields(assumption_service, fake_notion) -> None:
    page_id = fake_notion.add_page(
        "db-assumptions", assumption_page("H1", "Pending", "Low", "old text")
    )
    request = AssumptionUpdateRequest.model_validate(
        {"id": page_id, "status": "Validated", "description": ""}
    )

    await assumption_service.update_assumption(request)

    assert fake_notion.bodies("PATCH", page_id) == [
        {
            "properties": {
                "Status": {"select": {"name": "Validated"}},
                "Description": {"rich_text": []},
            }
        }
    ]


async def test_update_null_clears_select(assumption_service, fake_notion) -> None:
    page_id = fake_notion.add_page("db-assumptions", assumption_page("H1", "Pending"))
    request = AssumptionUpdateRequest.model_validate({"id": page_id, "confidence": None})

    await assumption_service.update_assumption(request)

    assert fake_notion.bodies("PATCH", page_id) == [
        {"properties": {"Confidence": {"select": None}}}
    ]


async def test_update_blank_status_clears_select(assumption_service, fake_notion) -> None:
    page_id = fake_notion.add_page("db-assumptions", assumption_page("H1", "Testing"))
    request = AssumptionUpdateRequest.model_validate({"id": page_id, "status": ""})

    assert "status" in request.model_fields_set
    await assumption_service.update_assumption(request)

    assert fake_notion.bodies("PATCH", page_id) == [{"properties": {"Status": {"select": None}}}]


async def test_update_rejects_empty_title(assumption_service, fake_notion) -> None:
    request = AssumptionUpdateRequest.model_validate({"id": "page-1", "title": "  "})

    with pytest.raises(InvalidRequestError, match="Title cannot be empty"):
        await assumption_service.update_assumption(request)

    assert fake_notion.requests == []


async def test_update_requires_id(assumption_service) -> None:
    with pytest.raises(InvalidRequestError, match="ID is required"):
        await assumption_service.update_assumption(AssumptionUpdateRequest(title="x"))


async def test_delete_archives(assumption_service, fake_notion) -> None:
    page_id = fake_notion.add_page("db-assumptions", assumption_page("H1"))

    await assumption_service.delete_assumption(page_id)

    assert fake_notion.live_pages("db-assumptions") == []


async def test_delete_failure(assumption_service) -> None:
    with pytest.raises(UpstreamError, match="Failed to delete assumption"):
        await assumption_service.delete_assumption("page-404")


async def test_not_configured(notion_repo, fake_notion) -> None:
    service = AssumptionService(notion_repo, None)

    with pytest.raises(NotConfiguredError, match="Assumptions database not configured"):
        await service.list_assumptions()

    assert fake_notion.requests == []
