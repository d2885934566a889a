# -*- coding: utf-8 -*-
"""
API 版本 v1 的主路由器聚合文件

定义 `api_router`，把 `endpoints` 下各资源的子路由器挂到各自的前缀上。
`researchdash.main` 再把它整体挂到 `settings.api_v1_str`（默认 `/api/v1`）下，
例如 `areas.router` 中的 `/search` 最终对应 `/api/v1/areas/search`。
"""

from fastapi import APIRouter

from researchdash.api.v1.endpoints import areas as areas_endpoints
from researchdash.api.v1.endpoints import assumptions as assumptions_endpoints
from researchdash.api.v1.endpoints import content as content_endpoints
from researchdash.api.v1.endpoints import feed as feed_endpoints
from researchdash.api.v1.endpoints import saved as saved_endpoints
from researchdash.api.v1.endpoints import sources as sources_endpoints

api_router = APIRouter()

api_router.include_router(areas_endpoints.router, prefix="/areas", tags=["Areas"])
api_router.include_router(
    assumptions_endpoints.router, prefix="/assumptions", tags=["Assumptions"]
)
api_router.include_router(content_endpoints.router, prefix="/content", tags=["Content"])
api_router.include_router(feed_endpoints.router, prefix="/feed", tags=["Feed"])
api_router.include_router(saved_endpoints.router, prefix="/saved", tags=["Saved"])
api_router.include_router(sources_endpoints.router, prefix="/sources", tags=["Sources"])
