# -*- coding: utf-8 -*-
"""
ResearchDash 后端 FastAPI 应用入口文件

主要职责:
1.  **初始化 FastAPI 应用**: 创建 `FastAPI` 实例，并通过 `functools.partial` 把 `settings` 传入 `lifespan`。
2.  **配置中间件**:
    *   `CORSMiddleware`: 允许 `settings.cors_origins` 中的前端访问。
    *   `DetailedLoggingMiddleware`: 记录每个请求的方法、路径、查询参数、客户端，以及响应状态码和耗时。
3.  **注册异常处理器**: `register_exception_handlers` 把所有错误渲染为 `{"error": ...}`。
4.  **注册路由**: 把 `researchdash.api.v1.api.api_router` 挂到 `settings.api_v1_str` 下。
5.  **基础端点**: `/` 和 `/health`。
6.  **本地启动**: `python -m researchdash.main` 启动 Uvicorn 开发服务器。
"""

import logging
import time
from functools import partial
from typing import Awaitable, Callable, Dict

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from researchdash.core.config import settings
from researchdash.logging_config import setup_logging

setup_logging(settings.log_level)
logger = logging.getLogger("researchdash.main")

from researchdash.api.errors import register_exception_handlers  # noqa: E402
from researchdash.api.v1.api import api_router as api_v1_router  # noqa: E402
from researchdash.core.db import lifespan  # noqa: E402

# --- 应用初始化与 Lifespan ---
lifespan_with_settings = partial(lifespan, settings=settings)

app = FastAPI(
    title=f"{settings.project_name} API",
    description="Backend for a personal research-tracking dashboard (Notion, arXiv, n8n).",
    version="1.0.0",
    lifespan=lifespan_with_settings,
)

# --- 中间件配置 ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class DetailedLoggingMiddleware(BaseHTTPMiddleware):
    """记录请求概要与响应状态；4xx 记为 WARNING，5xx 记为 ERROR。"""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = id(request)
        start_time = time.time()

        method = request.method
        path = request.url.path
        client = (
            f"{request.client.host}:{request.client.port}" if request.client else "Unknown"
        )
        logger.debug(f"→ 请求开始 [{request_id}] {method} {path} 客户端: {client}")
        logger.debug(f"→ 查询参数 [{request_id}]: {dict(request.query_params)}")

        try:
            response = await call_next(request)
        except Exception:
            process_time = (time.time() - start_time) * 1000
            logger.exception(
                f"! 请求处理异常 [{request_id}] {method} {path} - 耗时: {process_time:.2f}ms"
            )
            raise

        process_time = (time.time() - start_time) * 1000
        status_code = response.status_code
        log_msg = f"← 响应完成 [{request_id}] {method} {path} - 状态码: {status_code} - 耗时: {process_time:.2f}ms"
        if status_code >= 500:
            logger.error(log_msg)
        elif status_code >= 400:
            logger.warning(log_msg)
        else:
            logger.debug(log_msg)
        return response


app.add_middleware(DetailedLoggingMiddleware)

# --- 全局异常处理器 ---
register_exception_handlers(app)


# --- API 路由与基础端点 ---
@app.get("/")
async def read_root() -> Dict[str, str]:
    return {"message": f"Welcome to {settings.project_name} API"}


@app.get("/health", status_code=200, tags=["Health"])
async def health_check() -> Dict[str, str]:
    """Liveness only; external services are not probed."""
    return {"status": "ok"}


app.include_router(api_v1_router, prefix=settings.api_v1_str)


if __name__ == "__main__":
    logger.info(f"启动 Uvicorn 开发服务器 (environment: {settings.environment})")
    uvicorn.run(
        "researchdash.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
