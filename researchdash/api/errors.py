"""
全局异常处理器 (Global Exception Handlers)

功能 (Function):
把所有错误统一渲染为 `{"error": "<message>"}`：
1. `ResearchDashError` 及其子类：使用异常自带的 `status_code` 和对外消息。
2. `RequestValidationError`：422，附带 `details` 列表。
3. Starlette `HTTPException`（例如路由不存在的 404、方法不允许的 405）。
4. 其他未处理异常：500，只返回通用信息，完整堆栈写入日志。

交互 (Interaction):
- 被调用 (Called by): `researchdash.main` 以及测试中的 `test_app` fixture，通过 `register_exception_handlers(app)` 注册。
"""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from researchdash.core.exceptions import ResearchDashError, UpstreamError

logger = logging.getLogger(__name__)


def error_body(message: str, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"error": message}
    body.update(extra)
    return body


async def research_dash_error_handler(
    request: Request, exc: ResearchDashError
) -> JSONResponse:
    request_id = id(request)
    if isinstance(exc, UpstreamError) and exc.detail:
        # Detail stays in the logs
        logger.error(
            f"[{request_id}] {request.method} {request.url.path} -> {exc.status_code} "
            f"'{exc.message}' (cause: {exc.detail})"
        )
    elif exc.status_code >= 500:
        logger.error(
            f"[{request_id}] {request.method} {request.url.path} -> {exc.status_code} '{exc.message}'"
        )
    else:
        logger.info(
            f"[{request_id}] {request.method} {request.url.path} -> {exc.status_code} '{exc.message}'"
        )
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = jsonable_encoder(exc.errors())
    logger.warning(
        f"请求验证失败 [{id(request)}] {request.method} {request.url.path}: {errors}"
    )
    return JSONResponse(
        status_code=422, content=error_body("Invalid request", details=errors)
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message),
        headers=getattr(exc, "headers", None),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort for anything no endpoint translated. The traceback is logged, never returned."""
    logger.exception(
        f"全局异常处理器捕获到未处理异常 [{id(request)}] {request.method} {request.url.path}"
    )
    return JSONResponse(status_code=500, content=error_body("Internal server error"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ResearchDashError, research_dash_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, global_exception_handler)
