"""
File: app/core/middleware.py
Description: 中间件配置与实现

本模块负责：
1. RequestLogMiddleware：
   - 生成 UUID v7 request_id 并绑定 Loguru 上下文
   - 记录访问日志 (query 参数与跳转地址脱敏后记录)
   - 添加 X-Request-ID 响应头
2. register_middlewares：统一注册 CORS 与 RequestLogMiddleware

Created: 2025-11-24
Updated: 2026-03-02 (OpenID 回调 query / 跳转地址脱敏)
"""

import time
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from uuid6 import uuid7

from app.core.config import settings
from app.core.logging import logger
from app.utils.masking import mask_sensitive_data, mask_url_secrets

# 跳过访问日志的路径（健康检查等高频低价值请求）
SKIP_LOG_PATHS: set[str] = {"/health", "/health/", "/favicon.ico"}

REQUEST_ID_HEADER = "X-Request-ID"


def _access_fields(request: Request, response: Response | None) -> dict[str, Any]:
    """
    访问日志字段。
    OpenID 回调的 query 含签名与钱包地址，成功跳转地址含 data，均需脱敏。
    """
    fields: dict[str, Any] = {
        "method": request.method,
        "path": request.url.path,
        "query": mask_sensitive_data(dict(request.query_params)),
        "client_ip": request.client.host if request.client else "unknown",
    }
    if response is not None:
        fields["status_code"] = response.status_code
        location = response.headers.get("location")
        if location:
            fields["location"] = mask_url_secrets(location.split("&data=")[0])
    return fields


class RequestLogMiddleware(BaseHTTPMiddleware):
    """
    全局请求日志中间件。
    Router / Service / Client 产生的日志都会携带同一个 request_id。
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = str(uuid7())
        # 异常处理器从 request.state 读取
        request.state.request_id = request_id

        with logger.contextualize(request_id=request_id):
            start_time = time.perf_counter()

            try:
                response = await call_next(request)
            except Exception as exc:
                logger.bind(
                    **_access_fields(request, None),
                    duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                ).opt(exception=exc).error("Request failed with unhandled exception")
                raise

            response.headers[REQUEST_ID_HEADER] = request_id

            if request.url.path not in SKIP_LOG_PATHS:
                logger.bind(
                    **_access_fields(request, response),
                    duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
                ).info("Request finished")

            return response


def register_middlewares(app: FastAPI) -> None:
    """
    统一注册所有中间件。
    后注册的中间件先执行 (请求进入方向)。
    """
    # 1. CORS，前端站点直接调用 JSON 接口
    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[
                str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS
            ],
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=[REQUEST_ID_HEADER],
        )

    # 2. Request Log & ID (最后注册，以便最先拦截请求)
    app.add_middleware(RequestLogMiddleware)
