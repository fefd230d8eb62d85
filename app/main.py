"""
File: app/main.py
Description: FastAPI 应用入口与工厂函数

本模块负责：
1. 创建 FastAPI 应用实例 (默认响应类 ORJSONResponse，生产环境关闭文档页)
2. 生命周期 (lifespan): 启动时初始化日志并输出关键配置，
   关闭时释放出站 HTTP 客户端 / Redis / 数据库连接池
3. 组装中间件、异常处理器与路由
4. 健康检查接口 (/health)

Created: 2025-12-05
Updated: 2026-03-02 (Steam 绑定服务)
"""

import asyncio
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

# ------------------------------------------------------------------------------
# [Fix for Windows] asyncpg 在 Windows 下必须使用 SelectorEventLoop
# 必须在任何 asyncio 循环启动前执行
# ------------------------------------------------------------------------------
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())


from fastapi import FastAPI
from fastapi.responses import ORJSONResponse

from app.api_router import api_router
from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.core.http import close_http_client
from app.core.logging import logger, setup_logging
from app.core.middleware import register_middlewares
from app.core.redis import close_redis
from app.core.response import ResponseModel
from app.db.session import close_engine


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.bind(
        callback_url=settings.steam_callback_url,
        frontend_url=settings.frontend_url,
        steam_api_key_configured=bool(settings.STEAM_API_KEY),
    ).info("Steam link service starting")

    if not settings.STEAM_API_KEY:
        logger.warning("STEAM_API_KEY is not set, Steam account linking will fail")

    yield

    await close_http_client()
    await close_redis()
    await close_engine()
    logger.info("Steam link service stopped")


def create_app() -> FastAPI:
    """应用工厂函数"""
    docs_prefix = None if settings.is_production else settings.API_V1_STR

    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{docs_prefix}/openapi.json" if docs_prefix else None,
        docs_url=f"{docs_prefix}/docs" if docs_prefix else None,
        redoc_url=None,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    register_middlewares(app)
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get(
        "/health",
        tags=["health"],
        summary="健康检查",
        response_model=ResponseModel[dict[str, str]],
    )
    async def health_check():
        """负载均衡器 / 容器探针使用，返回统一响应信封。"""
        return ResponseModel.success(data={"status": "ok"})

    return app


# 暴露给 Uvicorn 运行的应用实例
app = create_app()

if __name__ == "__main__":
    # 本地调试入口
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
