"""
File: app/core/http.py
Description: 出站 HTTP 客户端管理 (httpx.AsyncClient)

本模块负责：
1. 创建全局共享的 httpx.AsyncClient (复用连接池)
2. 统一设置 Steam 出站请求超时 (STEAM_HTTP_TIMEOUT)
3. 提供依赖注入所需的客户端生成器
4. 在 lifespan shutdown 阶段关闭客户端

注意：
不做自动重试。任何一次上游失败都直接映射为领域错误返回给调用方。

Created: 2026-03-02
"""

from collections.abc import AsyncGenerator

import httpx

from app.core.config import settings

# 浏览器风格请求头 (steamcommunity.com 对缺省 UA 的请求更容易限流)
DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    ),
    "Accept": "application/json, text/plain, */*",
    "Accept-Language": "en-US,en;q=0.9",
}

http_client: httpx.AsyncClient = httpx.AsyncClient(
    timeout=httpx.Timeout(settings.STEAM_HTTP_TIMEOUT),
    headers=DEFAULT_HEADERS,
    follow_redirects=False,
)


async def get_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    获取共享 HTTP 客户端依赖。
    测试中通过 app.dependency_overrides 注入 MockTransport 客户端。
    """
    yield http_client


async def close_http_client() -> None:
    """关闭共享 HTTP 客户端，释放连接池。"""
    await http_client.aclose()
