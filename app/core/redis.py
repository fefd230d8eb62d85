"""
File: app/core/redis.py
Description: Redis 客户端管理 (Async)

用途：记录已消费的 OpenID response_nonce (SET NX EX)，拒绝重放的断言。

本模块负责：
1. 创建全局 Redis 客户端 (redis-py asyncio，内部维护连接池，首次命令时才建立连接)
2. 提供依赖注入所需的客户端生成器 (测试中替换为内存实现)
3. 在 lifespan shutdown 阶段关闭连接池

注意：
- decode_responses=True，读取结果为 str
- 设置 socket 超时：回调请求中 Redis 故障会以 server_error 重定向结束

Created: 2025-12-05
Updated: 2026-03-02 (nonce 防重放，socket 超时)
"""

from collections.abc import AsyncGenerator

from redis.asyncio import Redis, from_url

from app.core.config import settings

redis_client: Redis = from_url(
    settings.REDIS_URL,
    encoding="utf-8",
    decode_responses=True,
    socket_timeout=settings.REDIS_SOCKET_TIMEOUT,
    socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT,
)


async def get_redis() -> AsyncGenerator[Redis, None]:
    """获取 Redis 客户端依赖。"""
    yield redis_client


async def close_redis() -> None:
    await redis_client.aclose()
