"""
File: app/api/deps.py
Description: 全局依赖注入定义 (DB Session / Redis / HTTP Client)

本模块负责：
1. 数据库会话管理 (get_db / DBSession)
2. Redis 客户端别名 (RedisClient)
3. 出站 HTTP 客户端别名 (HttpClient)

本服务不做会话鉴权：钱包身份由前端钱包连接提供，
Steam 身份由 OpenID 回调中的服务端复核保证。

Created: 2025-12-05
Updated: 2026-03-02 (移除 JWT 鉴权依赖)
"""

from collections.abc import AsyncGenerator
from typing import Annotated

import httpx
from fastapi import Depends
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.http import get_http_client
from app.core.redis import get_redis
from app.db.session import AsyncSessionLocal

# ------------------------------------------------------------------------------
# 1. Database Dependencies
# ------------------------------------------------------------------------------


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    获取异步数据库会话依赖。
    使用 async with 确保请求结束时自动关闭 session。
    """
    async with AsyncSessionLocal() as session:
        yield session


# 数据库会话依赖类型别名
DBSession = Annotated[AsyncSession, Depends(get_db)]


# ------------------------------------------------------------------------------
# 2. External Client Dependencies
# ------------------------------------------------------------------------------

RedisClient = Annotated[Redis, Depends(get_redis)]

HttpClient = Annotated[httpx.AsyncClient, Depends(get_http_client)]
