"""
File: app/domains/identity/dependencies.py
Description: 身份验证领域依赖注入定义
Created: 2026-03-02
"""

from typing import Annotated

from fastapi import Depends

from app.api.deps import HttpClient, RedisClient
from app.core.config import settings
from app.domains.identity.client import SteamOpenIDClient
from app.domains.identity.service import IdentityService
from app.domains.links.dependencies import LinkServiceDep


async def get_openid_client(http: HttpClient) -> SteamOpenIDClient:
    """按请求构造 OpenID 客户端 (共享底层连接池)"""
    return SteamOpenIDClient(
        http=http,
        openid_url=settings.STEAM_OPENID_URL,
        web_api_url=settings.STEAM_WEB_API_URL,
        api_key=settings.STEAM_API_KEY,
        callback_url=settings.steam_callback_url,
    )


async def get_identity_service(
    client: Annotated[SteamOpenIDClient, Depends(get_openid_client)],
    links: LinkServiceDep,
    redis: RedisClient,
) -> IdentityService:
    """初始化 Service 实例"""
    return IdentityService(
        client=client,
        links=links,
        redis=redis,
        frontend_url=settings.frontend_url,
        nonce_ttl=settings.OPENID_NONCE_TTL_SECONDS,
    )


IdentityServiceDep = Annotated[IdentityService, Depends(get_identity_service)]
