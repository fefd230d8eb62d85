"""
File: app/domains/links/dependencies.py
Description: 绑定领域依赖注入定义
Created: 2026-03-02
"""

from typing import Annotated

from fastapi import Depends

from app.api.deps import DBSession
from app.db.models.steam_link import SteamLink
from app.domains.links.repository import SteamLinkRepository
from app.domains.links.service import LinkService


async def get_link_repository(session: DBSession) -> SteamLinkRepository:
    """初始化 Repository 实例"""
    return SteamLinkRepository(SteamLink, session)


async def get_link_service(
    repo: Annotated[SteamLinkRepository, Depends(get_link_repository)],
) -> LinkService:
    """初始化 Service 实例"""
    return LinkService(repo)


# --- 类型别名供 Router 使用 ---
LinkServiceDep = Annotated[LinkService, Depends(get_link_service)]
