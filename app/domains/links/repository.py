"""
File: app/domains/links/repository.py
Description: 绑定领域仓储层 (Repository)

本模块负责 steam_links 表的数据库访问，继承自通用 BaseRepository。
扩展功能：
1. get_by_wallet: 根据钱包地址查询
2. get_by_steam_id: 根据 SteamID64 查询
3. claim_steam_identity: 条件更新 (仅当 steam_id 为空或相同时写入)
4. set_trade_url: 更新交易链接并刷新 updated_at

Created: 2026-03-02
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import or_, select, update

from app.db.models.steam_link import SteamLink
from app.db.repositories.base import BaseRepository
from app.domains.links.schemas import SteamLinkCreate


class SteamLinkRepository(BaseRepository[SteamLink, SteamLinkCreate]):
    """
    绑定记录仓储类。

    注意：
    条件更新使用 Core UPDATE (synchronize_session=False)，
    写入成功后需以 refresh=True 重新读取，避免 Identity Map 返回旧值。
    """

    async def get_by_wallet(
        self, wallet_address: str, refresh: bool = False
    ) -> SteamLink | None:
        """根据钱包地址查询绑定记录"""
        stmt = select(SteamLink).where(SteamLink.wallet_address == wallet_address)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_steam_id(self, steam_id: str) -> SteamLink | None:
        """根据 SteamID64 查询绑定记录"""
        stmt = select(SteamLink).where(SteamLink.steam_id == steam_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def claim_steam_identity(
        self, wallet_address: str, steam_id: str, profile: dict[str, Any]
    ) -> bool:
        """
        将 Steam 身份写入已存在的钱包记录。

        WHERE 条件保证只覆盖 steam_id 为空或等于目标值的记录，
        检查与写入在同一条语句内完成。

        Returns:
            bool: 命中 1 行返回 True；0 行 (记录已被并发请求占用) 返回 False
        """
        stmt = (
            update(SteamLink)
            .where(
                SteamLink.wallet_address == wallet_address,
                or_(SteamLink.steam_id.is_(None), SteamLink.steam_id == steam_id),
            )
            .values(steam_id=steam_id, updated_at=datetime.now(UTC), **profile)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def set_trade_url(self, wallet_address: str, trade_url: str) -> bool:
        """
        更新交易链接 (不触碰 steam_id)。
        即使链接未变化也会刷新 updated_at。
        """
        stmt = (
            update(SteamLink)
            .where(SteamLink.wallet_address == wallet_address)
            .values(trade_url=trade_url, updated_at=datetime.now(UTC))
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
