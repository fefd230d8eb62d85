"""
File: app/domains/links/service.py
Description: 绑定领域服务 (持久化网关)

本模块封装钱包 ↔ Steam 绑定记录的全部读写规则：
1. 查询：按钱包 / 按 SteamID 查找记录
2. 绑定：upsert_link 保证一个钱包最多一个 Steam 账号，反之亦然
3. 交易链接：upsert_trade_url 只写 trade_url，永不修改 steam_id
4. 状态：get_link_status 仅在已绑定 Steam 时返回记录

并发策略：
- 依赖 wallet_address / steam_id 唯一约束 + 条件 UPDATE
- 写入冲突 (IntegrityError 或条件更新命中 0 行) 时回滚并重新评估，
  最多 LINK_WRITE_ATTEMPTS 次，仍失败则返回 links.link_contended

注意：
- 事务提交 (Commit) 由本层负责，Repository 只 flush。
- 钱包地址统一转为小写存储与查询 (EIP-55 大小写仅为校验和)。

Created: 2026-03-02
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.core.error_code import SystemErrorCode
from app.core.exceptions import AppException
from app.core.logging import logger
from app.db.models.steam_link import SteamLink
from app.domains.links.constants import LINK_WRITE_ATTEMPTS, LinkError
from app.domains.links.repository import SteamLinkRepository
from app.domains.links.schemas import SteamLinkCreate
from app.utils.masking import mask_trade_url, mask_wallet
from app.utils.validation import (
    is_valid_steam_id,
    is_valid_trade_url,
    is_valid_wallet_address,
)


def normalize_wallet(wallet_address: str) -> str:
    """校验并规范化钱包地址 (格式错误直接抛出，不触发任何 I/O)"""
    if not wallet_address:
        raise AppException(LinkError.MISSING_WALLET)
    if not is_valid_wallet_address(wallet_address):
        raise AppException(LinkError.INVALID_WALLET)
    return wallet_address.lower()


def _check_steam_id(steam_id: str) -> str:
    if not is_valid_steam_id(steam_id):
        raise AppException(LinkError.INVALID_STEAM_ID)
    return steam_id


class LinkService:
    """
    绑定领域服务。

    职责：
    - 输入格式校验 (Fail Fast)
    - 执行唯一性规则 (钱包 ↔ Steam 一对一)
    - 控制事务边界与并发重试
    """

    def __init__(self, repo: SteamLinkRepository):
        self.repo = repo

    # --------------------------------------------------------------------------
    # 查询
    # --------------------------------------------------------------------------

    async def find_by_wallet(self, wallet_address: str) -> SteamLink | None:
        wallet = normalize_wallet(wallet_address)
        async with self._storage_errors("find_by_wallet"):
            return await self.repo.get_by_wallet(wallet)

    async def find_by_steam_id(self, steam_id: str) -> SteamLink | None:
        steam_id = _check_steam_id(steam_id)
        async with self._storage_errors("find_by_steam_id"):
            return await self.repo.get_by_steam_id(steam_id)

    async def get_link_status(self, wallet_address: str) -> SteamLink | None:
        """
        查询绑定状态。
        记录不存在或尚未绑定 Steam (仅保存过交易链接) 时返回 None。
        """
        link = await self.find_by_wallet(wallet_address)
        if link is None or not link.is_steam_linked:
            return None
        return link

    async def get_trade_url(self, wallet_address: str) -> str | None:
        """
        读取交易链接。
        钱包没有任何记录时抛出 LINK_NOT_FOUND；有记录但未设置时返回 None。
        """
        link = await self.find_by_wallet(wallet_address)
        if link is None:
            raise AppException(LinkError.LINK_NOT_FOUND)
        return link.trade_url

    # --------------------------------------------------------------------------
    # 写入
    # --------------------------------------------------------------------------

    async def upsert_link(
        self,
        wallet_address: str,
        steam_id: str,
        steam_username: str | None,
        steam_avatar: str | None = None,
        steam_profile_url: str | None = None,
    ) -> SteamLink:
        """
        绑定钱包与 Steam 账号。

        规则：
        1. steam_id 已属于其他钱包 -> STEAM_LINKED
        2. 钱包已绑定其他 steam_id -> WALLET_LINKED
        3. 相同组合重复提交 -> 幂等成功，刷新资料字段
        4. 不修改已有的 trade_url
        """
        wallet = normalize_wallet(wallet_address)
        steam_id = _check_steam_id(steam_id)
        profile = {
            "steam_username": steam_username,
            "steam_avatar": steam_avatar,
            "steam_profile_url": steam_profile_url,
        }

        link = await self._write_with_retry(
            "upsert_link", lambda: self._write_link(wallet, steam_id, profile)
        )
        logger.bind(wallet=mask_wallet(wallet), steam_id=steam_id).info(
            "Steam account linked"
        )
        return link

    async def upsert_trade_url(self, wallet_address: str, trade_url: str) -> SteamLink:
        """
        保存交易链接。
        钱包无记录时创建仅含 trade_url 的记录；已有记录时只更新 trade_url。
        """
        wallet = normalize_wallet(wallet_address)
        if not is_valid_trade_url(trade_url):
            raise AppException(LinkError.INVALID_TRADE_URL)

        link = await self._write_with_retry(
            "upsert_trade_url", lambda: self._write_trade_url(wallet, trade_url)
        )
        logger.bind(
            wallet=mask_wallet(wallet), trade_url=mask_trade_url(trade_url)
        ).info("Trade URL saved")
        return link

    # --------------------------------------------------------------------------
    # 内部实现
    # --------------------------------------------------------------------------

    async def _write_link(
        self, wallet: str, steam_id: str, profile: dict[str, Any]
    ) -> SteamLink | None:
        owner = await self.repo.get_by_steam_id(steam_id)
        if owner is not None and owner.wallet_address != wallet:
            raise AppException(LinkError.STEAM_LINKED)

        existing = await self.repo.get_by_wallet(wallet)
        if existing is None:
            return await self.repo.create(
                SteamLinkCreate(wallet_address=wallet, steam_id=steam_id, **profile)
            )

        if existing.steam_id is not None and existing.steam_id != steam_id:
            raise AppException(LinkError.WALLET_LINKED)

        if not await self.repo.claim_steam_identity(wallet, steam_id, profile):
            return None
        return await self.repo.get_by_wallet(wallet, refresh=True)

    async def _write_trade_url(self, wallet: str, trade_url: str) -> SteamLink | None:
        existing = await self.repo.get_by_wallet(wallet)
        if existing is None:
            return await self.repo.create(
                SteamLinkCreate(wallet_address=wallet, trade_url=trade_url)
            )

        if not await self.repo.set_trade_url(wallet, trade_url):
            return None
        return await self.repo.get_by_wallet(wallet, refresh=True)

    async def _write_with_retry(
        self, operation: str, write: Callable[[], Awaitable[SteamLink | None]]
    ) -> SteamLink:
        """
        执行一次 "读取-判断-写入"，遇到并发冲突时回滚并重新评估。
        业务冲突 (AppException) 直接向上抛出，不重试。
        """
        session = self.repo.session

        async with self._storage_errors(operation):
            for attempt in range(1, LINK_WRITE_ATTEMPTS + 1):
                try:
                    link = await write()
                except IntegrityError:
                    link = None

                if link is not None:
                    await session.commit()
                    return link

                await session.rollback()
                logger.bind(operation=operation, attempt=attempt).warning(
                    "Concurrent link write detected, re-evaluating"
                )

        raise AppException(LinkError.LINK_CONTENDED)

    @asynccontextmanager
    async def _storage_errors(self, operation: str) -> AsyncIterator[None]:
        """将存储层异常统一转换为 system.db_error (原始异常仅写入日志)"""
        try:
            yield
        except SQLAlchemyError as exc:
            await self.repo.session.rollback()
            logger.bind(operation=operation).opt(exception=exc).error(
                "Storage operation failed"
            )
            raise AppException(SystemErrorCode.DB_ERROR) from exc
