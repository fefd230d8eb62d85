"""
File: app/domains/identity/service.py
Description: Steam 身份绑定编排服务

本模块编排 OpenID 回调的完整流程：
1. verify_assertion: 向 Steam 复核断言
2. consume_nonce: 记录 openid.response_nonce，拒绝重放
3. fetch_player_summary: 获取昵称 / 头像
4. upsert_link: 写入钱包 ↔ Steam 绑定

回调接口不返回 JSON，任何结果都转换为跳转到前端的 URL：
- 成功: ?steam_link_success=true&data=<JSON>
- 失败: ?error=<reason>&message=<提示>

Created: 2026-03-02
"""

from collections.abc import Mapping
from urllib.parse import urlencode

import orjson
from redis.asyncio import Redis

from app.core.exceptions import AppException
from app.core.logging import logger
from app.domains.identity.client import SteamOpenIDClient
from app.domains.identity.constants import (
    NONCE_KEY_PREFIX,
    SERVER_ERROR_MESSAGE,
    SERVER_ERROR_REASON,
    IdentityError,
    IdentityMsg,
)
from app.domains.identity.schemas import LinkCallbackResult
from app.domains.links.service import LinkService


class IdentityService:
    """
    Steam 身份绑定服务。
    """

    def __init__(
        self,
        client: SteamOpenIDClient,
        links: LinkService,
        redis: Redis,
        frontend_url: str,
        nonce_ttl: int,
    ):
        self.client = client
        self.links = links
        self.redis = redis
        self.frontend_url = frontend_url
        self.nonce_ttl = nonce_ttl

    def build_auth_redirect(self, wallet_address: str | None) -> str:
        """返回 Steam 登录页跳转地址"""
        return self.client.initiate(wallet_address)

    async def complete_link(self, params: Mapping[str, str]) -> LinkCallbackResult:
        """
        执行回调流程并返回绑定结果。
        失败时抛出 AppException (IdentityError / LinkError / SystemErrorCode)。
        """
        assertion = await self.client.verify_assertion(params)
        await self.consume_nonce(assertion.response_nonce)

        profile = await self.client.fetch_player_summary(assertion.steam_id)
        link = await self.links.upsert_link(
            wallet_address=assertion.wallet_address,
            steam_id=profile.steam_id,
            steam_username=profile.username,
            steam_avatar=profile.avatar,
            steam_profile_url=profile.profile_url,
        )

        return LinkCallbackResult(
            wallet_address=link.wallet_address,
            steam_id=profile.steam_id,
            steam_username=link.steam_username,
            steam_avatar=link.steam_avatar,
        )

    async def handle_callback(self, params: Mapping[str, str]) -> str:
        """
        处理 OpenID 回调，返回前端跳转地址 (成功或失败)。
        """
        try:
            result = await self.complete_link(params)
        except AppException as exc:
            logger.bind(code=exc.code, message=exc.message).warning(
                "Steam link callback failed"
            )
            return self.failure_redirect(exc.reason, exc.message)
        except Exception as exc:
            logger.opt(exception=exc).error("Unexpected error in Steam link callback")
            return self.failure_redirect(SERVER_ERROR_REASON, SERVER_ERROR_MESSAGE)

        return self.success_redirect(result)

    async def consume_nonce(self, nonce: str | None) -> None:
        """
        记录已使用的 response_nonce。
        同一 nonce 第二次出现视为重放，抛出 AUTHENTICATION_FAILED。
        """
        if not nonce:
            return

        stored = await self.redis.set(
            f"{NONCE_KEY_PREFIX}{nonce}", "1", nx=True, ex=self.nonce_ttl
        )
        if not stored:
            logger.warning("OpenID response nonce reused")
            raise AppException(
                IdentityError.AUTHENTICATION_FAILED, message=IdentityMsg.NONCE_REUSED
            )

    # --------------------------------------------------------------------------
    # 跳转地址
    # --------------------------------------------------------------------------

    def success_redirect(self, result: LinkCallbackResult) -> str:
        data = orjson.dumps(result.model_dump()).decode("utf-8")
        return self._redirect_url({"steam_link_success": "true", "data": data})

    def failure_redirect(self, reason: str, message: str) -> str:
        return self._redirect_url({"error": reason, "message": message})

    def _redirect_url(self, query: dict[str, str]) -> str:
        separator = "&" if "?" in self.frontend_url else "?"
        return f"{self.frontend_url}{separator}{urlencode(query)}"
