"""
File: app/domains/identity/client.py
Description: Steam OpenID 2.0 客户端

本模块负责与 Steam 的全部身份相关交互：
1. initiate: 构造跳转到 Steam 登录页的 URL (checkid_setup)
2. verify_assertion: 校验回调参数，以 check_authentication 向 Steam 复核签名，
   并要求未签名的 wallet 参数与签名的 openid.return_to 一致
3. fetch_player_summary: 通过 Web API 获取用户昵称 / 头像 / 主页

注意：
- 客户端由依赖注入按请求构造，配置显式传入，便于测试替换 Transport。
- 不做自动重试，任何一次上游失败都映射为 IdentityError。

Created: 2026-03-02
Updated: 2026-10-18 (回调 wallet 与签名 return_to 绑定校验)
"""

from collections.abc import Mapping
from urllib.parse import parse_qs, urlencode, urlsplit

import httpx
import orjson

from app.core.exceptions import AppException
from app.core.logging import logger
from app.domains.identity.constants import (
    OPENID_IDENTIFIER_SELECT,
    OPENID_NS,
    OPENID_VALID_MARKER,
    IdentityError,
    IdentityMsg,
)
from app.domains.identity.schemas import SteamProfile, VerifiedAssertion
from app.utils.masking import mask_wallet
from app.utils.validation import is_valid_steam_id, is_valid_wallet_address

PLAYER_SUMMARIES_PATH = "/ISteamUser/GetPlayerSummaries/v0002/"


def _origin(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}"


def _check_wallet(wallet_address: str | None) -> str:
    if not wallet_address:
        raise AppException(IdentityError.MISSING_WALLET)
    if not is_valid_wallet_address(wallet_address):
        raise AppException(IdentityError.INVALID_WALLET)
    return wallet_address


class SteamOpenIDClient:
    """
    Steam OpenID / Web API 客户端。

    Args:
        http: 共享的 httpx.AsyncClient
        openid_url: OpenID 端点 (https://steamcommunity.com/openid/login)
        web_api_url: Web API 根地址 (https://api.steampowered.com)
        api_key: Steam Web API Key
        callback_url: 回调地址 (不含 wallet 参数)
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        openid_url: str,
        web_api_url: str,
        api_key: str | None,
        callback_url: str,
    ):
        self.http = http
        self.openid_url = openid_url
        self.web_api_url = web_api_url.rstrip("/")
        self.api_key = api_key
        self.callback_url = callback_url

    # --------------------------------------------------------------------------
    # 1. 发起登录
    # --------------------------------------------------------------------------

    def initiate(self, wallet_address: str | None) -> str:
        """
        构造 Steam 登录跳转地址。
        钱包地址写入 return_to，回调时原样带回。
        """
        wallet = _check_wallet(wallet_address)

        return_to = f"{self.callback_url}?{urlencode({'wallet': wallet})}"
        params = {
            "openid.ns": OPENID_NS,
            "openid.mode": "checkid_setup",
            "openid.return_to": return_to,
            "openid.realm": _origin(return_to),
            "openid.identity": OPENID_IDENTIFIER_SELECT,
            "openid.claimed_id": OPENID_IDENTIFIER_SELECT,
        }
        return f"{self.openid_url}?{urlencode(params)}"

    # --------------------------------------------------------------------------
    # 2. 回调复核
    # --------------------------------------------------------------------------

    async def verify_assertion(self, params: Mapping[str, str]) -> VerifiedAssertion:
        """
        校验 OpenID 回调参数并向 Steam 复核。

        顺序：钱包参数 -> 协议字段 -> check_authentication -> return_to 绑定 -> 解析 SteamID。
        任一步失败抛出对应的 IdentityError。
        """
        wallet = _check_wallet(params.get("wallet"))

        if params.get("openid.ns") != OPENID_NS:
            raise AppException(IdentityError.INVALID_RESPONSE)
        if params.get("openid.mode") != "id_res":
            raise AppException(IdentityError.INVALID_MODE)

        await self._check_authentication(params)
        self._check_return_to(params, wallet)

        claimed_id = params.get("openid.claimed_id") or ""
        steam_id = claimed_id.rstrip("/").split("/")[-1]
        if not is_valid_steam_id(steam_id):
            raise AppException(IdentityError.MISSING_STEAM_ID)

        logger.bind(wallet=mask_wallet(wallet), steam_id=steam_id).info(
            "OpenID assertion verified"
        )
        return VerifiedAssertion(
            wallet_address=wallet,
            steam_id=steam_id,
            response_nonce=params.get("openid.response_nonce") or None,
        )

    def _check_return_to(self, params: Mapping[str, str], wallet: str) -> None:
        """
        回调中的 wallet 参数未经签名，必须与签名覆盖的 openid.return_to 一致。
        return_to 需指向本服务回调地址，且其中的 wallet 与回调参数相同。
        """
        signed = (params.get("openid.signed") or "").split(",")
        if "return_to" not in signed:
            raise AppException(
                IdentityError.INVALID_RESPONSE, message=IdentityMsg.RETURN_TO_MISMATCH
            )

        return_to = urlsplit(params.get("openid.return_to") or "")
        expected = urlsplit(self.callback_url)
        signed_wallets = parse_qs(return_to.query).get("wallet", [])

        if (
            (return_to.scheme, return_to.netloc, return_to.path)
            != (expected.scheme, expected.netloc, expected.path)
            or len(signed_wallets) != 1
            or signed_wallets[0].lower() != wallet.lower()
        ):
            logger.bind(wallet=mask_wallet(wallet)).warning(
                "OpenID return_to does not match callback wallet"
            )
            raise AppException(
                IdentityError.INVALID_RESPONSE, message=IdentityMsg.RETURN_TO_MISMATCH
            )

    async def _check_authentication(self, params: Mapping[str, str]) -> None:
        form = {
            k: v for k, v in params.items() if k not in ("wallet", "openid.mode")
        }
        form["openid.mode"] = "check_authentication"

        try:
            response = await self.http.post(self.openid_url, data=form)
        except httpx.HTTPError as exc:
            logger.bind(error=str(exc)).warning("OpenID check_authentication failed")
            raise AppException(IdentityError.VERIFICATION_FAILED) from exc

        if not response.is_success:
            logger.bind(status_code=response.status_code).warning(
                "OpenID check_authentication rejected"
            )
            raise AppException(IdentityError.VERIFICATION_FAILED)

        if OPENID_VALID_MARKER not in response.text:
            raise AppException(IdentityError.AUTHENTICATION_FAILED)

    # --------------------------------------------------------------------------
    # 3. 用户资料
    # --------------------------------------------------------------------------

    async def fetch_player_summary(self, steam_id: str) -> SteamProfile:
        """
        获取 Steam 用户资料。
        头像优先级: avatarfull -> avatarmedium -> avatar
        """
        if not self.api_key:
            logger.error("STEAM_API_KEY is not configured")
            raise AppException(IdentityError.STEAM_API_ERROR)

        try:
            response = await self.http.get(
                f"{self.web_api_url}{PLAYER_SUMMARIES_PATH}",
                params={"key": self.api_key, "steamids": steam_id},
            )
        except httpx.HTTPError as exc:
            logger.bind(error=str(exc)).warning("GetPlayerSummaries request failed")
            raise AppException(IdentityError.STEAM_API_ERROR) from exc

        if not response.is_success:
            logger.bind(status_code=response.status_code).warning(
                "GetPlayerSummaries returned error status"
            )
            raise AppException(IdentityError.STEAM_API_ERROR)

        try:
            payload = orjson.loads(response.content)
            players = payload["response"]["players"]
        except (orjson.JSONDecodeError, KeyError, TypeError) as exc:
            raise AppException(IdentityError.STEAM_PROFILE_ERROR) from exc

        if not isinstance(players, list):
            raise AppException(IdentityError.STEAM_PROFILE_ERROR)
        if not players:
            raise AppException(IdentityError.STEAM_DATA_ERROR)

        player = players[0]
        if not isinstance(player, dict):
            raise AppException(IdentityError.STEAM_PROFILE_ERROR)

        return SteamProfile(
            steam_id=steam_id,
            username=player.get("personaname"),
            avatar=player.get("avatarfull")
            or player.get("avatarmedium")
            or player.get("avatar"),
            profile_url=player.get("profileurl"),
        )
