"""
File: app/domains/identity/schemas.py
Description: Steam 身份验证领域数据模型

Created: 2026-03-02
"""

from pydantic import BaseModel


class VerifiedAssertion(BaseModel):
    """
    经 Steam 服务端复核通过的 OpenID 断言。
    """

    wallet_address: str
    steam_id: str
    response_nonce: str | None = None


class SteamProfile(BaseModel):
    """GetPlayerSummaries 中与绑定相关的字段"""

    steam_id: str
    username: str | None = None
    avatar: str | None = None
    profile_url: str | None = None


class LinkCallbackResult(BaseModel):
    """
    回调成功后以 ?data=<JSON> 形式回传给前端的数据。
    """

    success: bool = True
    wallet_address: str
    steam_id: str
    steam_username: str | None = None
    steam_avatar: str | None = None
