"""
File: app/domains/links/schemas.py
Description: 绑定领域 Pydantic 模型 (Schema)

本模块定义了钱包 ↔ Steam 绑定相关的输入/输出数据结构：
1. SteamLinkRequest: POST /identity/link 请求体
2. SteamLinkCreate: Repository 写入参数
3. SteamLinkResult / SteamLinkStatus: 接口精简响应

规范：
- 严格遵循 Pydantic V2 写法 (ConfigDict)
- 钱包地址 / Steam ID 在 Schema 层即完成格式校验

Created: 2026-03-02
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.utils.validation import (
    STEAM_ID_ERROR_MESSAGE,
    WALLET_ERROR_MESSAGE,
    is_valid_steam_id,
    is_valid_wallet_address,
)

# ------------------------------------------------------------------------------
# Input Schemas (输入模型)
# ------------------------------------------------------------------------------


class SteamLinkRequest(BaseModel):
    """
    手动绑定请求 (前端在拿到 Steam 资料后提交)。
    """

    wallet_address: str = Field(
        ...,
        description="钱包地址 (0x + 40 hex)",
        examples=["0x52908400098527886E0F7030069857D2E4169EE7"],
    )
    steam_id: str = Field(
        ..., description="SteamID64 (17 位数字)", examples=["76561197960287930"]
    )
    steam_username: str = Field(..., min_length=1, max_length=255)
    steam_avatar: str | None = Field(default=None, max_length=512)
    steam_profile_url: str | None = Field(default=None, max_length=512)

    @field_validator("wallet_address")
    @classmethod
    def validate_wallet(cls, v: str) -> str:
        if not is_valid_wallet_address(v):
            raise ValueError(WALLET_ERROR_MESSAGE)
        return v

    @field_validator("steam_id")
    @classmethod
    def validate_steam_id(cls, v: str) -> str:
        if not is_valid_steam_id(v):
            raise ValueError(STEAM_ID_ERROR_MESSAGE)
        return v


class SteamLinkCreate(BaseModel):
    """
    Repository 创建参数 (内部使用)。
    首次绑定时写入身份字段；首次保存交易链接时仅写入 wallet + trade_url。
    """

    wallet_address: str
    steam_id: str | None = None
    steam_username: str | None = None
    steam_avatar: str | None = None
    steam_profile_url: str | None = None
    trade_url: str | None = None


# ------------------------------------------------------------------------------
# Output Schemas (输出/响应模型)
# ------------------------------------------------------------------------------


class SteamLinkResult(BaseModel):
    """POST /identity/link 响应数据"""

    wallet_address: str
    steam_id: str
    steam_username: str | None = None

    model_config = ConfigDict(from_attributes=True)


class SteamLinkStatus(BaseModel):
    """GET /identity/link/status 响应数据"""

    steam_id: str
    steam_username: str | None = None
    steam_avatar: str | None = None
    steam_profile_url: str | None = None

    model_config = ConfigDict(from_attributes=True)
