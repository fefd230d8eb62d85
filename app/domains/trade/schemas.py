"""
File: app/domains/trade/schemas.py
Description: 交易领域 Pydantic 模型 (Schema)

Created: 2026-03-02
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.utils.validation import (
    TRADE_URL_ERROR_MESSAGE,
    WALLET_ERROR_MESSAGE,
    is_valid_asset_id,
    is_valid_trade_url,
    is_valid_wallet_address,
)


def _check_wallet(v: str) -> str:
    if not is_valid_wallet_address(v):
        raise ValueError(WALLET_ERROR_MESSAGE)
    return v


# ------------------------------------------------------------------------------
# Input Schemas
# ------------------------------------------------------------------------------


class TradeUrlRequest(BaseModel):
    """POST /trade-endpoint 请求体"""

    wallet_address: str = Field(..., description="钱包地址")
    trade_url: str = Field(
        ...,
        description="Steam 交易链接",
        examples=["https://steamcommunity.com/tradeoffer/new/?partner=12345&token=AbCd_-1"],
    )

    @field_validator("wallet_address")
    @classmethod
    def validate_wallet(cls, v: str) -> str:
        return _check_wallet(v)

    @field_validator("trade_url")
    @classmethod
    def validate_trade_url(cls, v: str) -> str:
        if not is_valid_trade_url(v):
            raise ValueError(TRADE_URL_ERROR_MESSAGE)
        return v


class TradeItem(BaseModel):
    """被选中参与交易的物品"""

    assetid: str
    tradable: bool = False

    @field_validator("assetid")
    @classmethod
    def validate_assetid(cls, v: str) -> str:
        if not is_valid_asset_id(v):
            raise ValueError("物品 ID 格式错误")
        return v


class TradeOfferRequest(BaseModel):
    """
    POST /trade-endpoint/offer 请求体。
    wallet_address 为交易对方 (接收报价) 的钱包。
    """

    wallet_address: str
    items: list[TradeItem] = Field(default_factory=list)

    @field_validator("wallet_address")
    @classmethod
    def validate_wallet(cls, v: str) -> str:
        return _check_wallet(v)


# ------------------------------------------------------------------------------
# Output Schemas
# ------------------------------------------------------------------------------


class TradeUrlRead(BaseModel):
    wallet_address: str
    trade_url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class TradeOfferRead(BaseModel):
    wallet_address: str
    trade_offer_url: str
    asset_ids: list[str]
