"""
File: app/domains/trade/constants.py
Description: 交易领域常量定义
Namespace: trade.*

Created: 2026-03-02
"""

from starlette.status import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND

from app.core.error_code import BaseErrorCode

TRADE_OFFER_BASE_URL = "https://steamcommunity.com/tradeoffer/new/"


class TradeError(BaseErrorCode):
    """
    交易领域错误定义
    Tuple Structure: (HTTP_Status, Code_String, Default_Message)
    """

    EMPTY_SELECTION = (HTTP_400_BAD_REQUEST, "trade.empty_selection", "请至少选择一件物品")
    ALREADY_SELECTED = (
        HTTP_400_BAD_REQUEST,
        "trade.already_selected",
        "该物品已在交易列表中",
    )
    NOT_TRADABLE = (HTTP_400_BAD_REQUEST, "trade.not_tradable", "该物品当前不可交易")
    INVALID_ASSET_ID = (HTTP_400_BAD_REQUEST, "trade.invalid_asset_id", "物品 ID 格式错误")
    TRADE_URL_NOT_SET = (
        HTTP_404_NOT_FOUND,
        "trade.trade_url_not_set",
        "对方尚未设置 Steam 交易链接",
    )


class TradeMsg:
    """业务文案常量"""

    TRADE_URL_SAVED = "交易链接保存成功"
    TRADE_URL_FOUND = "获取交易链接成功"
    OFFER_BUILT = "交易报价链接已生成"
