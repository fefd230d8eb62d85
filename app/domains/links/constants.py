"""
File: app/domains/links/constants.py
Description: 绑定领域常量定义 (错误码 + 成功提示)
Namespace: links.*

Created: 2026-03-02
"""

from starlette.status import (
    HTTP_200_OK,
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
)

from app.core.error_code import BaseErrorCode
from app.utils.validation import (
    STEAM_ID_ERROR_MESSAGE,
    TRADE_URL_ERROR_MESSAGE,
    WALLET_ERROR_MESSAGE,
)

# 并发写入冲突时的最大重新评估次数
LINK_WRITE_ATTEMPTS = 3


class LinkError(BaseErrorCode):
    """
    绑定领域错误定义
    Tuple Structure: (HTTP_Status, Code_String, Default_Message)
    """

    # HTTP 400: 输入格式错误 (I/O 之前拒绝)
    MISSING_WALLET = (HTTP_400_BAD_REQUEST, "links.missing_wallet", "缺少钱包地址")
    INVALID_WALLET = (HTTP_400_BAD_REQUEST, "links.invalid_wallet", WALLET_ERROR_MESSAGE)
    INVALID_STEAM_ID = (
        HTTP_400_BAD_REQUEST,
        "links.invalid_steam_id",
        STEAM_ID_ERROR_MESSAGE,
    )
    INVALID_TRADE_URL = (
        HTTP_400_BAD_REQUEST,
        "links.invalid_trade_url",
        TRADE_URL_ERROR_MESSAGE,
    )

    # HTTP 404: 钱包没有任何记录
    LINK_NOT_FOUND = (HTTP_404_NOT_FOUND, "links.not_found", "该钱包暂无绑定记录")

    # HTTP 409: 身份已绑定到其他对象
    STEAM_LINKED = (
        HTTP_409_CONFLICT,
        "links.steam_linked",
        "该 Steam 账号已绑定其他钱包",
    )
    WALLET_LINKED = (
        HTTP_409_CONFLICT,
        "links.wallet_linked",
        "该钱包已绑定其他 Steam 账号",
    )
    LINK_CONTENDED = (
        HTTP_409_CONFLICT,
        "links.link_contended",
        "绑定请求并发冲突，请稍后重试",
    )

    # HTTP 200: 查询成功但尚未绑定 (success=false)
    NOT_LINKED = (HTTP_200_OK, "links.not_linked", "该钱包尚未绑定 Steam 账号")


class LinkMsg:
    """
    绑定领域成功提示文案
    """

    LINK_SUCCESS = "Steam 账号绑定成功"
    STATUS_FOUND = "已找到绑定的 Steam 账号"
