"""
File: app/domains/identity/constants.py
Description: Steam 身份验证领域常量定义
Namespace: identity.*

错误码的 reason 部分 (去掉 identity. 前缀) 同时作为回调跳转时的
?error=<reason> 参数，前端据此展示提示。

Created: 2026-03-02
"""

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_502_BAD_GATEWAY,
)

from app.core.error_code import BaseErrorCode
from app.utils.validation import WALLET_ERROR_MESSAGE

# OpenID 2.0 协议常量
OPENID_NS = "http://specs.openid.net/auth/2.0"
OPENID_IDENTIFIER_SELECT = "http://specs.openid.net/auth/2.0/identifier_select"
OPENID_VALID_MARKER = "is_valid:true"

# 已消费 nonce 的 Redis key 前缀
NONCE_KEY_PREFIX = "openid_nonce:"

# 未知异常在回调跳转中使用的 reason
SERVER_ERROR_REASON = "server_error"
SERVER_ERROR_MESSAGE = "服务器内部错误，请稍后重试"


class IdentityError(BaseErrorCode):
    """
    身份验证领域错误定义
    Tuple Structure: (HTTP_Status, Code_String, Default_Message)
    """

    # 钱包参数
    MISSING_WALLET = (HTTP_400_BAD_REQUEST, "identity.missing_wallet", "缺少钱包地址")
    INVALID_WALLET = (
        HTTP_400_BAD_REQUEST,
        "identity.invalid_wallet",
        WALLET_ERROR_MESSAGE,
    )

    # OpenID 响应结构
    INVALID_RESPONSE = (
        HTTP_400_BAD_REQUEST,
        "identity.invalid_response",
        "无效的 OpenID 响应",
    )
    INVALID_MODE = (HTTP_400_BAD_REQUEST, "identity.invalid_mode", "无效的 OpenID 模式")
    MISSING_STEAM_ID = (
        HTTP_400_BAD_REQUEST,
        "identity.missing_steam_id",
        "无法从响应中解析 Steam ID",
    )

    # 服务端复核
    VERIFICATION_FAILED = (
        HTTP_502_BAD_GATEWAY,
        "identity.verification_failed",
        "无法向 Steam 复核登录结果",
    )
    AUTHENTICATION_FAILED = (
        HTTP_401_UNAUTHORIZED,
        "identity.authentication_failed",
        "Steam 登录验证失败",
    )

    # Steam Web API 资料获取
    STEAM_API_ERROR = (
        HTTP_502_BAD_GATEWAY,
        "identity.steam_api_error",
        "获取 Steam 用户资料失败",
    )
    STEAM_DATA_ERROR = (
        HTTP_502_BAD_GATEWAY,
        "identity.steam_data_error",
        "未找到 Steam 用户资料",
    )
    STEAM_PROFILE_ERROR = (
        HTTP_502_BAD_GATEWAY,
        "identity.steam_profile_error",
        "Steam 用户资料解析失败",
    )


class IdentityMsg:
    """业务文案常量"""

    NONCE_REUSED = "该登录响应已被使用，请重新发起 Steam 登录"
    RETURN_TO_MISMATCH = "回调地址与登录请求不一致，请重新发起 Steam 登录"
