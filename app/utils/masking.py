"""
File: app/utils/masking.py
Description: 日志数据脱敏工具 (Data Masking)

本模块提供敏感信息脱敏功能，用于日志记录和异常上报时的隐私保护。
确保日志中不包含明文密钥、OpenID 签名及完整的钱包地址 / 交易令牌。

特性：
1. 针对性脱敏: 钱包地址、Steam 交易链接 token 等特定格式。
2. 递归脱敏: 能够深度遍历字典/列表，自动过滤敏感 Key (如 api_key, openid.sig)。
3. 高性能: 使用预编译正则和字符串切片。

Created: 2025-11-26
Updated: 2026-03-02 (钱包地址 / 交易链接脱敏)
"""

import re
from typing import Any

# ==============================================================================
# 1. 敏感字段黑名单 (大小写不敏感)
# ==============================================================================
SENSITIVE_KEYS = {
    "secret",
    "token",
    "key",
    "api_key",
    "steam_api_key",
    "openid.sig",
    "openid.assoc_handle",
    "session_id",
    "client_secret",
}

# 需要部分掩码的钱包字段
WALLET_KEYS = {"wallet", "wallet_address"}

# 交易链接中的 token 参数
TRADE_TOKEN_PATTERN = re.compile(r"(token=)[A-Za-z0-9_-]+")

# URL / 日志文本中的机密参数 (Web API key、OpenID 签名)
URL_SECRET_PATTERN = re.compile(
    r"((?:^|[?&\s])(?:key|openid\.sig|openid\.assoc_handle)=)[^&\s]+"
)

# ==============================================================================
# 2. 基础脱敏函数
# ==============================================================================


def mask_wallet(address: str | None) -> str:
    """
    钱包地址脱敏。
    规则: 保留 0x 与前 4 位、后 4 位。
    示例: 0x52908400098527886E0F7030069857D2E4169EE7 -> 0x5290...9EE7
    """
    if not address or len(address) < 12:
        return "******"
    return f"{address[:6]}...{address[-4:]}"


def mask_trade_url(url: str | None) -> str:
    """
    交易链接脱敏。
    规则: 保留 partner，掩盖 token。
    """
    if not url:
        return ""
    return TRADE_TOKEN_PATTERN.sub(r"\1******", url)


def mask_url_secrets(text: str) -> str:
    """
    文本脱敏 (URL 或日志消息)。
    掩盖 key / openid.sig / openid.assoc_handle 参数值与交易链接 token。
    示例: .../GetPlayerSummaries/v0002/?key=ABC&steamids=1 -> ?key=******&steamids=1
    """
    masked = URL_SECRET_PATTERN.sub(r"\1******", text)
    return TRADE_TOKEN_PATTERN.sub(r"\1******", masked)


def mask_secret(value: Any) -> str:
    """
    通用机密信息完全掩盖。
    用于 API Key、签名等。
    """
    if value is None:
        return ""
    return "******"


# ==============================================================================
# 3. 递归脱敏工具 (核心)
# ==============================================================================


def mask_sensitive_data(data: Any) -> Any:
    """
    递归遍历数据结构（字典、列表），自动对敏感字段进行脱敏。

    用于在打印日志前处理 query 参数或变量字典。
    注意：为了性能，此函数会返回数据的【浅拷贝】副本，不修改原数据。
    """
    if isinstance(data, dict):
        new_data = {}
        for k, v in data.items():
            lowered = k.lower() if isinstance(k, str) else k
            if lowered in SENSITIVE_KEYS:
                new_data[k] = mask_secret(v)
            elif lowered in WALLET_KEYS and isinstance(v, str):
                new_data[k] = mask_wallet(v)
            elif lowered == "trade_url" and isinstance(v, str):
                new_data[k] = mask_trade_url(v)
            else:
                new_data[k] = mask_sensitive_data(v)
        return new_data

    elif isinstance(data, list):
        return [mask_sensitive_data(item) for item in data]

    # 其他类型直接返回
    return data
