"""
File: app/utils/validation.py
Description: 格式校验工具 (钱包地址 / Steam ID / 交易链接)

校验函数均为纯函数：
- 非字符串、空值一律返回 False，不抛异常
- 正则采用 fullmatch，避免换行符等尾随字符绕过

Created: 2026-03-02
"""

import re
from typing import Any

WALLET_ADDRESS_PATTERN = re.compile(r"0x[0-9a-fA-F]{40}")
STEAM_ID_PATTERN = re.compile(r"[0-9]{17}")
TRADE_URL_PATTERN = re.compile(
    r"https://steamcommunity\.com/tradeoffer/new/"
    r"\?partner=(?P<partner>[0-9]+)&token=(?P<token>[A-Za-z0-9_-]+)"
)
ASSET_ID_PATTERN = re.compile(r"[0-9]{1,20}")

WALLET_ERROR_MESSAGE = "钱包地址格式错误 (需为 0x 开头的 40 位十六进制)"
STEAM_ID_ERROR_MESSAGE = "Steam ID 格式错误 (需为 17 位数字)"
TRADE_URL_ERROR_MESSAGE = "Steam 交易链接格式错误"


def _matches(pattern: re.Pattern[str], value: Any) -> bool:
    if not isinstance(value, str) or not value:
        return False
    return pattern.fullmatch(value) is not None


def is_valid_wallet_address(value: Any) -> bool:
    """校验钱包地址 (20 字节十六进制, 0x 前缀)"""
    return _matches(WALLET_ADDRESS_PATTERN, value)


def is_valid_steam_id(value: Any) -> bool:
    """校验 SteamID64 (17 位 ASCII 数字)"""
    return _matches(STEAM_ID_PATTERN, value)


def is_valid_trade_url(value: Any) -> bool:
    """校验 Steam 交易链接 (partner + token)"""
    return _matches(TRADE_URL_PATTERN, value)


def is_valid_asset_id(value: Any) -> bool:
    return _matches(ASSET_ID_PATTERN, value)


def parse_trade_url(value: str) -> tuple[str, str]:
    """
    解析交易链接，返回 (partner, token)。

    Raises:
        ValueError: 链接格式不合法
    """
    match = TRADE_URL_PATTERN.fullmatch(value)
    if match is None:
        raise ValueError(TRADE_URL_ERROR_MESSAGE)
    return match.group("partner"), match.group("token")
