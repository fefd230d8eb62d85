"""
File: tests/unit/test_validation.py
Description: 格式校验工具单元测试 (钱包 / Steam ID / 交易链接)
Created: 2026-03-02
"""

import pytest

from app.utils.validation import (
    is_valid_asset_id,
    is_valid_steam_id,
    is_valid_trade_url,
    is_valid_wallet_address,
    parse_trade_url,
)

VALID_TRADE_URL = "https://steamcommunity.com/tradeoffer/new/?partner=12345678&token=Ab_c-9"


@pytest.mark.parametrize(
    "value",
    [
        "0x52908400098527886E0F7030069857D2E4169EE7",
        "0x" + "a" * 40,
        "0x" + "0" * 40,
    ],
)
def test_wallet_accepts_hex_addresses(value: str) -> None:
    assert is_valid_wallet_address(value) is True


@pytest.mark.parametrize(
    "value",
    [
        None,
        "",
        123,
        "0x" + "a" * 39,
        "0x" + "a" * 41,
        "0X" + "a" * 40,
        "0x" + "g" * 40,
        "52908400098527886E0F7030069857D2E4169EE7aa",
        "0x" + "a" * 40 + "\n",
        " 0x" + "a" * 40,
    ],
)
def test_wallet_rejects_malformed_values(value: object) -> None:
    assert is_valid_wallet_address(value) is False


def test_steam_id_requires_exactly_17_digits() -> None:
    assert is_valid_steam_id("76561197960287930") is True
    assert is_valid_steam_id("7656119796028793") is False
    assert is_valid_steam_id("765611979602879301") is False
    assert is_valid_steam_id("7656119796028793a") is False
    assert is_valid_steam_id("７6561197960287930") is False
    assert is_valid_steam_id(None) is False
    assert is_valid_steam_id(76561197960287930) is False


def test_trade_url_accepts_canonical_form() -> None:
    assert is_valid_trade_url(VALID_TRADE_URL) is True


@pytest.mark.parametrize(
    "value",
    [
        "http://steamcommunity.com/tradeoffer/new/?partner=1&token=abc",
        "https://steamcommunity.co/tradeoffer/new/?partner=1&token=abc",
        "https://evil.example/tradeoffer/new/?partner=1&token=abc",
        "https://steamcommunity.com/tradeoffer/new/?partner=1",
        "https://steamcommunity.com/tradeoffer/new/?partner=abc&token=abc",
        "https://steamcommunity.com/tradeoffer/new/?partner=1&token=a b",
        "https://steamcommunity.com/tradeoffer/new/?token=abc&partner=1",
        VALID_TRADE_URL + "&foo=bar",
        "",
        None,
    ],
)
def test_trade_url_rejects_other_forms(value: object) -> None:
    assert is_valid_trade_url(value) is False


def test_parse_trade_url_extracts_partner_and_token() -> None:
    assert parse_trade_url(VALID_TRADE_URL) == ("12345678", "Ab_c-9")

    with pytest.raises(ValueError):
        parse_trade_url("https://steamcommunity.com/tradeoffer/new/?partner=1")


def test_asset_id_is_numeric() -> None:
    assert is_valid_asset_id("27348562891") is True
    assert is_valid_asset_id("12a") is False
    assert is_valid_asset_id("") is False
