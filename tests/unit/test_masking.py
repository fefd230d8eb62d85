"""
File: tests/unit/test_masking.py
Description: 日志脱敏工具单元测试
Created: 2026-03-02
"""

from app.utils.masking import (
    mask_sensitive_data,
    mask_trade_url,
    mask_url_secrets,
    mask_wallet,
)

WALLET = "0x52908400098527886E0F7030069857D2E4169EE7"


def test_mask_wallet_keeps_prefix_and_suffix() -> None:
    assert mask_wallet(WALLET) == "0x5290...9EE7"
    assert mask_wallet("0x12") == "******"
    assert mask_wallet(None) == "******"


def test_mask_trade_url_hides_token_only() -> None:
    url = "https://steamcommunity.com/tradeoffer/new/?partner=12345&token=AbCd_-1"

    assert mask_trade_url(url) == (
        "https://steamcommunity.com/tradeoffer/new/?partner=12345&token=******"
    )


def test_mask_url_secrets_hides_api_key_and_signature() -> None:
    text = (
        'HTTP Request: GET https://api.steampowered.com/ISteamUser/'
        'GetPlayerSummaries/v0002/?key=SECRET123&steamids=76561197960287930 "200 OK"'
    )
    masked = mask_url_secrets(text)

    assert "SECRET123" not in masked
    assert "key=******" in masked
    assert "steamids=76561197960287930" in masked

    form = "openid.mode=check_authentication&openid.sig=abc%2Bdef&openid.signed=x"
    assert mask_url_secrets(form) == (
        "openid.mode=check_authentication&openid.sig=******&openid.signed=x"
    )


def test_mask_sensitive_data_walks_nested_structures() -> None:
    data = {
        "wallet": WALLET,
        "query": {"openid.sig": "sig", "steamId": "76561197960287930"},
        "items": [{"api_key": "k"}],
        "trade_url": "https://steamcommunity.com/tradeoffer/new/?partner=1&token=t",
    }

    masked = mask_sensitive_data(data)

    assert masked["wallet"] == "0x5290...9EE7"
    assert masked["query"] == {"openid.sig": "******", "steamId": "76561197960287930"}
    assert masked["items"] == [{"api_key": "******"}]
    assert masked["trade_url"].endswith("token=******")
    # 原数据不被修改
    assert data["wallet"] == WALLET
