"""
File: tests/unit/test_models.py
Description: ORM 基类与绑定模型单元测试
Created: 2026-03-02
"""

import pytest

from app.db.models import SteamLink
from app.db.models.base import resolve_table_name


@pytest.mark.parametrize(
    ("class_name", "table_name"),
    [
        ("SteamLink", "steam_links"),
        ("APIKey", "api_keys"),
        ("HTTPResponse", "http_responses"),
    ],
)
def test_resolve_table_name(class_name: str, table_name: str) -> None:
    assert resolve_table_name(class_name) == table_name


def test_steam_link_constraint_names_follow_convention() -> None:
    table = SteamLink.__table__

    names = {c.name for c in table.constraints}
    assert "uq_steam_links_wallet_address" in names
    assert "uq_steam_links_steam_id" in names
    assert "ck_steam_links_wallet_length" in names
    assert "ck_steam_links_steam_id_length" in names


def test_link_flags() -> None:
    link = SteamLink(wallet_address="0x" + "a" * 40)
    assert link.is_steam_linked is False
    assert link.has_trade_url is False

    link.steam_id = "76561197960287930"
    link.trade_url = "https://steamcommunity.com/tradeoffer/new/?partner=1&token=t"
    assert link.is_steam_linked is True
    assert link.has_trade_url is True
