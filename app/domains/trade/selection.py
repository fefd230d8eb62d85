"""
File: app/domains/trade/selection.py
Description: 交易物品选择与报价链接构造

TradeSelection 维护一次 P2P 交易中被标记的物品 (按加入顺序)，
build_trade_offer_url 将对方交易链接与物品 ID 组合为 Steam 报价地址。

Created: 2026-03-02
"""

from collections.abc import Iterable

from app.core.exceptions import AppException
from app.domains.links.constants import LinkError
from app.domains.trade.constants import TRADE_OFFER_BASE_URL, TradeError
from app.domains.trade.schemas import TradeItem
from app.utils.validation import is_valid_asset_id, parse_trade_url


class TradeSelection:
    """
    已选择的可交易物品集合。

    规则：
    - 同一 assetid 只能加入一次 (trade.already_selected)
    - 不可交易物品拒绝加入 (trade.not_tradable)
    """

    def __init__(self) -> None:
        self._items: dict[str, TradeItem] = {}

    def __len__(self) -> int:
        return len(self._items)

    @property
    def asset_ids(self) -> list[str]:
        return list(self._items)

    def contains(self, assetid: str) -> bool:
        return assetid in self._items

    def add(self, item: TradeItem) -> None:
        if not item.tradable:
            raise AppException(TradeError.NOT_TRADABLE)
        if self.contains(item.assetid):
            raise AppException(TradeError.ALREADY_SELECTED)
        self._items[item.assetid] = item

    def remove(self, assetid: str) -> bool:
        """移除物品，返回该物品此前是否在列表中"""
        return self._items.pop(assetid, None) is not None

    def clear(self) -> None:
        self._items.clear()


def build_trade_offer_url(trade_url: str, asset_ids: Iterable[str]) -> str:
    """
    构造交易报价链接。

    示例:
        https://steamcommunity.com/tradeoffer/new/?partner=1&token=abc&assetids=11,12
    """
    ids = list(asset_ids)
    if not ids:
        raise AppException(TradeError.EMPTY_SELECTION)
    if not all(is_valid_asset_id(asset_id) for asset_id in ids):
        raise AppException(TradeError.INVALID_ASSET_ID)

    try:
        partner, token = parse_trade_url(trade_url)
    except ValueError as exc:
        raise AppException(LinkError.INVALID_TRADE_URL) from exc

    return (
        f"{TRADE_OFFER_BASE_URL}?partner={partner}&token={token}"
        f"&assetids={','.join(ids)}"
    )
