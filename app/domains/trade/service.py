"""
File: app/domains/trade/service.py
Description: 交易领域服务

本模块负责：
1. 保存 / 读取钱包的 Steam 交易链接 (委托 LinkService)
2. 根据对方交易链接与选中物品生成交易报价链接

Created: 2026-03-02
"""

from app.core.exceptions import AppException
from app.core.logging import logger
from app.domains.links.service import LinkService, normalize_wallet
from app.domains.trade.constants import TradeError
from app.domains.trade.schemas import TradeItem, TradeOfferRead, TradeUrlRead
from app.domains.trade.selection import TradeSelection, build_trade_offer_url
from app.utils.masking import mask_wallet


class TradeService:
    def __init__(self, links: LinkService):
        self.links = links

    async def save_trade_url(self, wallet_address: str, trade_url: str) -> TradeUrlRead:
        link = await self.links.upsert_trade_url(wallet_address, trade_url)
        return TradeUrlRead.model_validate(link)

    async def get_trade_url(self, wallet_address: str) -> TradeUrlRead:
        trade_url = await self.links.get_trade_url(wallet_address)
        return TradeUrlRead(
            wallet_address=normalize_wallet(wallet_address), trade_url=trade_url
        )

    async def build_offer(
        self, wallet_address: str, items: list[TradeItem]
    ) -> TradeOfferRead:
        """
        生成交易报价链接。

        先校验物品选择 (去重 / 可交易)，再查询对方的交易链接，
        对方无记录返回 404 links.not_found，未设置链接返回 404 trade.trade_url_not_set。
        """
        selection = TradeSelection()
        for item in items:
            selection.add(item)
        if not len(selection):
            raise AppException(TradeError.EMPTY_SELECTION)

        trade_url = await self.links.get_trade_url(wallet_address)
        if not trade_url:
            raise AppException(TradeError.TRADE_URL_NOT_SET)

        offer_url = build_trade_offer_url(trade_url, selection.asset_ids)
        logger.bind(
            wallet=mask_wallet(wallet_address), item_count=len(selection)
        ).info("Trade offer URL built")
        return TradeOfferRead(
            wallet_address=normalize_wallet(wallet_address),
            trade_offer_url=offer_url,
            asset_ids=selection.asset_ids,
        )
