"""
File: app/domains/trade/router.py
Description: 交易链接与交易报价 HTTP 接口

接口：
1. POST /trade-endpoint        保存交易链接
2. GET  /trade-endpoint        读取交易链接
3. POST /trade-endpoint/offer  生成交易报价链接

Created: 2026-03-02
"""

from typing import Annotated

from fastapi import APIRouter, Query

from app.core.exceptions import AppException
from app.core.response import ResponseModel
from app.domains.links.constants import LinkError
from app.domains.trade.constants import TradeMsg
from app.domains.trade.dependencies import TradeServiceDep
from app.domains.trade.schemas import (
    TradeOfferRead,
    TradeOfferRequest,
    TradeUrlRead,
    TradeUrlRequest,
)

router = APIRouter()


@router.post(
    "",
    response_model=ResponseModel[TradeUrlRead],
    summary="保存 Steam 交易链接",
)
async def save_trade_url(
    body: TradeUrlRequest,
    service: TradeServiceDep,
) -> ResponseModel[TradeUrlRead]:
    """钱包无记录时创建记录，已有记录时只更新交易链接。"""
    data = await service.save_trade_url(body.wallet_address, body.trade_url)
    return ResponseModel.success(data=data, message=TradeMsg.TRADE_URL_SAVED)


@router.get(
    "",
    response_model=ResponseModel[TradeUrlRead],
    summary="读取 Steam 交易链接",
)
async def get_trade_url(
    service: TradeServiceDep,
    wallet_address: Annotated[str | None, Query(description="钱包地址")] = None,
) -> ResponseModel[TradeUrlRead]:
    if not wallet_address:
        raise AppException(LinkError.MISSING_WALLET)

    data = await service.get_trade_url(wallet_address)
    return ResponseModel.success(data=data, message=TradeMsg.TRADE_URL_FOUND)


@router.post(
    "/offer",
    response_model=ResponseModel[TradeOfferRead],
    summary="生成交易报价链接",
)
async def build_trade_offer(
    body: TradeOfferRequest,
    service: TradeServiceDep,
) -> ResponseModel[TradeOfferRead]:
    """
    - **400 trade.empty_selection / trade.not_tradable / trade.already_selected**
    - **404**: 对方钱包无记录或未设置交易链接
    """
    data = await service.build_offer(body.wallet_address, body.items)
    return ResponseModel.success(data=data, message=TradeMsg.OFFER_BUILT)
