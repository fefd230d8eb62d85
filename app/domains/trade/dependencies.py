"""
File: app/domains/trade/dependencies.py
Description: 交易领域依赖注入定义
Created: 2026-03-02
"""

from typing import Annotated

from fastapi import Depends

from app.domains.links.dependencies import LinkServiceDep
from app.domains.trade.service import TradeService


async def get_trade_service(links: LinkServiceDep) -> TradeService:
    """初始化 Service 实例"""
    return TradeService(links)


TradeServiceDep = Annotated[TradeService, Depends(get_trade_service)]
