"""
File: app/domains/inventory/router.py
Description: Steam 库存 HTTP 接口

GET /inventory?steamId=...&appId=730&contextId=2&count=100&start_assetid=...
可选筛选参数: search / rarity / type / tradable / marketable (仅作用于 items)

Created: 2026-03-02
"""

from typing import Annotated

from fastapi import APIRouter, Query

from app.core.config import settings
from app.core.response import ResponseModel
from app.domains.inventory.constants import MAX_PAGE_SIZE, InventoryMsg
from app.domains.inventory.dependencies import InventoryServiceDep
from app.domains.inventory.schemas import InventoryFilters, InventoryPage

router = APIRouter()


@router.get(
    "",
    response_model=ResponseModel[InventoryPage],
    summary="获取 Steam 库存 (单页)",
)
async def get_inventory(
    service: InventoryServiceDep,
    steam_id: Annotated[str | None, Query(alias="steamId")] = None,
    app_id: Annotated[str, Query(alias="appId", pattern=r"^\d+$")] = (
        settings.STEAM_DEFAULT_APP_ID
    ),
    context_id: Annotated[str, Query(alias="contextId", pattern=r"^\d+$")] = (
        settings.STEAM_DEFAULT_CONTEXT_ID
    ),
    count: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = (
        settings.STEAM_DEFAULT_PAGE_SIZE
    ),
    start_assetid: Annotated[str | None, Query(pattern=r"^\d+$")] = None,
    search: str | None = None,
    rarity: str | None = None,
    type: str | None = None,
    tradable: bool | None = None,
    marketable: bool | None = None,
) -> ResponseModel[InventoryPage]:
    """
    - **403 inventory.private**: 库存未公开
    - **500 / 503**: 上游故障
    - **200 + success=false (inventory.unavailable)**: Steam 未返回库存
    """
    filters = InventoryFilters(
        search=search,
        rarity=rarity,
        type=type,
        tradable=tradable,
        marketable=marketable,
    )
    page = await service.fetch_page(
        steam_id=steam_id,
        app_id=app_id,
        context_id=context_id,
        count=count,
        start_assetid=start_assetid,
        filters=filters,
    )
    return ResponseModel.success(data=page, message=InventoryMsg.FETCH_SUCCESS)
