"""
File: app/domains/inventory/dependencies.py
Description: 库存领域依赖注入定义
Created: 2026-03-02
"""

from typing import Annotated

from fastapi import Depends

from app.api.deps import HttpClient
from app.core.config import settings
from app.domains.inventory.client import SteamInventoryClient
from app.domains.inventory.service import InventoryService


async def get_inventory_client(http: HttpClient) -> SteamInventoryClient:
    return SteamInventoryClient(http=http, community_url=settings.STEAM_COMMUNITY_URL)


async def get_inventory_service(
    client: Annotated[SteamInventoryClient, Depends(get_inventory_client)],
) -> InventoryService:
    """初始化 Service 实例"""
    return InventoryService(client)


InventoryServiceDep = Annotated[InventoryService, Depends(get_inventory_service)]
