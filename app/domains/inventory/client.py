"""
File: app/domains/inventory/client.py
Description: Steam 社区库存接口客户端

请求: GET {STEAM_COMMUNITY_URL}/inventory/{steam_id}/{app_id}/{context_id}
      ?l=english&count=N[&start_assetid=X]

上游状态映射：
- 403 -> inventory.private
- 500 -> inventory.upstream_unavailable
- 网络异常 / 超时 -> inventory.network_error
- 其他非 2xx / 响应无法解析 -> inventory.upstream_error

Created: 2026-03-02
"""

from typing import Any

import httpx
import orjson

from app.core.exceptions import AppException
from app.core.logging import logger
from app.domains.inventory.constants import (
    STEAM_STATUS_PRIVATE,
    STEAM_STATUS_UNAVAILABLE,
    InventoryError,
)

NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


class SteamInventoryClient:
    """
    库存接口客户端，只负责 HTTP 交互与状态映射，返回原始 JSON。
    """

    def __init__(self, http: httpx.AsyncClient, community_url: str):
        self.http = http
        self.community_url = community_url.rstrip("/")

    async def fetch_raw(
        self,
        steam_id: str,
        app_id: str,
        context_id: str,
        count: int,
        start_assetid: str | None = None,
    ) -> dict[str, Any]:
        url = f"{self.community_url}/inventory/{steam_id}/{app_id}/{context_id}"
        params: dict[str, Any] = {"l": "english", "count": count}
        if start_assetid:
            params["start_assetid"] = start_assetid

        log = logger.bind(steam_id=steam_id, app_id=app_id, context_id=context_id)

        try:
            response = await self.http.get(url, params=params, headers=NO_CACHE_HEADERS)
        except httpx.HTTPError as exc:
            log.bind(error=str(exc)).warning("Steam inventory request failed")
            raise AppException(InventoryError.NETWORK_ERROR) from exc

        if response.status_code == STEAM_STATUS_PRIVATE:
            raise AppException(InventoryError.PRIVATE)
        if response.status_code == STEAM_STATUS_UNAVAILABLE:
            raise AppException(InventoryError.UPSTREAM_UNAVAILABLE)
        if not response.is_success:
            log.bind(status_code=response.status_code).warning(
                "Steam inventory returned error status"
            )
            raise AppException(InventoryError.UPSTREAM_ERROR)

        try:
            payload = orjson.loads(response.content)
        except orjson.JSONDecodeError as exc:
            log.warning("Steam inventory response is not valid JSON")
            raise AppException(InventoryError.UPSTREAM_ERROR) from exc

        if not isinstance(payload, dict):
            raise AppException(InventoryError.UPSTREAM_ERROR)

        return payload
