"""
File: app/domains/inventory/service.py
Description: Steam 库存领域服务

本模块负责：
1. fetch_page: 拉取一页库存并归一化
2. normalize_items: 按 (classid, instanceid) 合并 assets 与 descriptions
3. apply_filters: 基于 InventoryFilters 的纯函数筛选

注意：
未匹配到 description 的 asset 不会被丢弃，而是生成 "Unknown Item" 占位，
保证 items 数量与 assets 数量一致。

Created: 2026-03-02
Updated: 2026-10-18 (上游数据校验失败映射为 upstream_error)
"""

from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from app.core.exceptions import AppException
from app.core.logging import logger
from app.domains.inventory.client import SteamInventoryClient
from app.domains.inventory.constants import (
    DEFAULT_RARITY,
    DEFAULT_RARITY_COLOR,
    RARITY_COLORS,
    TAG_CATEGORY_RARITY,
    TAG_CATEGORY_TYPE,
    UNKNOWN_ITEM_NAME,
    UNKNOWN_ITEM_TYPE,
    InventoryError,
)
from app.domains.inventory.schemas import (
    InventoryFilters,
    InventoryItem,
    InventoryPage,
    ItemTag,
    find_tag,
)
from app.utils.validation import is_valid_steam_id

# 未匹配 description 时使用的占位字段
PLACEHOLDER_DESCRIPTION: dict[str, Any] = {
    "name": UNKNOWN_ITEM_NAME,
    "type": UNKNOWN_ITEM_TYPE,
    "market_name": "",
    "market_hash_name": "",
    "icon_url": "",
    "tradable": 0,
    "marketable": 0,
    "commodity": 0,
}

# 允许从 description 合并到物品的字段
DESCRIPTION_FIELDS = (
    "name",
    "market_name",
    "market_hash_name",
    "name_color",
    "type",
    "icon_url",
    "icon_url_large",
    "tradable",
    "marketable",
    "commodity",
    "market_tradable_restriction",
    "market_marketable_restriction",
    "descriptions",
    "tags",
    "actions",
    "market_actions",
)


# ------------------------------------------------------------------------------
# 归一化 (纯函数)
# ------------------------------------------------------------------------------


def _description_key(record: dict[str, Any]) -> tuple[str, str]:
    return str(record.get("classid", "")), str(record.get("instanceid", "0"))


def rarity_color(name_color: str | None, tags: list[ItemTag] | None) -> str:
    """名称颜色优先，其次按稀有度 internal_name 映射，最后使用默认灰色"""
    if name_color:
        return f"#{name_color}"
    tag = find_tag(tags, TAG_CATEGORY_RARITY)
    if tag is None:
        return DEFAULT_RARITY_COLOR
    return RARITY_COLORS.get(tag.internal_name, DEFAULT_RARITY_COLOR)


def build_item(asset: dict[str, Any], description: dict[str, Any] | None) -> InventoryItem:
    """合并一条 asset 与其 description (None 时生成占位物品)"""
    merged: dict[str, Any] = {
        k: asset.get(k)
        for k in ("assetid", "classid", "instanceid", "amount", "appid", "contextid")
        if asset.get(k) is not None
    }
    if description is None:
        merged.update(PLACEHOLDER_DESCRIPTION)
    else:
        merged.update(
            {k: description[k] for k in DESCRIPTION_FIELDS if description.get(k) is not None}
        )
        merged.setdefault("name", UNKNOWN_ITEM_NAME)

    tags = [ItemTag.model_validate(t) for t in merged.get("tags") or []]
    merged["tags"] = tags or None

    rarity_tag = find_tag(tags, TAG_CATEGORY_RARITY)
    type_tag = find_tag(tags, TAG_CATEGORY_TYPE)

    merged["rarity"] = (rarity_tag and rarity_tag.localized_tag_name) or DEFAULT_RARITY
    merged["rarity_color"] = rarity_color(merged.get("name_color"), tags)
    merged["item_type"] = (
        (type_tag and type_tag.localized_tag_name)
        or merged.get("type")
        or UNKNOWN_ITEM_TYPE
    )
    return InventoryItem.model_validate(merged)


def normalize_items(
    assets: Iterable[dict[str, Any]], descriptions: Iterable[dict[str, Any]]
) -> list[InventoryItem]:
    """
    按 (classid, instanceid) 合并 assets 与 descriptions。
    同一 key 出现多条 description 时取第一条。
    """
    index: dict[tuple[str, str], dict[str, Any]] = {}
    for record in descriptions:
        index.setdefault(_description_key(record), record)

    return [build_item(asset, index.get(_description_key(asset))) for asset in assets]


def apply_filters(
    items: Iterable[InventoryItem], filters: InventoryFilters
) -> list[InventoryItem]:
    return [item for item in items if filters.matches(item)]


# ------------------------------------------------------------------------------
# Service
# ------------------------------------------------------------------------------


class InventoryService:
    def __init__(self, client: SteamInventoryClient):
        self.client = client

    async def fetch_page(
        self,
        steam_id: str | None,
        app_id: str,
        context_id: str,
        count: int,
        start_assetid: str | None = None,
        filters: InventoryFilters | None = None,
    ) -> InventoryPage:
        """
        拉取一页库存。

        - Steam 返回 success != 1 时抛出 inventory.unavailable (HTTP 200, success=false)
        - filters 只作用于 items，assets / descriptions 保持原样
        - asset 或 tag 缺少必需字段时视为上游数据异常 (inventory.upstream_error)
        """
        if not steam_id:
            raise AppException(InventoryError.MISSING_STEAM_ID)
        if not is_valid_steam_id(steam_id):
            raise AppException(InventoryError.INVALID_STEAM_ID)

        payload = await self.client.fetch_raw(
            steam_id, app_id, context_id, count, start_assetid
        )

        if payload.get("success") != 1:
            logger.bind(steam_id=steam_id, upstream_success=payload.get("success")).info(
                "Steam inventory unavailable"
            )
            raise AppException(InventoryError.UNAVAILABLE)

        assets = [a for a in payload.get("assets") or [] if isinstance(a, dict)]
        descriptions = [
            d for d in payload.get("descriptions") or [] if isinstance(d, dict)
        ]
        try:
            items = normalize_items(assets, descriptions)
        except ValidationError as exc:
            logger.bind(steam_id=steam_id, error_count=exc.error_count()).warning(
                "Steam inventory payload failed validation"
            )
            raise AppException(InventoryError.UPSTREAM_ERROR) from exc

        if filters is not None:
            items = apply_filters(items, filters)

        more_items = int(payload.get("more_items") or 0)
        return InventoryPage(
            total_inventory_count=payload.get("total_inventory_count") or 0,
            assets=assets,
            descriptions=descriptions,
            more_items=more_items,
            last_assetid=payload.get("last_assetid"),
            more_start=payload.get("more_start"),
            has_more=bool(more_items),
            items=items,
        )
