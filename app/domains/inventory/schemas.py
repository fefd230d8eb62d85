"""
File: app/domains/inventory/schemas.py
Description: Steam 库存领域 Pydantic 模型 (Schema)

本模块定义：
1. ItemTag / InventoryItem: 归一化后的物品 (asset + description 合并)
2. InventoryFilters: 纯函数式筛选条件
3. InventoryPage: GET /inventory 响应数据

Steam 返回的数字 ID 有时为 int 有时为 str，统一转为 str。

Created: 2026-03-02
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.domains.inventory.constants import TAG_CATEGORY_RARITY, TAG_CATEGORY_TYPE


class ItemTag(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    category: str
    internal_name: str
    localized_category_name: str | None = None
    localized_tag_name: str | None = None
    color: str | None = None


def find_tag(tags: list[ItemTag] | None, category: str) -> ItemTag | None:
    """返回指定分类的第一个标签"""
    for tag in tags or []:
        if tag.category == category:
            return tag
    return None


class InventoryItem(BaseModel):
    """
    归一化后的库存物品。

    tradable / marketable / commodity 保留 Steam 的 0/1 整数语义。
    rarity / rarity_color / item_type 为派生展示字段。
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    # 来自 asset
    assetid: str
    classid: str = ""
    instanceid: str = "0"
    amount: str = "1"
    appid: str | None = None
    contextid: str | None = None

    # 来自 description
    name: str
    market_name: str = ""
    market_hash_name: str = ""
    name_color: str | None = None
    type: str = ""
    icon_url: str = ""
    icon_url_large: str | None = None
    tradable: int = 0
    marketable: int = 0
    commodity: int = 0
    market_tradable_restriction: int | None = None
    market_marketable_restriction: int | None = None
    descriptions: list[dict[str, Any]] | None = None
    tags: list[ItemTag] | None = None
    actions: list[dict[str, Any]] | None = None
    market_actions: list[dict[str, Any]] | None = None

    # 派生字段
    rarity: str
    rarity_color: str
    item_type: str

    def find_tag(self, category: str) -> ItemTag | None:
        return find_tag(self.tags, category)


class InventoryFilters(BaseModel):
    """
    库存筛选条件 (None 表示不限)。

    - search: 名称或市场名称包含该子串 (忽略大小写)
    - rarity / type: 对应标签 internal_name 完全相等
    - tradable / marketable: 按 0/1 标记匹配
    """

    search: str | None = None
    rarity: str | None = None
    type: str | None = None
    tradable: bool | None = None
    marketable: bool | None = None

    def matches(self, item: InventoryItem) -> bool:
        if self.search:
            needle = self.search.lower()
            if (
                needle not in item.name.lower()
                and needle not in item.market_name.lower()
            ):
                return False

        if self.rarity:
            tag = item.find_tag(TAG_CATEGORY_RARITY)
            if tag is None or tag.internal_name != self.rarity:
                return False

        if self.type:
            tag = item.find_tag(TAG_CATEGORY_TYPE)
            if tag is None or tag.internal_name != self.type:
                return False

        if self.tradable is not None and self.tradable != (item.tradable == 1):
            return False

        if self.marketable is not None and self.marketable != (item.marketable == 1):
            return False

        return True


class InventoryPage(BaseModel):
    """GET /inventory 响应数据"""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    total_inventory_count: int = 0
    assets: list[dict[str, Any]] = Field(default_factory=list)
    descriptions: list[dict[str, Any]] = Field(default_factory=list)
    more_items: int = 0
    last_assetid: str | None = None
    more_start: int | None = None
    has_more: bool = False
    items: list[InventoryItem] = Field(default_factory=list)
