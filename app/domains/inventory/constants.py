"""
File: app/domains/inventory/constants.py
Description: Steam 库存领域常量定义
Namespace: inventory.*

Created: 2026-03-02
Updated: 2026-10-18 (upstream_error 统一为 500，上游数据校验失败归入 upstream_error)
"""

from starlette.status import (
    HTTP_200_OK,
    HTTP_400_BAD_REQUEST,
    HTTP_403_FORBIDDEN,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from app.core.error_code import BaseErrorCode
from app.utils.validation import STEAM_ID_ERROR_MESSAGE

# 上游 steamcommunity 的状态码语义
STEAM_STATUS_PRIVATE = 403
STEAM_STATUS_UNAVAILABLE = 500

# 未匹配到 description 的占位物品
UNKNOWN_ITEM_NAME = "Unknown Item"
UNKNOWN_ITEM_TYPE = "Unknown"

# 标签分类
TAG_CATEGORY_RARITY = "Rarity"
TAG_CATEGORY_TYPE = "Type"

DEFAULT_RARITY = "Common"
DEFAULT_RARITY_COLOR = "#b0b0b0"

# 稀有度 internal_name -> 展示颜色
RARITY_COLORS: dict[str, str] = {
    "rarity_common": "#b0b0b0",
    "rarity_uncommon": "#5e98d9",
    "rarity_rare": "#4b69ff",
    "rarity_mythical": "#8847ff",
    "rarity_legendary": "#d32ce6",
    "rarity_ancient": "#eb4b4b",
    "rarity_immortal": "#e4ae39",
}

MAX_PAGE_SIZE = 2000


class InventoryError(BaseErrorCode):
    """
    库存领域错误定义
    Tuple Structure: (HTTP_Status, Code_String, Default_Message)
    """

    MISSING_STEAM_ID = (HTTP_400_BAD_REQUEST, "inventory.missing_steam_id", "缺少 Steam ID")
    INVALID_STEAM_ID = (
        HTTP_400_BAD_REQUEST,
        "inventory.invalid_steam_id",
        STEAM_ID_ERROR_MESSAGE,
    )

    # 上游状态映射
    PRIVATE = (
        HTTP_403_FORBIDDEN,
        "inventory.private",
        "Steam 库存未公开，请在 Steam 隐私设置中将库存设为公开",
    )
    UPSTREAM_UNAVAILABLE = (
        HTTP_500_INTERNAL_SERVER_ERROR,
        "inventory.upstream_unavailable",
        "Steam 库存暂时不可用，请稍后重试",
    )
    NETWORK_ERROR = (
        HTTP_503_SERVICE_UNAVAILABLE,
        "inventory.network_error",
        "无法连接 Steam，请检查网络后重试",
    )
    UPSTREAM_ERROR = (
        HTTP_500_INTERNAL_SERVER_ERROR,
        "inventory.upstream_error",
        "获取 Steam 库存失败",
    )

    # Steam 返回 success != 1 (库存为空或不可用)，HTTP 200 + success=false
    UNAVAILABLE = (
        HTTP_200_OK,
        "inventory.unavailable",
        "无法获取 Steam 库存，库存可能为空或不可用",
    )


class InventoryMsg:
    """业务文案常量"""

    FETCH_SUCCESS = "获取库存成功"
