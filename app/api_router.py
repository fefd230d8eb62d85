"""
File: app/api_router.py
Description: 根 API 路由聚合层

本模块负责：
1. 聚合所有业务领域的 Router (identity, links, trade, inventory, onboarding)
2. 统一设置路由前缀 (如 /identity, /trade-endpoint)
3. 统一设置标签 (Tags) 用于 OpenAPI 文档分组

Created: 2025-12-05
Updated: 2026-03-02 (Steam 绑定服务路由)
"""

from fastapi import APIRouter

from app.domains.identity.router import router as identity_router
from app.domains.inventory.router import router as inventory_router
from app.domains.links.router import router as links_router
from app.domains.onboarding.router import router as onboarding_router
from app.domains.trade.router import router as trade_router

# 创建根 API 路由
api_router = APIRouter()

# ------------------------------------------------------------------------------
# 注册领域路由
# ------------------------------------------------------------------------------

# 1. Steam 登录 (OpenID 跳转与回调)
api_router.include_router(identity_router, prefix="/identity", tags=["identity"])

# 2. 钱包 ↔ Steam 绑定
api_router.include_router(links_router, prefix="/identity", tags=["links"])

# 3. 交易链接与交易报价
api_router.include_router(trade_router, prefix="/trade-endpoint", tags=["trade"])

# 4. Steam 库存
api_router.include_router(inventory_router, prefix="/inventory", tags=["inventory"])

# 5. 引导流程
api_router.include_router(onboarding_router, prefix="/onboarding", tags=["onboarding"])
