"""
File: app/domains/links/router.py
Description: 钱包 ↔ Steam 绑定 HTTP 接口

接口：
1. POST /identity/link         手动提交绑定
2. GET  /identity/link/status  查询钱包绑定状态

Created: 2026-03-02
"""

from typing import Annotated, Any

from fastapi import APIRouter, Query

from app.core.exceptions import AppException
from app.core.response import ResponseModel
from app.domains.links.constants import LinkError, LinkMsg
from app.domains.links.dependencies import LinkServiceDep
from app.domains.links.schemas import (
    SteamLinkRequest,
    SteamLinkResult,
    SteamLinkStatus,
)

router = APIRouter()


@router.post(
    "/link",
    response_model=ResponseModel[SteamLinkResult],
    summary="绑定钱包与 Steam 账号",
)
async def link_steam_account(
    body: SteamLinkRequest,
    service: LinkServiceDep,
) -> ResponseModel[SteamLinkResult]:
    """
    写入钱包 ↔ Steam 绑定。

    - **409 links.steam_linked**: Steam 账号已绑定其他钱包
    - **409 links.wallet_linked**: 钱包已绑定其他 Steam 账号
    - 相同组合重复提交视为成功
    """
    link = await service.upsert_link(
        wallet_address=body.wallet_address,
        steam_id=body.steam_id,
        steam_username=body.steam_username,
        steam_avatar=body.steam_avatar,
        steam_profile_url=body.steam_profile_url,
    )
    return ResponseModel.success(
        data=SteamLinkResult.model_validate(link), message=LinkMsg.LINK_SUCCESS
    )


@router.get(
    "/link/status",
    response_model=ResponseModel[Any],
    summary="查询钱包绑定状态",
)
async def get_link_status(
    service: LinkServiceDep,
    wallet: Annotated[str | None, Query(description="钱包地址")] = None,
) -> ResponseModel[Any]:
    """
    未绑定时返回 200 + success=false，前端据此展示绑定入口。
    """
    if not wallet:
        raise AppException(LinkError.MISSING_WALLET)

    link = await service.get_link_status(wallet)
    if link is None:
        return ResponseModel.fail(
            code=LinkError.NOT_LINKED.code, message=LinkError.NOT_LINKED.msg
        )

    return ResponseModel.success(
        data=SteamLinkStatus.model_validate(link), message=LinkMsg.STATUS_FOUND
    )
