"""
File: app/domains/identity/router.py
Description: Steam OpenID 登录 HTTP 接口

接口：
1. GET /identity/auth      跳转到 Steam 登录页
2. GET /identity/callback  Steam 回调，复核后跳转回前端

Created: 2026-03-02
"""

from typing import Annotated

from fastapi import APIRouter, Query, Request
from fastapi.responses import RedirectResponse
from starlette.status import HTTP_302_FOUND

from app.domains.identity.dependencies import IdentityServiceDep

router = APIRouter()


@router.get(
    "/auth",
    response_class=RedirectResponse,
    status_code=HTTP_302_FOUND,
    summary="发起 Steam 登录",
)
async def start_steam_auth(
    service: IdentityServiceDep,
    wallet: Annotated[str | None, Query(description="钱包地址")] = None,
) -> RedirectResponse:
    """
    302 跳转到 Steam OpenID 登录页。
    钱包缺失或格式错误时返回 400 信封。
    """
    url = service.build_auth_redirect(wallet)
    return RedirectResponse(url, status_code=HTTP_302_FOUND)


@router.get(
    "/callback",
    response_class=RedirectResponse,
    status_code=HTTP_302_FOUND,
    summary="Steam 登录回调",
)
async def steam_auth_callback(
    request: Request,
    service: IdentityServiceDep,
) -> RedirectResponse:
    """
    始终以 302 跳转回前端：成功带 steam_link_success + data，
    失败带 error + message。
    """
    url = await service.handle_callback(dict(request.query_params))
    return RedirectResponse(url, status_code=HTTP_302_FOUND)
