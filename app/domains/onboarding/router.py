"""
File: app/domains/onboarding/router.py
Description: 引导流程 HTTP 接口
Created: 2026-03-02
"""

from typing import Annotated

from fastapi import APIRouter, Query

from app.core.response import ResponseModel
from app.domains.onboarding.dependencies import OnboardingServiceDep
from app.domains.onboarding.schemas import OnboardingState

router = APIRouter()


@router.get(
    "/state",
    response_model=ResponseModel[OnboardingState],
    summary="获取当前引导步骤",
)
async def get_onboarding_state(
    service: OnboardingServiceDep,
    wallet: Annotated[str | None, Query(description="钱包地址")] = None,
) -> ResponseModel[OnboardingState]:
    data = await service.evaluate(wallet)
    return ResponseModel.success(data=data)
