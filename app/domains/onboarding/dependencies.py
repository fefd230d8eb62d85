"""
File: app/domains/onboarding/dependencies.py
Description: 引导流程依赖注入定义
Created: 2026-03-02
"""

from typing import Annotated

from fastapi import Depends

from app.domains.links.dependencies import LinkServiceDep
from app.domains.onboarding.service import OnboardingService


async def get_onboarding_service(links: LinkServiceDep) -> OnboardingService:
    return OnboardingService(links)


OnboardingServiceDep = Annotated[OnboardingService, Depends(get_onboarding_service)]
