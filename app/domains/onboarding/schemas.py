"""
File: app/domains/onboarding/schemas.py
Description: 引导流程响应模型
Created: 2026-03-02
"""

from pydantic import BaseModel

from app.domains.onboarding.state import OnboardingStep


class OnboardingState(BaseModel):
    """GET /onboarding/state 响应数据"""

    step: OnboardingStep
    is_wallet_connected: bool
    is_steam_linked: bool
    has_trade_url: bool
