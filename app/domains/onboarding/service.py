"""
File: app/domains/onboarding/service.py
Description: 引导流程服务 (基于持久化记录评估状态机)
Created: 2026-03-02
"""

from app.domains.links.service import LinkService
from app.domains.onboarding.schemas import OnboardingState
from app.domains.onboarding.state import Loaded, derive_step
from app.utils.validation import is_valid_wallet_address


class OnboardingService:
    def __init__(self, links: LinkService):
        self.links = links

    async def evaluate(self, wallet_address: str | None) -> OnboardingState:
        """
        钱包参数缺失或格式错误视为"未连接钱包"，不访问数据库。
        """
        connected = is_valid_wallet_address(wallet_address)
        record = await self.links.find_by_wallet(wallet_address) if connected else None

        return OnboardingState(
            step=derive_step(Loaded(connected), Loaded(record)),
            is_wallet_connected=connected,
            is_steam_linked=bool(record and record.steam_id),
            has_trade_url=bool(record and record.trade_url),
        )
