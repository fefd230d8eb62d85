"""
File: app/domains/onboarding/state.py
Description: 引导流程状态机 (纯函数)

步骤顺序: connect_wallet -> link_steam -> set_trade_url -> complete

每个异步输入使用三态表示：
- UNKNOWN: 数据尚未加载
- Loaded(value): 已加载 (value 可以为 None，表示"已加载但为空")

任一输入仍为 UNKNOWN 时停留在 connect_wallet，避免初次加载时误判步骤。

Created: 2026-03-02
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Protocol, TypeVar

T = TypeVar("T")


class OnboardingStep(str, Enum):
    CONNECT_WALLET = "connect_wallet"
    LINK_STEAM = "link_steam"
    SET_TRADE_URL = "set_trade_url"
    COMPLETE = "complete"


STEP_ORDER: tuple[OnboardingStep, ...] = tuple(OnboardingStep)


class Unknown(Enum):
    """数据尚未加载的哨兵值"""

    UNKNOWN = "unknown"


UNKNOWN = Unknown.UNKNOWN


@dataclass(frozen=True)
class Loaded(Generic[T]):
    value: T


class LinkRecord(Protocol):
    steam_id: str | None
    trade_url: str | None


def derive_step(
    wallet_connected: Loaded[bool] | Unknown,
    link: Loaded[LinkRecord | None] | Unknown,
) -> OnboardingStep:
    """根据钱包连接状态与绑定记录推导当前步骤"""
    if wallet_connected is UNKNOWN or link is UNKNOWN:
        return OnboardingStep.CONNECT_WALLET
    if not wallet_connected.value:
        return OnboardingStep.CONNECT_WALLET

    record = link.value
    if record is None or not record.steam_id:
        return OnboardingStep.LINK_STEAM
    if not record.trade_url:
        return OnboardingStep.SET_TRADE_URL
    return OnboardingStep.COMPLETE


def next_step(step: OnboardingStep) -> OnboardingStep:
    """前进一步，已是最后一步时保持不变"""
    index = STEP_ORDER.index(step)
    return STEP_ORDER[min(index + 1, len(STEP_ORDER) - 1)]


def previous_step(step: OnboardingStep) -> OnboardingStep:
    """后退一步，已是第一步时保持不变"""
    index = STEP_ORDER.index(step)
    return STEP_ORDER[max(index - 1, 0)]
