"""
File: tests/unit/test_link_service.py
Description: 绑定领域服务 (持久化网关) 单元测试

覆盖：
1. 往返读写 (upsert_link -> find_by_wallet, upsert_trade_url -> get_trade_url)
2. 幂等性与一对一冲突
3. 条件更新与并发冲突重试
4. 输入校验先于 I/O，存储异常映射为 system.db_error

Created: 2026-03-02
"""

import pytest
from sqlalchemy.exc import OperationalError

from app.core.error_code import SystemErrorCode
from app.core.exceptions import AppException
from app.domains.links.constants import LINK_WRITE_ATTEMPTS, LinkError
from app.domains.links.service import LinkService

WALLET_1 = "0x52908400098527886E0F7030069857D2E4169EE7"
WALLET_2 = "0x8617E340B3D01FA5F11F306F4090FD50E238070D"
STEAM_ID = "76561197960287930"
OTHER_STEAM_ID = "76561198000000001"
TRADE_URL = "https://steamcommunity.com/tradeoffer/new/?partner=12345&token=AbCd_-1"


async def _link(service: LinkService, wallet: str, steam_id: str, name: str = "gaben"):
    return await service.upsert_link(
        wallet_address=wallet,
        steam_id=steam_id,
        steam_username=name,
        steam_avatar="https://avatars.example/full.jpg",
        steam_profile_url=f"https://steamcommunity.com/profiles/{steam_id}/",
    )


@pytest.mark.asyncio
async def test_upsert_link_round_trip(link_service: LinkService) -> None:
    await _link(link_service, WALLET_1, STEAM_ID)

    record = await link_service.find_by_wallet(WALLET_1)
    assert record is not None
    assert record.steam_id == STEAM_ID
    assert record.steam_username == "gaben"

    by_steam = await link_service.find_by_steam_id(STEAM_ID)
    assert by_steam is not None
    assert by_steam.id == record.id


@pytest.mark.asyncio
async def test_wallet_lookup_ignores_checksum_case(link_service: LinkService) -> None:
    await _link(link_service, WALLET_1, STEAM_ID)

    record = await link_service.find_by_wallet(WALLET_1.lower())
    assert record is not None
    assert record.wallet_address == WALLET_1.lower()


@pytest.mark.asyncio
async def test_upsert_link_is_idempotent(link_service: LinkService) -> None:
    await _link(link_service, WALLET_1, STEAM_ID)
    second = await _link(link_service, WALLET_1, STEAM_ID, name="gaben-renamed")

    assert second.steam_username == "gaben-renamed"
    assert await link_service.repo.count() == 1


@pytest.mark.asyncio
async def test_steam_id_linked_elsewhere_conflicts(link_service: LinkService) -> None:
    await _link(link_service, WALLET_1, STEAM_ID)

    with pytest.raises(AppException) as exc_info:
        await _link(link_service, WALLET_2, STEAM_ID, name="intruder")

    assert exc_info.value.error is LinkError.STEAM_LINKED
    assert exc_info.value.http_status == 409

    original = await link_service.find_by_wallet(WALLET_1)
    assert original is not None
    assert original.steam_id == STEAM_ID
    assert original.steam_username == "gaben"
    assert await link_service.find_by_wallet(WALLET_2) is None


@pytest.mark.asyncio
async def test_wallet_with_other_steam_id_conflicts(link_service: LinkService) -> None:
    await _link(link_service, WALLET_1, STEAM_ID)

    with pytest.raises(AppException) as exc_info:
        await _link(link_service, WALLET_1, OTHER_STEAM_ID)

    assert exc_info.value.error is LinkError.WALLET_LINKED
    record = await link_service.find_by_wallet(WALLET_1)
    assert record is not None
    assert record.steam_id == STEAM_ID


@pytest.mark.asyncio
async def test_trade_url_round_trip_creates_bare_record(
    link_service: LinkService,
) -> None:
    await link_service.upsert_trade_url(WALLET_1, TRADE_URL)

    assert await link_service.get_trade_url(WALLET_1) == TRADE_URL
    record = await link_service.find_by_wallet(WALLET_1)
    assert record is not None
    assert record.steam_id is None
    assert await link_service.get_link_status(WALLET_1) is None


@pytest.mark.asyncio
async def test_link_keeps_trade_url_and_trade_url_keeps_link(
    link_service: LinkService,
) -> None:
    await link_service.upsert_trade_url(WALLET_1, TRADE_URL)
    await _link(link_service, WALLET_1, STEAM_ID)

    record = await link_service.find_by_wallet(WALLET_1)
    assert record is not None
    assert record.trade_url == TRADE_URL
    assert record.steam_id == STEAM_ID

    new_url = "https://steamcommunity.com/tradeoffer/new/?partner=999&token=zz"
    updated = await link_service.upsert_trade_url(WALLET_1, new_url)
    assert updated.trade_url == new_url
    assert updated.steam_id == STEAM_ID
    assert await link_service.repo.count() == 1


@pytest.mark.asyncio
async def test_get_trade_url_unknown_wallet(link_service: LinkService) -> None:
    with pytest.raises(AppException) as exc_info:
        await link_service.get_trade_url(WALLET_1)

    assert exc_info.value.error is LinkError.LINK_NOT_FOUND
    assert exc_info.value.http_status == 404


@pytest.mark.asyncio
async def test_get_trade_url_linked_without_url(link_service: LinkService) -> None:
    await _link(link_service, WALLET_1, STEAM_ID)
    assert await link_service.get_trade_url(WALLET_1) is None


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("wallet", "steam_id", "expected"),
    [
        ("", STEAM_ID, LinkError.MISSING_WALLET),
        ("0x123", STEAM_ID, LinkError.INVALID_WALLET),
        (WALLET_1, "123", LinkError.INVALID_STEAM_ID),
    ],
)
async def test_upsert_link_validates_before_io(
    link_service: LinkService,
    monkeypatch: pytest.MonkeyPatch,
    wallet: str,
    steam_id: str,
    expected: LinkError,
) -> None:
    async def fail(*args, **kwargs):
        raise AssertionError("storage must not be touched")

    monkeypatch.setattr(link_service.repo, "get_by_wallet", fail)
    monkeypatch.setattr(link_service.repo, "get_by_steam_id", fail)

    with pytest.raises(AppException) as exc_info:
        await _link(link_service, wallet, steam_id)

    assert exc_info.value.error is expected


@pytest.mark.asyncio
async def test_upsert_trade_url_rejects_bad_url(link_service: LinkService) -> None:
    with pytest.raises(AppException) as exc_info:
        await link_service.upsert_trade_url(WALLET_1, "https://example.com/trade")

    assert exc_info.value.error is LinkError.INVALID_TRADE_URL
    assert await link_service.repo.count() == 0


# ------------------------------------------------------------------------------
# 并发冲突
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_stale_read_is_caught_by_unique_constraint(
    link_service: LinkService, monkeypatch: pytest.MonkeyPatch
) -> None:
    """
    第一次读取看不到已存在的 steam_id 绑定 (模拟并发写入)，
    插入触发唯一约束后回滚并重新评估，最终返回冲突而非重复绑定。
    """
    await _link(link_service, WALLET_1, STEAM_ID)

    original_lookup = link_service.repo.get_by_steam_id
    calls = 0

    async def stale_lookup(steam_id: str):
        nonlocal calls
        calls += 1
        if calls == 1:
            return None
        return await original_lookup(steam_id)

    monkeypatch.setattr(link_service.repo, "get_by_steam_id", stale_lookup)

    with pytest.raises(AppException) as exc_info:
        await _link(link_service, WALLET_2, STEAM_ID)

    assert exc_info.value.error is LinkError.STEAM_LINKED
    assert calls == 2
    assert await link_service.repo.count() == 1


@pytest.mark.asyncio
async def test_conditional_update_miss_retries_then_reports_contention(
    link_service: LinkService, monkeypatch: pytest.MonkeyPatch
) -> None:
    await link_service.upsert_trade_url(WALLET_1, TRADE_URL)

    attempts = 0

    async def lost_race(*args, **kwargs) -> bool:
        nonlocal attempts
        attempts += 1
        return False

    monkeypatch.setattr(link_service.repo, "claim_steam_identity", lost_race)

    with pytest.raises(AppException) as exc_info:
        await _link(link_service, WALLET_1, STEAM_ID)

    assert exc_info.value.error is LinkError.LINK_CONTENDED
    assert attempts == LINK_WRITE_ATTEMPTS

    record = await link_service.find_by_wallet(WALLET_1)
    assert record is not None
    assert record.steam_id is None


@pytest.mark.asyncio
async def test_conditional_update_only_claims_unlinked_rows(
    link_service: LinkService,
) -> None:
    await _link(link_service, WALLET_1, STEAM_ID)
    wallet = WALLET_1.lower()

    assert (
        await link_service.repo.claim_steam_identity(wallet, OTHER_STEAM_ID, {})
        is False
    )
    assert await link_service.repo.claim_steam_identity(wallet, STEAM_ID, {}) is True


@pytest.mark.asyncio
async def test_storage_failure_maps_to_db_error(
    link_service: LinkService, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def broken(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr(link_service.repo, "get_by_wallet", broken)

    with pytest.raises(AppException) as exc_info:
        await link_service.find_by_wallet(WALLET_1)

    assert exc_info.value.error is SystemErrorCode.DB_ERROR
    assert exc_info.value.http_status == 500
