"""
File: tests/unit/test_identity_client.py
Description: Steam OpenID 客户端单元测试 (MockTransport)
Created: 2026-03-02
"""

from collections.abc import Callable
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from app.core.exceptions import AppException
from app.domains.identity.client import SteamOpenIDClient
from app.domains.identity.constants import IdentityError

WALLET = "0x52908400098527886E0F7030069857D2E4169EE7"
OTHER_WALLET = "0x8617E340B3D01FA5F11F306F4090FD50E238070D"
STEAM_ID = "76561197960287930"
OPENID_URL = "https://steamcommunity.com/openid/login"
CALLBACK_URL = "https://api.example.test/api/v1/identity/callback"


def _client(
    handler: Callable[[httpx.Request], httpx.Response], api_key: str | None = "key"
) -> SteamOpenIDClient:
    return SteamOpenIDClient(
        http=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        openid_url=OPENID_URL,
        web_api_url="https://api.steampowered.com",
        api_key=api_key,
        callback_url=CALLBACK_URL,
    )


def _assertion(**overrides: str) -> dict[str, str]:
    params = {
        "wallet": WALLET,
        "openid.ns": "http://specs.openid.net/auth/2.0",
        "openid.mode": "id_res",
        "openid.op_endpoint": OPENID_URL,
        "openid.claimed_id": f"https://steamcommunity.com/openid/id/{STEAM_ID}",
        "openid.identity": f"https://steamcommunity.com/openid/id/{STEAM_ID}",
        "openid.return_to": f"{CALLBACK_URL}?wallet={WALLET}",
        "openid.response_nonce": "2026-03-02T10:00:00Zabc123",
        "openid.assoc_handle": "1234567890",
        "openid.signed": "signed,op_endpoint,claimed_id,identity,return_to,response_nonce,assoc_handle",
        "openid.sig": "c2lnbmF0dXJl",
    }
    params.update(overrides)
    return params


def _valid(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, text="ns:http://specs.openid.net/auth/2.0\nis_valid:true\n")


# ------------------------------------------------------------------------------
# initiate
# ------------------------------------------------------------------------------


def test_initiate_builds_checkid_setup_url() -> None:
    url = _client(_valid).initiate(WALLET)

    parts = urlsplit(url)
    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == OPENID_URL

    query = {k: v[0] for k, v in parse_qs(parts.query).items()}
    assert query["openid.ns"] == "http://specs.openid.net/auth/2.0"
    assert query["openid.mode"] == "checkid_setup"
    assert query["openid.return_to"] == f"{CALLBACK_URL}?wallet={WALLET}"
    assert query["openid.realm"] == "https://api.example.test"
    assert (
        query["openid.identity"]
        == "http://specs.openid.net/auth/2.0/identifier_select"
    )
    assert query["openid.claimed_id"] == query["openid.identity"]


@pytest.mark.parametrize(
    ("wallet", "expected"),
    [(None, IdentityError.MISSING_WALLET), ("0xnope", IdentityError.INVALID_WALLET)],
)
def test_initiate_rejects_bad_wallet(wallet: str | None, expected: IdentityError) -> None:
    with pytest.raises(AppException) as exc_info:
        _client(_valid).initiate(wallet)

    assert exc_info.value.error is expected
    assert exc_info.value.http_status == 400


# ------------------------------------------------------------------------------
# verify_assertion
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_verify_assertion_posts_check_authentication() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _valid(request)

    assertion = await _client(handler).verify_assertion(_assertion())

    assert assertion.steam_id == STEAM_ID
    assert assertion.wallet_address == WALLET
    assert assertion.response_nonce == "2026-03-02T10:00:00Zabc123"

    request = seen[0]
    assert request.method == "POST"
    form = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
    assert form["openid.mode"] == "check_authentication"
    assert form["openid.sig"] == "c2lnbmF0dXJl"
    assert "wallet" not in form


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("overrides", "expected"),
    [
        ({"wallet": ""}, IdentityError.MISSING_WALLET),
        ({"wallet": "0x1"}, IdentityError.INVALID_WALLET),
        ({"openid.ns": "http://openid.net/signon/1.1"}, IdentityError.INVALID_RESPONSE),
        ({"openid.mode": "cancel"}, IdentityError.INVALID_MODE),
    ],
)
async def test_verify_assertion_rejects_malformed_callbacks(
    overrides: dict[str, str], expected: IdentityError
) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return _valid(request)

    with pytest.raises(AppException) as exc_info:
        await _client(handler).verify_assertion(_assertion(**overrides))

    assert exc_info.value.error is expected
    assert calls == []


@pytest.mark.asyncio
async def test_verify_assertion_without_is_valid_fails_authentication() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="ns:http://specs.openid.net/auth/2.0\nis_valid:false\n")

    with pytest.raises(AppException) as exc_info:
        await _client(handler).verify_assertion(_assertion())

    assert exc_info.value.error is IdentityError.AUTHENTICATION_FAILED


@pytest.mark.asyncio
async def test_verify_assertion_upstream_failures() -> None:
    with pytest.raises(AppException) as exc_info:
        await _client(lambda r: httpx.Response(503)).verify_assertion(_assertion())
    assert exc_info.value.error is IdentityError.VERIFICATION_FAILED

    def unreachable(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(AppException) as exc_info:
        await _client(unreachable).verify_assertion(_assertion())
    assert exc_info.value.error is IdentityError.VERIFICATION_FAILED


@pytest.mark.asyncio
async def test_verify_assertion_requires_numeric_claimed_id() -> None:
    params = _assertion(**{"openid.claimed_id": "https://steamcommunity.com/openid/id/"})

    with pytest.raises(AppException) as exc_info:
        await _client(_valid).verify_assertion(params)

    assert exc_info.value.error is IdentityError.MISSING_STEAM_ID


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"openid.return_to": f"{CALLBACK_URL}?wallet={OTHER_WALLET}"},
        {"openid.return_to": f"https://evil.example.test/api/v1/identity/callback?wallet={WALLET}"},
        {"openid.return_to": f"https://api.example.test/other?wallet={WALLET}"},
        {"openid.return_to": f"{CALLBACK_URL}?wallet={WALLET}&wallet={OTHER_WALLET}"},
        {"openid.return_to": CALLBACK_URL},
        {"openid.signed": "signed,op_endpoint,claimed_id,identity,response_nonce,assoc_handle"},
    ],
)
async def test_verify_assertion_binds_wallet_to_signed_return_to(
    overrides: dict[str, str],
) -> None:
    with pytest.raises(AppException) as exc_info:
        await _client(_valid).verify_assertion(_assertion(**overrides))

    assert exc_info.value.error is IdentityError.INVALID_RESPONSE
    assert exc_info.value.http_status == 400


@pytest.mark.asyncio
async def test_verify_assertion_accepts_lowercase_wallet_in_return_to() -> None:
    params = _assertion(**{"openid.return_to": f"{CALLBACK_URL}?wallet={WALLET.lower()}"})

    assertion = await _client(_valid).verify_assertion(params)

    assert assertion.wallet_address == WALLET


# ------------------------------------------------------------------------------
# fetch_player_summary
# ------------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_fetch_player_summary_prefers_full_avatar() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "response": {
                    "players": [
                        {
                            "personaname": "gaben",
                            "profileurl": "https://steamcommunity.com/id/gaben/",
                            "avatar": "small.jpg",
                            "avatarmedium": "medium.jpg",
                        }
                    ]
                }
            },
        )

    profile = await _client(handler).fetch_player_summary(STEAM_ID)

    assert profile.username == "gaben"
    assert profile.avatar == "medium.jpg"
    assert profile.profile_url == "https://steamcommunity.com/id/gaben/"
    assert seen[0].url.path == "/ISteamUser/GetPlayerSummaries/v0002/"
    assert seen[0].url.params["steamids"] == STEAM_ID
    assert seen[0].url.params["key"] == "key"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("response", "expected"),
    [
        (httpx.Response(500), IdentityError.STEAM_API_ERROR),
        (httpx.Response(200, json={"response": {"players": []}}), IdentityError.STEAM_DATA_ERROR),
        (httpx.Response(200, text="not json"), IdentityError.STEAM_PROFILE_ERROR),
        (httpx.Response(200, json={"unexpected": True}), IdentityError.STEAM_PROFILE_ERROR),
    ],
)
async def test_fetch_player_summary_errors(
    response: httpx.Response, expected: IdentityError
) -> None:
    with pytest.raises(AppException) as exc_info:
        await _client(lambda r: response).fetch_player_summary(STEAM_ID)

    assert exc_info.value.error is expected


@pytest.mark.asyncio
async def test_fetch_player_summary_requires_api_key() -> None:
    with pytest.raises(AppException) as exc_info:
        await _client(_valid, api_key=None).fetch_player_summary(STEAM_ID)

    assert exc_info.value.error is IdentityError.STEAM_API_ERROR
