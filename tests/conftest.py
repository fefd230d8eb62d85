"""
File: tests/conftest.py
Description: Pytest 全局 Fixtures 配置 (Async + 内存测试库 + Steam 桩)

说明：
1. 数据库：每个测试独立的 sqlite+aiosqlite 内存库 (StaticPool 共享单连接)
2. Redis：替换为内存实现 (仅实现 SET NX EX)
3. Steam：httpx.MockTransport 按 host/path 返回预设响应
4. 依赖 pyproject.toml 中的 asyncio_default_fixture_loop_scope = "function"

Created: 2025-11-26
Updated: 2026-03-02 (内存 SQLite + Steam MockTransport)
"""

import asyncio
import os
import sys
from collections.abc import AsyncGenerator
from typing import Any

# ------------------------------------------------------------------------------
# Windows 平台特定修复 (必须在任何 async 操作之前)
# ------------------------------------------------------------------------------
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# ------------------------------------------------------------------------------
# 1. 环境配置覆写 (必须在导入 app 之前)
# ------------------------------------------------------------------------------
os.environ["ENVIRONMENT"] = "local"
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite+aiosqlite://"
os.environ["STEAM_API_KEY"] = "test-steam-api-key"
os.environ["SITE_URL"] = "http://api.example.test"
os.environ["FRONTEND_URL"] = "http://app.example.test"

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.api.deps import get_db  # noqa: E402
from app.core.http import get_http_client  # noqa: E402
from app.core.redis import get_redis  # noqa: E402
from app.db.models import Base, SteamLink  # noqa: E402
from app.domains.links.repository import SteamLinkRepository  # noqa: E402
from app.domains.links.service import LinkService  # noqa: E402
from app.main import app  # noqa: E402

STEAM_ID = "76561197960287930"
OTHER_STEAM_ID = "76561198000000001"


# ------------------------------------------------------------------------------
# 2. 测试替身 (Fakes)
# ------------------------------------------------------------------------------


class FakeRedis:
    """仅实现 nonce 防重放所需的 SET NX EX"""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}

    async def set(
        self, key: str, value: str, ex: int | None = None, nx: bool = False
    ) -> bool | None:
        if nx and key in self.store:
            return None
        self.store[key] = value
        self.ttls[key] = ex
        return True


class SteamStub:
    """
    Steam 上游桩。

    测试通过修改属性控制返回值：
    - openid_body / openid_status: check_authentication 响应
    - players / summary_status: GetPlayerSummaries 响应
    - inventory_payload / inventory_status: 库存接口响应
    - network_error: 为 True 时所有请求抛出 ConnectError
    """

    def __init__(self) -> None:
        self.openid_status = 200
        self.openid_body = "ns:http://specs.openid.net/auth/2.0\nis_valid:true\n"
        self.summary_status = 200
        self.players: list[dict[str, Any]] = [
            {
                "steamid": STEAM_ID,
                "personaname": "gaben",
                "profileurl": f"https://steamcommunity.com/profiles/{STEAM_ID}/",
                "avatar": "https://avatars.example/small.jpg",
                "avatarmedium": "https://avatars.example/medium.jpg",
                "avatarfull": "https://avatars.example/full.jpg",
            }
        ]
        self.inventory_status = 200
        self.inventory_payload: dict[str, Any] = {
            "success": 1,
            "total_inventory_count": 0,
            "assets": [],
            "descriptions": [],
        }
        self.network_error = False
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.network_error:
            raise httpx.ConnectError("connection refused", request=request)

        path = request.url.path
        if path == "/openid/login":
            return httpx.Response(self.openid_status, text=self.openid_body)
        if path.startswith("/ISteamUser/GetPlayerSummaries"):
            return httpx.Response(
                self.summary_status, json={"response": {"players": self.players}}
            )
        if path.startswith("/inventory/"):
            return httpx.Response(self.inventory_status, json=self.inventory_payload)
        return httpx.Response(404, text="not found")


# ------------------------------------------------------------------------------
# 3. 全局 Fixtures
# ------------------------------------------------------------------------------


@pytest_asyncio.fixture(scope="function")
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    创建测试专用的内存数据库引擎。
    StaticPool 保证同一测试内所有会话共享同一个内存库。
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """
    获取测试用的数据库会话 (Function 级别)。
    """
    async_session_factory = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_factory() as session:
        yield session


@pytest.fixture
def link_service(db_session: AsyncSession) -> LinkService:
    return LinkService(SteamLinkRepository(SteamLink, db_session))


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def steam() -> SteamStub:
    return SteamStub()


@pytest_asyncio.fixture(scope="function")
async def steam_http(steam: SteamStub) -> AsyncGenerator[httpx.AsyncClient, None]:
    """指向 SteamStub 的出站 HTTP 客户端"""
    async with httpx.AsyncClient(transport=httpx.MockTransport(steam.handler)) as http:
        yield http


@pytest_asyncio.fixture(scope="function")
async def client(
    db_session: AsyncSession,
    fake_redis: FakeRedis,
    steam_http: httpx.AsyncClient,
) -> AsyncGenerator[AsyncClient, None]:
    """
    获取异步 HTTP 客户端 (DB / Redis / 出站 HTTP 全部替换为测试实现)。
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    async def override_get_redis() -> AsyncGenerator[FakeRedis, None]:
        yield fake_redis

    async def override_get_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
        yield steam_http

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis
    app.dependency_overrides[get_http_client] = override_get_http_client

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"  # type: ignore
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
