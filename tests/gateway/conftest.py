"""gateway 测试配置 -- create_app + 手动初始化 app.state（ASGITransport 不触发 lifespan）"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from tasksync.core.store import create_store_group


@pytest_asyncio.fixture
async def test_app(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """创建测试用 FastAPI app，手动初始化 lifespan 状态"""
    monkeypatch.setenv("TASKSYNC_DB_PATH", str(tmp_path / "gateway.db"))
    monkeypatch.setenv("LOGFIRE_SEND_TO_LOGFIRE", "false")

    from tasksync.gateway.main import create_app, init_app_state

    app = create_app()
    store_group = await create_store_group(str(tmp_path / "gateway.db"))
    init_app_state(app, store_group)

    yield app

    await app.state.projection_scheduler.drain()
    await store_group.close()


@pytest_asyncio.fixture
async def client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient"""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def sync_events(client: AsyncClient, test_app: FastAPI):
    """提交事件并等待后台投影完成"""

    async def _sync(events: list[dict], headers: dict | None = None) -> dict:
        resp = await client.post(
            "/api/events/batch",
            json={"events": events, "consentSnapshotId": "consent-1"},
            headers=headers or {"X-User-Id": "user-1", "X-Device-Id": "device-1"},
        )
        assert resp.status_code == 200
        await test_app.state.projection_scheduler.drain()
        return resp.json()

    return _sync
