"""全局 pytest 配置 -- 临时 SQLite 数据库 + 事件构造/投影 fixture"""

import itertools
import logging
from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from typing import Any

import aiosqlite
import pytest
import pytest_asyncio
import structlog
from tasksync.core.models.event import Event
from tasksync.core.projection import ProjectionEngine
from tasksync.core.store import StoreGroup, create_store_group

DEFAULT_USER = "user-1"


@pytest.fixture
def restore_logging():
    """还原 setup_logging 改动的根 logger 与 structlog 配置"""
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    quiet_level = logging.getLogger("aiosqlite").level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    logging.getLogger("aiosqlite").setLevel(quiet_level)
    structlog.reset_defaults()


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "sqlite" / "test.db"


@pytest_asyncio.fixture
async def db_conn(tmp_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """提供已初始化的临时 SQLite 数据库连接"""
    from tasksync.core.store.sqlite_init import init_db

    conn = await aiosqlite.connect(str(tmp_path / "conn.db"))
    await init_db(conn)
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def store_group(tmp_db_path: Path) -> AsyncGenerator[StoreGroup, None]:
    """创建测试用 StoreGroup"""
    sg = await create_store_group(str(tmp_db_path))
    yield sg
    await sg.close()


@pytest_asyncio.fixture
async def engine(store_group: StoreGroup) -> ProjectionEngine:
    return ProjectionEngine(store_group)


@pytest.fixture
def make_event() -> Callable[..., Event]:
    """构造事件（event_id 未指定时自动递增）"""
    seq = itertools.count(1)

    def _make(
        event_type: str,
        payload: dict[str, Any],
        timestamp: int,
        event_id: str | None = None,
        user_id: str = DEFAULT_USER,
    ) -> Event:
        return Event(
            event_id=event_id or f"evt-{next(seq):04d}",
            user_id=user_id,
            device_id="device-1",
            app_id="com.orion.tasks",
            timestamp=timestamp,
            server_timestamp=1_700_000_000_000,
            event_type=event_type,
            payload=payload,
            consent_snapshot_id="consent-1",
        )

    return _make


@pytest_asyncio.fixture
async def append(
    store_group: StoreGroup,
    make_event: Callable[..., Event],
) -> Callable[..., Awaitable[Event]]:
    """仅写入事件日志（不投影）"""

    async def _append(
        event_type: str,
        payload: dict[str, Any],
        timestamp: int,
        event_id: str | None = None,
        user_id: str = DEFAULT_USER,
    ) -> Event:
        event = make_event(event_type, payload, timestamp, event_id, user_id)
        await store_group.event_store.append_event(event)
        await store_group.conn.commit()
        return event

    return _append


@pytest_asyncio.fixture
async def emit(
    engine: ProjectionEngine,
    append: Callable[..., Awaitable[Event]],
) -> Callable[..., Awaitable[Event]]:
    """写入事件日志并立即投影"""

    async def _emit(
        event_type: str,
        payload: dict[str, Any],
        timestamp: int,
        event_id: str | None = None,
        user_id: str = DEFAULT_USER,
    ) -> Event:
        event = await append(event_type, payload, timestamp, event_id, user_id)
        await engine.process_event(event.event_id)
        return event

    return _emit
