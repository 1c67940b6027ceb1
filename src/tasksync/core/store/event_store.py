"""EventStore SQLite 实现

事件表 append-only：只允许插入，不允许更新或删除。
event_id 是唯一约束，也是入口去重的依据。
"""

import aiosqlite

from ..models.event import Event
from ._rows import model_to_params, row_to_dict

_COLUMNS: tuple[str, ...] = (
    "event_id",
    "user_id",
    "device_id",
    "app_id",
    "timestamp",
    "server_timestamp",
    "event_type",
    "schema_version",
    "payload",
    "media_refs",
    "consent_snapshot_id",
)
_JSON_COLUMNS = frozenset({"payload", "media_refs"})


class SqliteEventStore:
    """EventStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def append_event(self, event: Event) -> None:
        """追加事件（append-only）

        注意：此方法不自动提交事务，需由调用方管理事务。
        """
        await self._conn.execute(
            f"INSERT INTO events ({', '.join(_COLUMNS)}) "
            f"VALUES ({', '.join('?' for _ in _COLUMNS)})",
            model_to_params(event, _COLUMNS, _JSON_COLUMNS),
        )

    async def event_exists(self, event_id: str) -> bool:
        """检查 event_id 是否已写入"""
        cursor = await self._conn.execute(
            "SELECT 1 FROM events WHERE event_id = ? LIMIT 1",
            (event_id,),
        )
        return await cursor.fetchone() is not None

    async def get_event(self, event_id: str) -> Event | None:
        """根据 event_id 查询事件"""
        cursor = await self._conn.execute(
            "SELECT * FROM events WHERE event_id = ?",
            (event_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_event(row)

    async def get_events_for_user(
        self,
        user_id: str,
        from_timestamp: int = 0,
    ) -> list[Event]:
        """查询用户 timestamp >= from_timestamp 的所有事件（用于 Projection 重建）

        按客户端 timestamp 正序；同一时间戳按 event_id 排序，保证重放确定性。
        """
        cursor = await self._conn.execute(
            """
            SELECT * FROM events
            WHERE user_id = ? AND timestamp >= ?
            ORDER BY timestamp ASC, event_id ASC
            """,
            (user_id, from_timestamp),
        )
        rows = await cursor.fetchall()
        return [self._row_to_event(row) for row in rows]

    @staticmethod
    def _row_to_event(row: aiosqlite.Row) -> Event:
        """将数据库行转换为 Event 模型"""
        return Event.model_validate(row_to_dict(row, _JSON_COLUMNS))
