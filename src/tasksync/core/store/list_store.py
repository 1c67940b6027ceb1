"""ListStore SQLite 实现

task_lists 表是 events 的物化视图（projection）。
所有状态更新必须通过事件投影触发，此处仅提供数据库操作。
"""

import aiosqlite

from ..models.task_list import TaskList
from ._rows import model_to_params, row_to_dict, upsert_sql

_COLUMNS: tuple[str, ...] = (
    "list_id",
    "user_id",
    "name",
    "color",
    "icon",
    "sort_order",
    "smart_list",
    "smart_list_type",
    "task_count",
    "completed_task_count",
    "created_at",
    "updated_at",
    "tombstoned",
    "tombstoned_at",
    "last_event_id",
)

_UPSERT_SQL = upsert_sql("task_lists", "list_id", _COLUMNS)


class SqliteListStore:
    """ListStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def save_list(self, task_list: TaskList) -> None:
        """写入列表投影（按 list_id 插入或覆盖）"""
        await self._conn.execute(_UPSERT_SQL, model_to_params(task_list, _COLUMNS))

    async def get_list(self, list_id: str) -> TaskList | None:
        """根据 list_id 查询列表（包含已墓碑化的行）"""
        cursor = await self._conn.execute(
            "SELECT * FROM task_lists WHERE list_id = ?",
            (list_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_list(row)

    async def list_active_for_user(self, user_id: str) -> list[TaskList]:
        """查询用户未删除的列表，按 sort_order 正序"""
        cursor = await self._conn.execute(
            """
            SELECT * FROM task_lists
            WHERE user_id = ? AND tombstoned = 0
            ORDER BY sort_order ASC, created_at ASC
            """,
            (user_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_list(row) for row in rows]

    async def list_ids_for_user(self, user_id: str) -> list[str]:
        """查询用户所有列表 ID（包含已墓碑化的行）"""
        cursor = await self._conn.execute(
            "SELECT list_id FROM task_lists WHERE user_id = ?",
            (user_id,),
        )
        rows = await cursor.fetchall()
        return [row[0] for row in rows]

    async def update_counts(
        self,
        list_id: str,
        task_count: int,
        completed_task_count: int,
    ) -> None:
        """更新反范式计数（仅由计数维护器调用）"""
        await self._conn.execute(
            """
            UPDATE task_lists
            SET task_count = ?, completed_task_count = ?
            WHERE list_id = ?
            """,
            (task_count, completed_task_count, list_id),
        )

    async def delete_for_user(self, user_id: str) -> None:
        """清空用户的列表投影（仅用于全量重建）"""
        await self._conn.execute("DELETE FROM task_lists WHERE user_id = ?", (user_id,))

    @staticmethod
    def _row_to_list(row: aiosqlite.Row) -> TaskList:
        """将数据库行转换为 TaskList 模型"""
        return TaskList.model_validate(row_to_dict(row))
