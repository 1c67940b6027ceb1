"""TaskStore SQLite 实现 -- 对齐 tasks 表结构

tasks 表是 events 的物化视图（projection）。
所有状态更新必须通过事件投影触发，此处仅提供数据库操作。
"""

import aiosqlite

from ..models.task import Task
from ._rows import model_to_params, row_to_dict, upsert_sql

_COLUMNS: tuple[str, ...] = (
    "task_id",
    "user_id",
    "list_id",
    "title",
    "notes",
    "due_date",
    "due_time",
    "priority",
    "tags",
    "flag",
    "completed",
    "completed_at",
    "red_beacon_enabled",
    "mirror_to_calendar",
    "calendar_event_id",
    "recurrence",
    "subtasks",
    "attachments",
    "location",
    "url",
    "sort_order",
    "created_at",
    "updated_at",
    "tombstoned",
    "tombstoned_at",
    "last_event_id",
)
_JSON_COLUMNS = frozenset({"tags", "recurrence", "subtasks", "attachments", "location"})

_UPSERT_SQL = upsert_sql("tasks", "task_id", _COLUMNS)


def _escape_like(term: str) -> str:
    """转义 LIKE 通配符"""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def save_task(self, task: Task) -> None:
        """写入任务投影（按 task_id 插入或覆盖）"""
        await self._conn.execute(
            _UPSERT_SQL,
            model_to_params(task, _COLUMNS, _JSON_COLUMNS),
        )

    async def get_task(self, task_id: str) -> Task | None:
        """根据 task_id 查询任务（包含已墓碑化的行）"""
        cursor = await self._conn.execute(
            "SELECT * FROM tasks WHERE task_id = ?",
            (task_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def list_live_in_list(self, list_id: str, user_id: str) -> list[Task]:
        """查询该用户指向此列表的所有未删除任务（用于级联墓碑）"""
        cursor = await self._conn.execute(
            "SELECT * FROM tasks WHERE list_id = ? AND user_id = ? AND tombstoned = 0",
            (list_id, user_id),
        )
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def count_live_in_list(self, list_id: str, user_id: str) -> tuple[int, int]:
        """统计该用户在列表中的未删除任务数与其中已完成任务数

        其他用户指向同一 list_id 的任务不计入。

        Returns:
            (task_count, completed_task_count)
        """
        cursor = await self._conn.execute(
            """
            SELECT COUNT(*), COALESCE(SUM(completed), 0)
            FROM tasks
            WHERE list_id = ? AND user_id = ? AND tombstoned = 0
            """,
            (list_id, user_id),
        )
        row = await cursor.fetchone()
        return (row[0], row[1]) if row else (0, 0)

    async def list_active_for_user(self, user_id: str) -> list[Task]:
        """查询用户所有未删除任务，按 created_at 正序"""
        cursor = await self._conn.execute(
            """
            SELECT * FROM tasks
            WHERE user_id = ? AND tombstoned = 0
            ORDER BY created_at ASC, task_id ASC
            """,
            (user_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def list_active_in_list(
        self,
        user_id: str,
        list_id: str,
        include_completed: bool = True,
    ) -> list[Task]:
        """查询用户某列表中的未删除任务，按 sort_order、created_at 排序"""
        sql = """
            SELECT * FROM tasks
            WHERE user_id = ? AND list_id = ? AND tombstoned = 0
        """
        if not include_completed:
            sql += " AND completed = 0"
        sql += " ORDER BY sort_order ASC, created_at ASC, task_id ASC"
        cursor = await self._conn.execute(sql, (user_id, list_id))
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def search_titles(
        self,
        user_id: str,
        terms: list[str],
        list_id: str | None = None,
        include_completed: bool = True,
        limit: int = 50,
    ) -> list[Task]:
        """标题全文搜索：所有词项均需出现在标题中（LIKE 对 ASCII 大小写不敏感）

        结果按 updated_at 倒序。
        """
        clauses = ["user_id = ?", "tombstoned = 0"]
        params: list = [user_id]
        if list_id is not None:
            clauses.append("list_id = ?")
            params.append(list_id)
        if not include_completed:
            clauses.append("completed = 0")
        for term in terms:
            clauses.append("title LIKE ? ESCAPE '\\'")
            params.append(f"%{_escape_like(term)}%")
        params.append(limit)

        cursor = await self._conn.execute(
            f"""
            SELECT * FROM tasks
            WHERE {' AND '.join(clauses)}
            ORDER BY updated_at DESC, task_id ASC
            LIMIT ?
            """,
            tuple(params),
        )
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def delete_for_user(self, user_id: str) -> None:
        """清空用户的任务投影（仅用于全量重建）"""
        await self._conn.execute("DELETE FROM tasks WHERE user_id = ?", (user_id,))

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        """将数据库行转换为 Task 模型"""
        return Task.model_validate(row_to_dict(row, _JSON_COLUMNS))
