"""TagStore SQLite 实现 -- tags 表是 events 的物化视图"""

import aiosqlite

from ..models.tag import Tag
from ._rows import model_to_params, row_to_dict, upsert_sql

_COLUMNS: tuple[str, ...] = (
    "tag_id",
    "user_id",
    "name",
    "color",
    "created_at",
    "updated_at",
    "tombstoned",
    "tombstoned_at",
    "last_event_id",
)

_UPSERT_SQL = upsert_sql("tags", "tag_id", _COLUMNS)


class SqliteTagStore:
    """TagStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def save_tag(self, tag: Tag) -> None:
        """写入标签投影（按 tag_id 插入或覆盖）"""
        await self._conn.execute(_UPSERT_SQL, model_to_params(tag, _COLUMNS))

    async def get_tag(self, tag_id: str) -> Tag | None:
        """根据 tag_id 查询标签（包含已墓碑化的行）"""
        cursor = await self._conn.execute(
            "SELECT * FROM tags WHERE tag_id = ?",
            (tag_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_tag(row)

    async def list_active_for_user(self, user_id: str) -> list[Tag]:
        """查询用户未删除的标签，按名称排序"""
        cursor = await self._conn.execute(
            """
            SELECT * FROM tags
            WHERE user_id = ? AND tombstoned = 0
            ORDER BY name COLLATE NOCASE ASC, tag_id ASC
            """,
            (user_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_tag(row) for row in rows]

    async def delete_for_user(self, user_id: str) -> None:
        """清空用户的标签投影（仅用于全量重建）"""
        await self._conn.execute("DELETE FROM tags WHERE user_id = ?", (user_id,))

    @staticmethod
    def _row_to_tag(row: aiosqlite.Row) -> Tag:
        """将数据库行转换为 Tag 模型"""
        return Tag.model_validate(row_to_dict(row))
