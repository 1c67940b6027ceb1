"""TaskSync Core Store -- SQLite 持久化实现

提供工厂函数创建 Store 实例组：一个写连接供事件日志与投影器使用，
一个只读连接供查询层使用。WAL 模式下只读连接只能看到已提交的数据。
"""

import asyncio
from pathlib import Path

import aiosqlite

from .event_store import SqliteEventStore
from .list_store import SqliteListStore
from .sqlite_init import init_db, init_read_conn
from .tag_store import SqliteTagStore
from .task_store import SqliteTaskStore
from .transaction import atomic


class StoreGroup:
    """Store 实例组 -- 写入方共享同一个数据库连接

    共享连接上的写事务必须持有 write_lock，避免不同调用方的事务交错提交。
    read_conn 未提供时退化为写连接（仅用于单连接场景）。
    """

    def __init__(
        self,
        conn: aiosqlite.Connection,
        read_conn: aiosqlite.Connection | None = None,
    ) -> None:
        self.conn = conn
        self.read_conn = read_conn or conn
        self.write_lock = asyncio.Lock()
        self.event_store = SqliteEventStore(conn)
        self.list_store = SqliteListStore(conn)
        self.task_store = SqliteTaskStore(conn)
        self.tag_store = SqliteTagStore(conn)

    async def close(self) -> None:
        """关闭只读连接与写连接"""
        if self.read_conn is not self.conn:
            await self.read_conn.close()
        await self.conn.close()


async def create_store_group(db_path: str) -> StoreGroup:
    """创建 Store 实例组

    Args:
        db_path: SQLite 数据库文件路径

    Returns:
        StoreGroup 实例
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    await init_db(conn)

    read_conn = await aiosqlite.connect(db_path)
    await init_read_conn(read_conn)

    return StoreGroup(conn=conn, read_conn=read_conn)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "SqliteEventStore",
    "SqliteListStore",
    "SqliteTaskStore",
    "SqliteTagStore",
    "init_db",
    "init_read_conn",
    "atomic",
]
