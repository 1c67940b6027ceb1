"""单事件原子事务封装

每个事件的投影（读取当前行 -> 判定应用/跳过 -> 写入，以及计数维护）
在同一 SQLite 事务内提交；任何异常都会回滚整笔事务。
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite


@asynccontextmanager
async def atomic(conn: aiosqlite.Connection) -> AsyncIterator[aiosqlite.Connection]:
    """在同一事务内执行一组写操作

    Args:
        conn: 数据库连接（需在同一连接上操作以保证事务性）

    Raises:
        Exception: 事务体抛出的异常，回滚后原样抛出
    """
    try:
        yield conn
        await conn.commit()
    except Exception:
        await conn.rollback()
        raise
