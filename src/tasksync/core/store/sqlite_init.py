"""SQLite 数据库初始化

PRAGMA 配置 + 事件表/三张投影表 DDL + 索引创建。
使用 aiosqlite 异步操作。

投影表不设外键：任务事件可能先于所属列表到达。
"""

import aiosqlite

# events 表 DDL（append-only）
_EVENTS_DDL = """
CREATE TABLE IF NOT EXISTS events (
    event_id            TEXT PRIMARY KEY,
    user_id             TEXT NOT NULL,
    device_id           TEXT NOT NULL,
    app_id              TEXT NOT NULL,
    timestamp           INTEGER NOT NULL,
    server_timestamp    INTEGER NOT NULL,
    event_type          TEXT NOT NULL,
    schema_version      INTEGER NOT NULL DEFAULT 1,
    payload             TEXT NOT NULL DEFAULT '{}',
    media_refs          TEXT,
    consent_snapshot_id TEXT NOT NULL DEFAULT ''
);
"""

_EVENTS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_events_user_ts ON events(user_id, timestamp);",
    "CREATE INDEX IF NOT EXISTS idx_events_user_type ON events(user_id, event_type);",
]

# task_lists 表 DDL
_TASK_LISTS_DDL = """
CREATE TABLE IF NOT EXISTS task_lists (
    id                   INTEGER PRIMARY KEY AUTOINCREMENT,
    list_id              TEXT NOT NULL UNIQUE,
    user_id              TEXT NOT NULL,
    name                 TEXT NOT NULL,
    color                TEXT NOT NULL,
    icon                 TEXT NOT NULL,
    sort_order           REAL NOT NULL DEFAULT 0,
    smart_list           INTEGER,
    smart_list_type      TEXT,
    task_count           INTEGER NOT NULL DEFAULT 0,
    completed_task_count INTEGER NOT NULL DEFAULT 0,
    created_at           INTEGER NOT NULL,
    updated_at           INTEGER NOT NULL,
    tombstoned           INTEGER NOT NULL DEFAULT 0,
    tombstoned_at        INTEGER,
    last_event_id        TEXT NOT NULL
);
"""

_TASK_LISTS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_task_lists_user_active ON task_lists(user_id, tombstoned);",
    "CREATE INDEX IF NOT EXISTS idx_task_lists_user_sort ON task_lists(user_id, sort_order);",
]

# tasks 表 DDL
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    id                  INTEGER PRIMARY KEY AUTOINCREMENT,
    task_id             TEXT NOT NULL UNIQUE,
    user_id             TEXT NOT NULL,
    list_id             TEXT NOT NULL,
    title               TEXT NOT NULL,
    notes               TEXT,
    due_date            TEXT,
    due_time            TEXT,
    priority            TEXT NOT NULL DEFAULT 'none',
    tags                TEXT NOT NULL DEFAULT '[]',
    flag                INTEGER NOT NULL DEFAULT 0,
    completed           INTEGER NOT NULL DEFAULT 0,
    completed_at        TEXT,
    red_beacon_enabled  INTEGER NOT NULL DEFAULT 0,
    mirror_to_calendar  INTEGER NOT NULL DEFAULT 0,
    calendar_event_id   TEXT,
    recurrence          TEXT,
    subtasks            TEXT NOT NULL DEFAULT '[]',
    attachments         TEXT NOT NULL DEFAULT '[]',
    location            TEXT,
    url                 TEXT,
    sort_order          REAL NOT NULL DEFAULT 0,
    created_at          INTEGER NOT NULL,
    updated_at          INTEGER NOT NULL,
    tombstoned          INTEGER NOT NULL DEFAULT 0,
    tombstoned_at       INTEGER,
    last_event_id       TEXT NOT NULL
);
"""

_TASKS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_list ON tasks(list_id);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_user_list ON tasks(user_id, list_id);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_user_active ON tasks(user_id, tombstoned);",
    # 标题搜索的过滤字段
    (
        "CREATE INDEX IF NOT EXISTS idx_tasks_search "
        "ON tasks(user_id, list_id, completed, tombstoned);"
    ),
]

# tags 表 DDL
_TAGS_DDL = """
CREATE TABLE IF NOT EXISTS tags (
    id            INTEGER PRIMARY KEY AUTOINCREMENT,
    tag_id        TEXT NOT NULL UNIQUE,
    user_id       TEXT NOT NULL,
    name          TEXT NOT NULL,
    color         TEXT NOT NULL,
    created_at    INTEGER NOT NULL,
    updated_at    INTEGER NOT NULL,
    tombstoned    INTEGER NOT NULL DEFAULT 0,
    tombstoned_at INTEGER,
    last_event_id TEXT NOT NULL
);
"""

_TAGS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tags_user_active ON tags(user_id, tombstoned);",
    "CREATE INDEX IF NOT EXISTS idx_tags_user_name ON tags(user_id, name);",
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    # 所有 Store 按列名读取行
    conn.row_factory = aiosqlite.Row

    # 设置 PRAGMA
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    # 创建表
    await conn.execute(_EVENTS_DDL)
    await conn.execute(_TASK_LISTS_DDL)
    await conn.execute(_TASKS_DDL)
    await conn.execute(_TAGS_DDL)

    # 创建索引
    for idx_sql in _EVENTS_INDEXES + _TASK_LISTS_INDEXES + _TASKS_INDEXES + _TAGS_INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def init_read_conn(conn: aiosqlite.Connection) -> None:
    """初始化查询层使用的只读连接

    表结构由写连接的 init_db 创建；此连接拒绝任何写入。
    """
    conn.row_factory = aiosqlite.Row
    await conn.execute("PRAGMA busy_timeout = 5000;")
    await conn.execute("PRAGMA query_only = ON;")


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
