"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、日志选项、应用标识与查询分页上限等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("TASKSYNC_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "TASKSYNC_DB_PATH",
        str(_get_base_dir() / "sqlite" / "tasksync.db"),
    )


def get_log_format() -> str:
    """日志渲染模式：dev（默认）或 json"""
    return os.environ.get("TASKSYNC_LOG_FORMAT", "dev").lower()


def get_log_level() -> str:
    return os.environ.get("TASKSYNC_LOG_LEVEL", "INFO").upper()


def get_app_id() -> str:
    """写入事件日志时使用的应用标识"""
    return os.environ.get("TASKSYNC_APP_ID", "com.orion.tasks")


# 列表/智能视图分页默认条数
DEFAULT_PAGE_LIMIT: int = int(os.environ.get("TASKSYNC_DEFAULT_PAGE_LIMIT", "100"))

# 搜索默认返回条数
DEFAULT_SEARCH_LIMIT: int = int(os.environ.get("TASKSYNC_SEARCH_LIMIT", "50"))

# 单次分页请求允许的最大条数
MAX_PAGE_LIMIT: int = 500

# 未携带 X-Device-Id 时使用的设备标识
UNKNOWN_DEVICE_ID: str = "unknown"
