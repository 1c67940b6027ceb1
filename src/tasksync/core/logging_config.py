"""structlog 配置 -- gateway 与 CLI 共用

投影器、调度器与 CLI 都通过 structlog.get_logger() 输出事件日志；
标准库 logging（uvicorn、aiosqlite）经 ProcessorFormatter 走同一渲染器，
统一写到 stderr，CLI 的 stdout 只保留命令结果。
"""

import logging
import sys

import structlog

from .config import get_log_format, get_log_level

# aiosqlite 在 DEBUG 级别逐条输出 SQL，投影调试时噪声过大
_QUIET_LOGGERS = ("aiosqlite",)


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化 structlog 与标准库 logging

    Args:
        log_format: "json" 为结构化输出，其余值为 dev 可读输出；
            未指定时读取 TASKSYNC_LOG_FORMAT
        log_level: 根 logger 级别；未指定时读取 TASKSYNC_LOG_LEVEL
    """
    log_format = (log_format or get_log_format()).lower()
    level = getattr(logging, (log_level or get_log_level()).upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer(
            ensure_ascii=False
        )
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))
