"""Logfire APM 可选接入

LOGFIRE_SEND_TO_LOGFIRE=true 时启用（需要 LOGFIRE_TOKEN 与 logfire extra），
否则只保留本地 structlog 日志。
"""

import os

import structlog
from fastapi import FastAPI


def setup_logfire(app: FastAPI) -> bool:
    """为 app 配置 Logfire 追踪

    Returns:
        是否已启用
    """
    if os.environ.get("LOGFIRE_SEND_TO_LOGFIRE", "false").lower() != "true":
        return False

    try:
        import logfire

        logfire.configure()
        logfire.instrument_fastapi(app)
    except Exception as e:
        # Logfire 初始化失败不影响投影与查询
        structlog.get_logger().warning(
            "logfire_init_failed",
            error=str(e),
            message="Logfire 初始化失败，降级为纯本地日志",
        )
        return False
    return True
