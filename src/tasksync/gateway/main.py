"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭 + 投影引擎/入口/查询服务初始化 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from tasksync.core.config import get_db_path
from tasksync.core.ingest import IngestService
from tasksync.core.logging_config import setup_logging
from tasksync.core.projection import ProjectionEngine
from tasksync.core.query import ProjectionQueries
from tasksync.core.store import StoreGroup, create_store_group

from .errors import ApiError, api_error_handler
from .middleware.logging_mw import LoggingMiddleware
from .middleware.user_mw import UserContextMiddleware
from .routes import events, health, lists, tags, tasks
from .services.scheduler import ProjectionScheduler
from .telemetry import setup_logfire

log = structlog.get_logger()


def init_app_state(app: FastAPI, store_group: StoreGroup) -> None:
    """在 app.state 上挂载共享同一 StoreGroup 的服务实例"""
    engine = ProjectionEngine(store_group)
    app.state.store_group = store_group
    app.state.projection_engine = engine
    app.state.projection_scheduler = ProjectionScheduler(engine)
    app.state.ingest_service = IngestService(store_group)
    app.state.queries = ProjectionQueries(store_group)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 DB 与服务，关闭时等待后台投影并关闭连接"""
    db_path = get_db_path()
    store_group = await create_store_group(db_path)
    init_app_state(app, store_group)
    await log.ainfo("gateway_started", db_path=db_path)

    yield

    # 关闭：先等待后台投影完成，再关闭数据库连接
    scheduler = getattr(app.state, "projection_scheduler", None)
    if scheduler is not None:
        await scheduler.drain()
    if hasattr(app.state, "store_group") and app.state.store_group:
        await app.state.store_group.close()


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="TaskSync Gateway",
        version="0.1.0",
        description="任务/列表/标签事件投影 API",
        lifespan=lifespan,
    )

    # 注册中间件（后添加的在外层：Logging 先清空并绑定 request_id）
    app.add_middleware(UserContextMiddleware)
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(ApiError, api_error_handler)

    # 初始化日志
    setup_logging()
    setup_logfire(app)

    # 注册路由
    app.include_router(events.router, tags=["events"])
    app.include_router(lists.router, tags=["lists"])
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(tags.router, tags=["tags"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
