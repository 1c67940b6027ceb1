"""依赖注入模块 -- 通过 FastAPI Depends 注入服务实例与请求身份

服务实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from fastapi import Header, Request
from tasksync.core.config import UNKNOWN_DEVICE_ID
from tasksync.core.ingest import IngestService
from tasksync.core.projection import ProjectionEngine
from tasksync.core.query import ProjectionQueries
from tasksync.core.store import StoreGroup

from .errors import ApiError
from .services.scheduler import ProjectionScheduler


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_engine(request: Request) -> ProjectionEngine:
    return request.app.state.projection_engine


def get_ingest_service(request: Request) -> IngestService:
    return request.app.state.ingest_service


def get_scheduler(request: Request) -> ProjectionScheduler:
    return request.app.state.projection_scheduler


def get_queries(request: Request) -> ProjectionQueries:
    return request.app.state.queries


def get_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """上游鉴权层写入的用户 ID；缺失时 401"""
    if not x_user_id:
        raise ApiError(401, "UNAUTHORIZED", "Missing X-User-Id header")
    return x_user_id


def get_device_id(x_device_id: str | None = Header(default=None)) -> str:
    """设备 ID；缺失时使用 unknown"""
    return x_device_id or UNKNOWN_DEVICE_ID
