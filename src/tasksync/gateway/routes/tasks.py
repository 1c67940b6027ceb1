"""任务查询路由

GET /api/tasks/smart/{view_type}: 智能视图（today/scheduled/flagged/completed/all）
GET /api/tasks/search: 标题搜索
GET /api/tasks/{task_id}: 任务详情

固定路径必须在 /api/tasks/{task_id} 之前注册。
"""

from fastapi import APIRouter, Depends, Query
from tasksync.core.config import DEFAULT_PAGE_LIMIT, DEFAULT_SEARCH_LIMIT, MAX_PAGE_LIMIT
from tasksync.core.models import SmartViewType, Task, TaskPage
from tasksync.core.models.base import CamelModel
from tasksync.core.query import ProjectionQueries

from ..deps import get_queries, get_user_id
from ..errors import error_response

router = APIRouter()


class TaskSearchResponse(CamelModel):
    tasks: list[Task]


@router.get("/api/tasks/smart/{view_type}", response_model=TaskPage)
async def smart_view(
    view_type: str,
    limit: int = Query(default=DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    cursor: str | None = Query(default=None),
    user_id: str = Depends(get_user_id),
    queries: ProjectionQueries = Depends(get_queries),
):
    """按智能视图查询任务"""
    try:
        view = SmartViewType(view_type)
    except ValueError:
        return error_response(
            400, "INVALID_VIEW_TYPE", f"Invalid view type: {view_type}"
        )
    return await queries.smart_view(user_id, view, limit=limit, cursor=cursor)


@router.get("/api/tasks/search", response_model=TaskSearchResponse)
async def search_tasks(
    q: str | None = Query(default=None),
    list_id: str | None = Query(default=None, alias="listId"),
    include_completed: bool = Query(default=True, alias="includeCompleted"),
    limit: int = Query(default=DEFAULT_SEARCH_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    user_id: str = Depends(get_user_id),
    queries: ProjectionQueries = Depends(get_queries),
):
    """按标题搜索任务，所有词项都需出现"""
    if not q or not q.strip():
        return error_response(400, "QUERY_REQUIRED", "Search query required")
    tasks = await queries.search_tasks(
        user_id,
        q,
        list_id=list_id,
        include_completed=include_completed,
        limit=limit,
    )
    return TaskSearchResponse(tasks=tasks)


@router.get("/api/tasks/{task_id}")
async def get_task(
    task_id: str,
    user_id: str = Depends(get_user_id),
    queries: ProjectionQueries = Depends(get_queries),
):
    """查询任务详情；不存在、属于其他用户或已删除均返回 404"""
    task = await queries.get_task_detail(user_id, task_id)
    if task is None:
        return error_response(404, "TASK_NOT_FOUND", "Task not found")
    return {"task": task.model_dump(mode="json", by_alias=True)}
