"""列表查询路由

GET /api/lists: 用户的所有列表（按 sortOrder）
GET /api/lists/{list_id}: 列表详情
GET /api/lists/{list_id}/tasks: 列表中的任务，游标分页
"""

from fastapi import APIRouter, Depends, Query
from tasksync.core.config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from tasksync.core.models import TaskList, TaskPage
from tasksync.core.models.base import CamelModel
from tasksync.core.query import ProjectionQueries

from ..deps import get_queries, get_user_id
from ..errors import error_response

router = APIRouter()


class ListsResponse(CamelModel):
    lists: list[TaskList]


@router.get("/api/lists", response_model=ListsResponse)
async def list_lists(
    user_id: str = Depends(get_user_id),
    queries: ProjectionQueries = Depends(get_queries),
):
    """查询用户所有未删除列表"""
    return ListsResponse(lists=await queries.list_lists_for_user(user_id))


@router.get("/api/lists/{list_id}")
async def get_list(
    list_id: str,
    user_id: str = Depends(get_user_id),
    queries: ProjectionQueries = Depends(get_queries),
):
    """查询列表详情（含反范式计数）"""
    task_list = await queries.get_list_detail(user_id, list_id)
    if task_list is None:
        return error_response(404, "LIST_NOT_FOUND", f"List {list_id} does not exist")
    return {"list": task_list.model_dump(mode="json", by_alias=True)}


@router.get("/api/lists/{list_id}/tasks", response_model=TaskPage)
async def list_tasks_in_list(
    list_id: str,
    include_completed: bool = Query(default=True, alias="includeCompleted"),
    limit: int = Query(default=DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    cursor: str | None = Query(default=None),
    user_id: str = Depends(get_user_id),
    queries: ProjectionQueries = Depends(get_queries),
):
    """查询列表中的任务，按 sortOrder、createdAt 排序"""
    return await queries.list_tasks_by_list(
        user_id,
        list_id,
        include_completed=include_completed,
        limit=limit,
        cursor=cursor,
    )
