"""标签查询路由 -- GET /api/tags"""

from fastapi import APIRouter, Depends
from tasksync.core.models import Tag
from tasksync.core.models.base import CamelModel
from tasksync.core.query import ProjectionQueries

from ..deps import get_queries, get_user_id

router = APIRouter()


class TagsResponse(CamelModel):
    tags: list[Tag]


@router.get("/api/tags", response_model=TagsResponse)
async def list_tags(
    user_id: str = Depends(get_user_id),
    queries: ProjectionQueries = Depends(get_queries),
):
    """查询用户所有未删除标签，按名称排序"""
    return TagsResponse(tags=await queries.list_tags_for_user(user_id))
