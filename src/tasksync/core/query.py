"""查询层 -- 投影表的只读访问

面向用户的查询一律排除已墓碑化的行；
get_*_by_id 为内部访问，包含墓碑行（用于幂等检查与计数回溯）。
"""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from .config import DEFAULT_PAGE_LIMIT, DEFAULT_SEARCH_LIMIT
from .models.enums import SmartViewType
from .models.results import TaskPage
from .models.tag import Tag
from .models.task import Task
from .models.task_list import TaskList
from .store import SqliteListStore, SqliteTagStore, SqliteTaskStore, StoreGroup


def _today() -> str:
    return datetime.now(UTC).date().isoformat()


def _by_due_time(task: Task) -> tuple[Any, ...]:
    # 有具体时间的排在前面，按时间正序；无时间的按优先级倒序
    return (task.due_time is None, task.due_time or "", -task.priority.weight)


def _by_due_date(task: Task) -> tuple[Any, ...]:
    return (task.due_date or "", task.created_at)


def _by_due_date_then_priority(task: Task) -> tuple[Any, ...]:
    return (task.due_date is None, task.due_date or "", -task.priority.weight)


def _by_due_date_priority_created(task: Task) -> tuple[Any, ...]:
    return (
        task.due_date is None,
        task.due_date or "",
        -task.priority.weight,
        task.created_at,
    )


def _by_completion_desc(task: Task) -> tuple[Any, ...]:
    return (task.completed_at or "", task.updated_at)


# 视图 -> (筛选条件, 排序键, 是否倒序)
_SMART_VIEWS: dict[
    SmartViewType,
    tuple[Callable[[Task, str], bool], Callable[[Task], tuple[Any, ...]], bool],
] = {
    SmartViewType.TODAY: (
        lambda t, day: (
            not t.completed and t.due_date is not None and t.due_date.startswith(day)
        ),
        _by_due_time,
        False,
    ),
    SmartViewType.SCHEDULED: (
        lambda t, day: not t.completed and t.due_date is not None,
        _by_due_date,
        False,
    ),
    SmartViewType.FLAGGED: (
        lambda t, day: not t.completed and t.flag,
        _by_due_date_then_priority,
        False,
    ),
    SmartViewType.COMPLETED: (
        lambda t, day: t.completed,
        _by_completion_desc,
        True,
    ),
    SmartViewType.ALL: (
        lambda t, day: not t.completed,
        _by_due_date_priority_created,
        False,
    ),
}


def _paginate(
    tasks: list[Task],
    limit: int,
    cursor: str | None,
) -> TaskPage:
    """以最后一个 task_id 为游标分页

    游标不存在时从头开始；只有当前页填满时才返回 next_cursor。
    """
    start = 0
    if cursor is not None:
        for index, task in enumerate(tasks):
            if task.task_id == cursor:
                start = index + 1
                break

    page = tasks[start : start + limit]
    next_cursor = page[-1].task_id if len(page) == limit and page else None
    return TaskPage(tasks=page, next_cursor=next_cursor, total_count=len(tasks))


class ProjectionQueries:
    """投影只读访问器

    所有读取走 StoreGroup 的只读连接，只能看到已提交的投影状态。
    """

    def __init__(self, stores: StoreGroup) -> None:
        self._lists = SqliteListStore(stores.read_conn)
        self._tasks = SqliteTaskStore(stores.read_conn)
        self._tags = SqliteTagStore(stores.read_conn)

    # ============================================================
    # 内部访问（包含墓碑行）
    # ============================================================

    async def get_list_by_id(self, list_id: str) -> TaskList | None:
        return await self._lists.get_list(list_id)

    async def get_task_by_id(self, task_id: str) -> Task | None:
        return await self._tasks.get_task(task_id)

    async def get_tag_by_id(self, tag_id: str) -> Tag | None:
        return await self._tags.get_tag(tag_id)

    # ============================================================
    # 面向用户的查询（排除墓碑行）
    # ============================================================

    async def get_list_detail(self, user_id: str, list_id: str) -> TaskList | None:
        """查询用户自己的未删除列表"""
        task_list = await self._lists.get_list(list_id)
        if task_list is None or task_list.user_id != user_id or task_list.tombstoned:
            return None
        return task_list

    async def get_task_detail(self, user_id: str, task_id: str) -> Task | None:
        """查询用户自己的未删除任务"""
        task = await self._tasks.get_task(task_id)
        if task is None or task.user_id != user_id or task.tombstoned:
            return None
        return task

    async def list_lists_for_user(self, user_id: str) -> list[TaskList]:
        """用户的所有列表，按 sort_order 排序"""
        return await self._lists.list_active_for_user(user_id)

    async def list_tasks_by_list(
        self,
        user_id: str,
        list_id: str,
        include_completed: bool = True,
        limit: int = DEFAULT_PAGE_LIMIT,
        cursor: str | None = None,
    ) -> TaskPage:
        """列表中的任务，按 sort_order、created_at 排序，游标分页"""
        tasks = await self._tasks.list_active_in_list(
            user_id, list_id, include_completed
        )
        return _paginate(tasks, limit, cursor)

    async def smart_view(
        self,
        user_id: str,
        view: SmartViewType,
        limit: int = DEFAULT_PAGE_LIMIT,
        cursor: str | None = None,
        today: str | None = None,
    ) -> TaskPage:
        """智能视图

        Args:
            view: today / scheduled / flagged / completed / all
            today: 覆盖"今天"的日期（YYYY-MM-DD），默认取 UTC 当前日期
        """
        predicate, sort_key, reverse = _SMART_VIEWS[SmartViewType(view)]
        day = today or _today()

        tasks = await self._tasks.list_active_for_user(user_id)
        selected = sorted(
            (t for t in tasks if predicate(t, day)),
            key=sort_key,
            reverse=reverse,
        )
        return _paginate(selected, limit, cursor)

    async def search_tasks(
        self,
        user_id: str,
        query: str,
        list_id: str | None = None,
        include_completed: bool = True,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> list[Task]:
        """标题搜索：每个空白分隔的词项都必须出现在标题中（大小写不敏感）"""
        terms = query.split()
        if not terms:
            return []
        return await self._tasks.search_titles(
            user_id,
            terms,
            list_id=list_id,
            include_completed=include_completed,
            limit=limit,
        )

    async def list_tags_for_user(self, user_id: str) -> list[Tag]:
        """用户的所有标签，按名称排序"""
        return await self._tags.list_active_for_user(user_id)
