"""反范式计数维护 -- task_lists.task_count / completed_task_count

计数是 tasks 表的派生缓存：
- 增量维护：任务创建/删除/完成切换/跨列表移动时调整
- 全量重算：列表插入、列表删除以及 rebuild 结束时从 tasks 表统计

计数只统计与列表同属一个用户的任务；其他用户引用该 list_id 时
视同列表不存在。增量结果在零处截断。乱序事件被跳过可能造成漂移，
只有全量重算能够修复。
"""

import structlog

from ..store.list_store import SqliteListStore
from ..store.task_store import SqliteTaskStore

log = structlog.get_logger()


class CounterMaintainer:
    """列表计数维护器"""

    def __init__(
        self,
        list_store: SqliteListStore,
        task_store: SqliteTaskStore,
    ) -> None:
        self._list_store = list_store
        self._task_store = task_store

    async def adjust_list_counts(
        self,
        list_id: str,
        user_id: str,
        task_delta: int,
        completed_delta: int,
    ) -> None:
        """按增量调整列表计数，结果不小于 0

        列表不存在或属于其他用户时为 no-op：任务可能先于列表到达，
        或列表已被删除。
        """
        if task_delta == 0 and completed_delta == 0:
            return

        task_list = await self._list_store.get_list(list_id)
        if task_list is None or task_list.user_id != user_id:
            log.debug("counter_target_missing", list_id=list_id, user_id=user_id)
            return

        await self._list_store.update_counts(
            list_id,
            max(0, task_list.task_count + task_delta),
            max(0, task_list.completed_task_count + completed_delta),
        )

    async def recompute_list_counts(self, list_id: str) -> tuple[int, int] | None:
        """从 tasks 表全量重算单个列表的计数

        Returns:
            (task_count, completed_task_count)，列表不存在时返回 None
        """
        task_list = await self._list_store.get_list(list_id)
        if task_list is None:
            return None

        task_count, completed_count = await self._task_store.count_live_in_list(
            list_id, task_list.user_id
        )
        await self._list_store.update_counts(list_id, task_count, completed_count)
        return task_count, completed_count

    async def recompute_user_counts(self, user_id: str) -> int:
        """重算用户所有列表（含已墓碑化）的计数

        Returns:
            重算的列表数量
        """
        list_ids = await self._list_store.list_ids_for_user(user_id)
        for list_id in list_ids:
            task_count, completed_count = await self._task_store.count_live_in_list(
                list_id, user_id
            )
            await self._list_store.update_counts(list_id, task_count, completed_count)
        return len(list_ids)
