"""Task 投影器 -- tasks.task.*

所有子动作都归并到同一个 upsert 路径，只是变更字段和是否允许创建不同：

| 动作        | 变更字段                         | 允许创建 |
|-------------|----------------------------------|----------|
| created     | payload 中显式出现的字段         | 是       |
| updated     | 同上                             | 是（需 listId） |
| completed   | completed=True, completed_at     | 否       |
| uncompleted | completed=False, completed_at=None | 否     |
| moved       | list_id (+ sort_order)           | 否       |
| reordered   | sort_order                       | 否       |

deleted 单独处理：软删除并扣减所属列表计数。
list_id 变化即视为移动，两端列表计数在同一事务内调整。
"""

from datetime import UTC, datetime
from typing import Any

import structlog

from ..exceptions import MalformedPayloadError
from ..models.enums import EntityFamily
from ..models.event import Event
from ..models.payloads import EventPayload
from ..models.task import Task
from .base import EntityProjector, RouteOutcome

log = structlog.get_logger()

# 不会创建缺失任务的动作
_NON_CREATING_ACTIONS = frozenset({"completed", "uncompleted", "moved", "reordered"})


def iso_from_ms(timestamp: int) -> str:
    """毫秒时间戳 -> ISO 8601 UTC 字符串"""
    dt = datetime.fromtimestamp(timestamp / 1000, tz=UTC)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TaskProjector(EntityProjector):
    """任务投影器"""

    family = EntityFamily.TASK

    async def apply(
        self,
        event: Event,
        action: str,
        payload: EventPayload,
    ) -> RouteOutcome:
        existing = await self._ctx.task_store.get_task(payload.entity_id)

        if action == "deleted":
            return await self._delete(event, existing)

        if action == "completed":
            completed_at = payload.changes().get("completed_at")
            changes: dict[str, Any] = {
                "completed": True,
                "completed_at": completed_at or iso_from_ms(event.timestamp),
            }
        elif action == "uncompleted":
            changes = {"completed": False, "completed_at": None}
        else:
            changes = payload.changes()

        return await self._upsert(
            event,
            payload,
            changes,
            existing,
            allow_create=action not in _NON_CREATING_ACTIONS,
        )

    async def _upsert(
        self,
        event: Event,
        payload: EventPayload,
        changes: dict[str, Any],
        existing: Task | None,
        allow_create: bool,
    ) -> RouteOutcome:
        if existing is None:
            if not allow_create:
                log.debug(
                    "missing_task_skipped",
                    event_id=event.event_id,
                    event_type=event.event_type,
                    task_id=payload.entity_id,
                )
                return RouteOutcome.IGNORED
            if changes.get("list_id") is None:
                raise MalformedPayloadError(
                    event.event_type,
                    event.event_id,
                    "listId is required to create a task",
                )

            if changes.get("completed") and "completed_at" not in changes:
                changes = {**changes, "completed_at": iso_from_ms(event.timestamp)}
            task = Task(
                task_id=payload.entity_id,
                user_id=event.user_id,
                created_at=event.timestamp,
                updated_at=event.timestamp,
                last_event_id=event.event_id,
                **changes,
            )
            await self._ctx.task_store.save_task(task)
            await self._ctx.counters.adjust_list_counts(
                task.list_id, task.user_id, 1, 1 if task.completed else 0
            )
            return RouteOutcome.APPLIED

        skipped = self._guard(event, existing)
        if skipped is not None:
            return skipped

        # completed 翻转但未带完成时间时，由事件时间推导
        if (
            "completed" in changes
            and "completed_at" not in changes
            and changes["completed"] != existing.completed
        ):
            changes = {
                **changes,
                "completed_at": (
                    iso_from_ms(event.timestamp) if changes["completed"] else None
                ),
            }

        updated = existing.model_copy(update={**changes, **self._stamp(event)})
        await self._ctx.task_store.save_task(updated)

        # 墓碑行不再参与计数
        if not existing.tombstoned:
            await self._adjust_counts(existing, updated)
        return RouteOutcome.APPLIED

    async def _adjust_counts(self, before: Task, after: Task) -> None:
        """根据前后状态调整列表计数"""
        counters = self._ctx.counters
        if before.list_id != after.list_id:
            await counters.adjust_list_counts(
                before.list_id, before.user_id, -1, -1 if before.completed else 0
            )
            await counters.adjust_list_counts(
                after.list_id, after.user_id, 1, 1 if after.completed else 0
            )
            log.debug(
                "task_moved",
                task_id=after.task_id,
                from_list_id=before.list_id,
                to_list_id=after.list_id,
            )
        elif before.completed != after.completed:
            await counters.adjust_list_counts(
                after.list_id, after.user_id, 0, 1 if after.completed else -1
            )

    async def _delete(self, event: Event, existing: Task | None) -> RouteOutcome:
        if existing is None:
            return RouteOutcome.IGNORED

        skipped = self._guard(event, existing)
        if skipped is not None:
            return skipped

        await self._ctx.task_store.save_task(
            existing.model_copy(update=self._tombstone(event, existing))
        )
        if not existing.tombstoned:
            await self._ctx.counters.adjust_list_counts(
                existing.list_id, existing.user_id, -1, -1 if existing.completed else 0
            )
        return RouteOutcome.APPLIED
