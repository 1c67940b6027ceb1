"""List 投影器 -- tasks.list.*

- created/updated: upsert，缺失时用默认值补齐后创建
- reordered: 仅修改 sort_order，不创建
- deleted: 软删除并级联墓碑化列表中的所有未删除任务
"""

from typing import Any

import structlog

from ..models.enums import EntityFamily
from ..models.event import Event
from ..models.payloads import EventPayload
from ..models.task_list import TaskList
from .base import EntityProjector, RouteOutcome

log = structlog.get_logger()


class ListProjector(EntityProjector):
    """列表投影器"""

    family = EntityFamily.LIST

    async def apply(
        self,
        event: Event,
        action: str,
        payload: EventPayload,
    ) -> RouteOutcome:
        existing = await self._ctx.list_store.get_list(payload.entity_id)

        if action == "deleted":
            return await self._delete(event, existing)
        if action == "reordered":
            return await self._upsert(
                event, payload, payload.changes(), existing, allow_create=False
            )
        return await self._upsert(
            event, payload, payload.changes(), existing, allow_create=True
        )

    async def _upsert(
        self,
        event: Event,
        payload: EventPayload,
        changes: dict[str, Any],
        existing: TaskList | None,
        allow_create: bool,
    ) -> RouteOutcome:
        if existing is None:
            if not allow_create:
                log.debug(
                    "missing_list_skipped",
                    event_id=event.event_id,
                    list_id=payload.entity_id,
                )
                return RouteOutcome.IGNORED

            task_list = TaskList(
                list_id=payload.entity_id,
                user_id=event.user_id,
                created_at=event.timestamp,
                updated_at=event.timestamp,
                last_event_id=event.event_id,
                **changes,
            )
            await self._ctx.list_store.save_list(task_list)
            # 任务可能先于列表到达
            await self._ctx.counters.recompute_list_counts(task_list.list_id)
            return RouteOutcome.APPLIED

        skipped = self._guard(event, existing)
        if skipped is not None:
            return skipped

        updated = existing.model_copy(update={**changes, **self._stamp(event)})
        await self._ctx.list_store.save_list(updated)
        return RouteOutcome.APPLIED

    async def _delete(self, event: Event, existing: TaskList | None) -> RouteOutcome:
        if existing is None:
            return RouteOutcome.IGNORED

        skipped = self._guard(event, existing)
        if skipped is not None:
            return skipped

        await self._ctx.list_store.save_list(
            existing.model_copy(update=self._tombstone(event, existing))
        )

        # 级联：同一 timestamp / event_id 标记该用户在列表中的所有未删除任务
        cascaded = await self._ctx.task_store.list_live_in_list(
            existing.list_id, existing.user_id
        )
        for task in cascaded:
            await self._ctx.task_store.save_task(
                task.model_copy(
                    update={
                        "tombstoned": True,
                        "tombstoned_at": event.timestamp,
                        "updated_at": max(task.updated_at, event.timestamp),
                        "last_event_id": event.event_id,
                    }
                )
            )

        await self._ctx.counters.recompute_list_counts(existing.list_id)

        await log.ainfo(
            "list_tombstoned",
            list_id=existing.list_id,
            event_id=event.event_id,
            cascaded_tasks=len(cascaded),
        )
        return RouteOutcome.APPLIED
