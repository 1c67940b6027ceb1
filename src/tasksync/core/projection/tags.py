"""Tag 投影器 -- tasks.tag.*

删除标签只墓碑化标签本身，任务上的标签引用由客户端自行清理。
"""

from ..models.enums import EntityFamily
from ..models.event import Event
from ..models.payloads import EventPayload
from ..models.tag import Tag
from .base import EntityProjector, RouteOutcome


class TagProjector(EntityProjector):
    """标签投影器"""

    family = EntityFamily.TAG

    async def apply(
        self,
        event: Event,
        action: str,
        payload: EventPayload,
    ) -> RouteOutcome:
        existing = await self._ctx.tag_store.get_tag(payload.entity_id)

        if action == "deleted":
            if existing is None:
                return RouteOutcome.IGNORED
            skipped = self._guard(event, existing)
            if skipped is not None:
                return skipped
            await self._ctx.tag_store.save_tag(
                existing.model_copy(update=self._tombstone(event, existing))
            )
            return RouteOutcome.APPLIED

        changes = payload.changes()
        if existing is None:
            await self._ctx.tag_store.save_tag(
                Tag(
                    tag_id=payload.entity_id,
                    user_id=event.user_id,
                    created_at=event.timestamp,
                    updated_at=event.timestamp,
                    last_event_id=event.event_id,
                    **changes,
                )
            )
            return RouteOutcome.APPLIED

        skipped = self._guard(event, existing)
        if skipped is not None:
            return skipped

        await self._ctx.tag_store.save_tag(
            existing.model_copy(update={**changes, **self._stamp(event)})
        )
        return RouteOutcome.APPLIED
