"""投影器公共部分 -- 上下文、处理结果、LWW 守卫

每个投影器对外只有一个 apply 入口；created/updated 等子动作
都归并到同一个带显式前像（已有行或 None）的 upsert 路径上。
"""

from enum import StrEnum
from typing import Any, ClassVar, Protocol

import structlog

from ..models.enums import EntityFamily
from ..models.event import Event
from ..models.payloads import EventPayload
from ..store import StoreGroup
from .counters import CounterMaintainer

log = structlog.get_logger()


class RouteOutcome(StrEnum):
    """单个事件的投影结果"""

    APPLIED = "applied"  # 写入了投影
    STALE = "stale"  # timestamp <= updated_at，已被更新的事件覆盖
    IGNORED = "ignored"  # 未知类型/动作，或目标实体不存在且不允许创建
    DROPPED = "dropped"  # payload 非法，事件被消费但不产生效果


class ProjectionContext:
    """投影器共享的存储与计数维护器"""

    def __init__(self, stores: StoreGroup) -> None:
        self.list_store = stores.list_store
        self.task_store = stores.task_store
        self.tag_store = stores.tag_store
        self.counters = CounterMaintainer(stores.list_store, stores.task_store)


class _Projection(Protocol):
    user_id: str
    updated_at: int


class EntityProjector:
    """实体投影器基类"""

    family: ClassVar[EntityFamily]

    def __init__(self, ctx: ProjectionContext) -> None:
        self._ctx = ctx

    async def apply(
        self,
        event: Event,
        action: str,
        payload: EventPayload,
    ) -> RouteOutcome:
        """将一个已校验的事件应用到投影"""
        raise NotImplementedError

    def _guard(self, event: Event, existing: _Projection) -> RouteOutcome | None:
        """对已存在的行做归属与 LWW 检查

        Returns:
            需要跳过时返回对应结果，可以应用时返回 None
        """
        if existing.user_id != event.user_id:
            log.warning(
                "foreign_entity_event_dropped",
                event_id=event.event_id,
                event_type=event.event_type,
                owner_id=existing.user_id,
                user_id=event.user_id,
            )
            return RouteOutcome.DROPPED
        if event.timestamp <= existing.updated_at:
            log.debug(
                "stale_event_skipped",
                event_id=event.event_id,
                event_type=event.event_type,
                timestamp=event.timestamp,
                updated_at=existing.updated_at,
            )
            return RouteOutcome.STALE
        return None

    @staticmethod
    def _stamp(event: Event) -> dict[str, Any]:
        """每次生效写入都要更新的溯源字段"""
        return {"updated_at": event.timestamp, "last_event_id": event.event_id}

    @staticmethod
    def _tombstone(event: Event, existing: Any) -> dict[str, Any]:
        """软删除字段；已墓碑化的行保留首次删除时间"""
        return {
            "tombstoned": True,
            "tombstoned_at": (
                existing.tombstoned_at if existing.tombstoned else event.timestamp
            ),
            "updated_at": event.timestamp,
            "last_event_id": event.event_id,
        }
