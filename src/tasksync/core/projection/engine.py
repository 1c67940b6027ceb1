"""投影驱动器 -- 单事件、批量、按时间戳重放

每个事件在独立的 SQLite 事务中投影（读当前行 -> 判定 -> 写入 -> 计数），
成功提交，异常回滚。共享连接上的事务由 StoreGroup.write_lock 串行化。

rebuild 结束时从 tasks 表全量重算列表计数，是修复计数漂移的权威路径。
"""

import time

import structlog

from ..exceptions import EventNotFoundError
from ..models.event import Event
from ..models.results import BatchItemResult, ProcessResult, RebuildResult
from ..store import StoreGroup
from ..store.transaction import atomic
from .base import ProjectionContext, RouteOutcome
from .counters import CounterMaintainer
from .router import route_event

log = structlog.get_logger()


class ProjectionEngine:
    """投影引擎"""

    def __init__(self, stores: StoreGroup) -> None:
        self._stores = stores
        self._ctx = ProjectionContext(stores)
        self._lock = stores.write_lock

    @property
    def counters(self) -> CounterMaintainer:
        """计数维护器（供 CLI 与运维修复使用）"""
        return self._ctx.counters

    async def process_event(self, event_id: str) -> ProcessResult:
        """投影单个事件

        Raises:
            EventNotFoundError: 事件不存在（调用方契约违规）
            Exception: 投影器异常，事务已回滚
        """
        async with self._lock:
            event = await self._stores.event_store.get_event(event_id)
            if event is None:
                raise EventNotFoundError(event_id)
            await self._apply(event)

        return ProcessResult(processed=True, event_type=event.event_type)

    async def process_event_batch(self, event_ids: list[str]) -> list[BatchItemResult]:
        """按给定顺序投影一批事件，单个失败不影响其余事件"""
        results: list[BatchItemResult] = []
        for event_id in event_ids:
            try:
                await self.process_event(event_id)
                results.append(BatchItemResult(event_id=event_id, processed=True))
            except Exception as e:
                log.exception(
                    "event_processing_failed",
                    event_id=event_id,
                    error=str(e),
                )
                results.append(
                    BatchItemResult(event_id=event_id, processed=False, error=str(e))
                )
        return results

    async def rebuild_projections(
        self,
        user_id: str,
        from_timestamp: int | None = None,
        reset: bool = False,
    ) -> RebuildResult:
        """按时间戳正序重放用户事件，然后全量重算列表计数

        Args:
            user_id: 用户 ID
            from_timestamp: 仅重放 timestamp >= 该值的事件；None 表示全部历史
            reset: 重放前清空该用户的投影行（仅允许全量重放）

        Raises:
            ValueError: reset 与 from_timestamp 同时指定
        """
        if reset and from_timestamp is not None:
            raise ValueError("reset requires a full-history replay (no from_timestamp)")

        start_time = time.monotonic()
        events = await self._stores.event_store.get_events_for_user(
            user_id, from_timestamp or 0
        )

        await log.ainfo(
            "projection_rebuild_started",
            user_id=user_id,
            from_timestamp=from_timestamp,
            reset=reset,
            event_count=len(events),
        )

        if reset:
            async with self._lock, atomic(self._stores.conn):
                await self._stores.task_store.delete_for_user(user_id)
                await self._stores.list_store.delete_for_user(user_id)
                await self._stores.tag_store.delete_for_user(user_id)

        processed = 0
        errors = 0
        for event in events:
            try:
                async with self._lock:
                    await self._apply(event)
                processed += 1
            except Exception as e:
                errors += 1
                log.exception(
                    "rebuild_event_failed",
                    event_id=event.event_id,
                    event_type=event.event_type,
                    error=str(e),
                )

        async with self._lock, atomic(self._stores.conn):
            list_count = await self._ctx.counters.recompute_user_counts(user_id)

        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        await log.ainfo(
            "projection_rebuild_completed",
            user_id=user_id,
            processed=processed,
            errors=errors,
            total=len(events),
            list_count=list_count,
            elapsed_ms=elapsed_ms,
        )

        return RebuildResult(processed=processed, errors=errors, total=len(events))

    async def _apply(self, event: Event) -> RouteOutcome:
        """单事件事务（调用方需持有锁）"""
        async with atomic(self._stores.conn):
            return await route_event(self._ctx, event)
