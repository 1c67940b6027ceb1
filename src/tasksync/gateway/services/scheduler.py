"""ProjectionScheduler -- 后台投影调度

入口写入事件后立即确认客户端，投影在后台 asyncio 任务中执行。
调度器持有任务引用（防止被 GC），关闭时 drain 等待全部完成。
"""

import asyncio

import structlog
from tasksync.core.projection import ProjectionEngine

log = structlog.get_logger()


class ProjectionScheduler:
    """后台投影调度器"""

    def __init__(self, engine: ProjectionEngine) -> None:
        self._engine = engine
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """尚未完成的后台投影批次数"""
        return len(self._tasks)

    def schedule(self, event_ids: list[str]) -> asyncio.Task | None:
        """调度一批事件的投影（fire-and-forget）

        Returns:
            后台任务；event_ids 为空时返回 None
        """
        if not event_ids:
            return None

        task = asyncio.create_task(self._run(list(event_ids)))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """等待所有已调度的投影完成"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _run(self, event_ids: list[str]) -> None:
        results = await self._engine.process_event_batch(event_ids)
        failed = [r.event_id for r in results if not r.processed]
        if failed:
            await log.awarning(
                "projection_batch_partial_failure",
                total=len(results),
                failed_event_ids=failed,
            )
        else:
            await log.ainfo("projection_batch_completed", total=len(results))
