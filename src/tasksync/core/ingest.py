"""事件入口 -- 批量写入事件日志

1. 按 event_id 去重：已存在的事件跳过，但仍计入 processed（客户端确认语义）
2. 同一批次共用一个 server_timestamp（仅审计用）
3. 每个事件独立提交，单个写入失败只计入 failed

投影由调用方对 inserted_ids 调度 ProjectionEngine.process_event_batch。
"""

import time

import aiosqlite
import structlog

from .models.event import Event, EventInput
from .models.results import IngestResult
from .store import StoreGroup
from .store.transaction import atomic

log = structlog.get_logger()


class IngestService:
    """事件写入服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def insert_event_batch(
        self,
        user_id: str,
        device_id: str,
        app_id: str,
        events: list[EventInput],
        consent_snapshot_id: str,
    ) -> IngestResult:
        """批量写入事件

        Args:
            user_id: 已鉴权的用户 ID
            device_id: 设备 ID
            app_id: 应用标识
            events: 客户端提交的事件
            consent_snapshot_id: 已校验的同意快照 ID

        Returns:
            IngestResult，inserted_ids 为本次新写入、需要投影的事件
        """
        server_timestamp = int(time.time() * 1000)
        result = IngestResult()

        for item in events:
            event = Event(
                event_id=item.event_id,
                user_id=user_id,
                device_id=device_id,
                app_id=app_id,
                timestamp=item.timestamp,
                server_timestamp=server_timestamp,
                event_type=item.event_type,
                schema_version=item.schema_version,
                payload=item.payload,
                media_refs=item.media_refs,
                consent_snapshot_id=consent_snapshot_id,
            )
            try:
                async with self._stores.write_lock:
                    if await self._stores.event_store.event_exists(event.event_id):
                        inserted = False
                    else:
                        async with atomic(self._stores.conn):
                            await self._stores.event_store.append_event(event)
                        inserted = True
            except aiosqlite.IntegrityError:
                # 并发写入了同一 event_id
                inserted = False
            except Exception as e:
                log.exception(
                    "event_insert_failed",
                    event_id=event.event_id,
                    event_type=event.event_type,
                    error=str(e),
                )
                result.failed += 1
                continue

            result.event_ids.append(event.event_id)
            result.processed += 1
            if inserted:
                result.inserted_ids.append(event.event_id)
            else:
                log.debug("duplicate_event_skipped", event_id=event.event_id)

        await log.ainfo(
            "event_batch_ingested",
            user_id=user_id,
            device_id=device_id,
            processed=result.processed,
            inserted=len(result.inserted_ids),
            failed=result.failed,
        )
        return result
