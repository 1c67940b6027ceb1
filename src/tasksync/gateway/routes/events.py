"""事件入口路由

POST /api/events/batch: 批量写入事件日志，后台调度投影。
- 200: 写入完成（重复事件计入 processed）
- 401: 缺少用户身份
- 422: 缺少 events 或 consentSnapshotId
"""

from fastapi import APIRouter, Depends
from pydantic import Field
from tasksync.core.config import get_app_id
from tasksync.core.ingest import IngestService
from tasksync.core.models import EventInput
from tasksync.core.models.base import CamelModel

from ..deps import get_device_id, get_ingest_service, get_scheduler, get_user_id
from ..services.scheduler import ProjectionScheduler

router = APIRouter()


class EventBatchRequest(CamelModel):
    """批量写入请求体"""

    events: list[EventInput]
    consent_snapshot_id: str = Field(min_length=1)


class EventBatchResponse(CamelModel):
    """批量写入响应"""

    success: bool
    processed: int
    failed: int
    event_ids: list[str]


@router.post("/api/events/batch", response_model=EventBatchResponse)
async def insert_event_batch(
    body: EventBatchRequest,
    user_id: str = Depends(get_user_id),
    device_id: str = Depends(get_device_id),
    ingest: IngestService = Depends(get_ingest_service),
    scheduler: ProjectionScheduler = Depends(get_scheduler),
):
    """写入事件并调度新事件的投影（不等待投影完成）"""
    result = await ingest.insert_event_batch(
        user_id=user_id,
        device_id=device_id,
        app_id=get_app_id(),
        events=body.events,
        consent_snapshot_id=body.consent_snapshot_id,
    )
    scheduler.schedule(result.inserted_ids)

    return EventBatchResponse(
        success=True,
        processed=result.processed,
        failed=result.failed,
        event_ids=result.event_ids,
    )
