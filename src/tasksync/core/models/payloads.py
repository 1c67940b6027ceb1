"""Event Payload 子类型 -- 每种事件类型一个 payload 模型

payload 是以 event_type 为标签的和类型，在投影前校验：
- 字段缺失表示"不修改"
- 可空字段显式传 null 表示"清空"
- 不可空字段显式传 null 视为非法 payload
- 未知字段忽略（兼容更新版本客户端）
"""

from typing import Any, ClassVar

from pydantic import ConfigDict, ValidationError, model_validator

from ..exceptions import MalformedPayloadError
from .base import CamelModel
from .enums import EventType, Priority
from .event import Event
from .task import Attachment, Location, Recurrence, Subtask


class EventPayload(CamelModel):
    """payload 基类"""

    model_config = ConfigDict(extra="ignore", frozen=True)

    # 允许显式 null（表示清空）的字段
    NULLABLE_FIELDS: ClassVar[frozenset[str]] = frozenset()
    # 实体领域 ID 字段名
    ID_FIELD: ClassVar[str] = ""

    @model_validator(mode="after")
    def _reject_null_on_non_nullable(self) -> "EventPayload":
        for name in self.model_fields_set - self.NULLABLE_FIELDS:
            if getattr(self, name) is None:
                raise ValueError(f"field '{name}' is not nullable")
        return self

    @property
    def entity_id(self) -> str:
        return getattr(self, self.ID_FIELD)

    def changes(self, exclude: frozenset[str] = frozenset()) -> dict[str, Any]:
        """返回 payload 中显式出现的字段（不含领域 ID）"""
        skip = exclude | {self.ID_FIELD}
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if name not in skip
        }


# ============================================================
# List payloads
# ============================================================


class ListPayload(EventPayload):
    """tasks.list.created / tasks.list.updated"""

    ID_FIELD: ClassVar[str] = "list_id"
    NULLABLE_FIELDS: ClassVar[frozenset[str]] = frozenset({"smart_list", "smart_list_type"})

    list_id: str
    name: str | None = None
    color: str | None = None
    icon: str | None = None
    sort_order: float | None = None
    smart_list: bool | None = None
    smart_list_type: str | None = None


class ListDeletedPayload(EventPayload):
    """tasks.list.deleted"""

    ID_FIELD: ClassVar[str] = "list_id"

    list_id: str


class ListReorderedPayload(EventPayload):
    """tasks.list.reordered"""

    ID_FIELD: ClassVar[str] = "list_id"

    list_id: str
    sort_order: float


# ============================================================
# Task payloads
# ============================================================


class TaskPayload(EventPayload):
    """tasks.task.created / tasks.task.updated"""

    ID_FIELD: ClassVar[str] = "task_id"
    NULLABLE_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {
            "notes",
            "due_date",
            "due_time",
            "completed_at",
            "calendar_event_id",
            "recurrence",
            "location",
            "url",
        }
    )

    task_id: str
    list_id: str | None = None
    title: str | None = None
    notes: str | None = None
    due_date: str | None = None
    due_time: str | None = None
    priority: Priority | None = None
    tags: list[str] | None = None
    flag: bool | None = None
    completed: bool | None = None
    completed_at: str | None = None
    red_beacon_enabled: bool | None = None
    mirror_to_calendar: bool | None = None
    calendar_event_id: str | None = None
    recurrence: Recurrence | None = None
    subtasks: list[Subtask] | None = None
    attachments: list[Attachment] | None = None
    location: Location | None = None
    url: str | None = None
    sort_order: float | None = None


class TaskDeletedPayload(EventPayload):
    """tasks.task.deleted"""

    ID_FIELD: ClassVar[str] = "task_id"

    task_id: str


class TaskCompletedPayload(EventPayload):
    """tasks.task.completed"""

    ID_FIELD: ClassVar[str] = "task_id"
    NULLABLE_FIELDS: ClassVar[frozenset[str]] = frozenset({"completed_at"})

    task_id: str
    completed_at: str | None = None


class TaskUncompletedPayload(EventPayload):
    """tasks.task.uncompleted"""

    ID_FIELD: ClassVar[str] = "task_id"

    task_id: str


class TaskMovedPayload(EventPayload):
    """tasks.task.moved -- 仅携带目标列表与可选排序"""

    ID_FIELD: ClassVar[str] = "task_id"

    task_id: str
    list_id: str
    sort_order: float | None = None


class TaskReorderedPayload(EventPayload):
    """tasks.task.reordered"""

    ID_FIELD: ClassVar[str] = "task_id"

    task_id: str
    sort_order: float


# ============================================================
# Tag payloads
# ============================================================


class TagPayload(EventPayload):
    """tasks.tag.created / tasks.tag.updated"""

    ID_FIELD: ClassVar[str] = "tag_id"

    tag_id: str
    name: str | None = None
    color: str | None = None


class TagDeletedPayload(EventPayload):
    """tasks.tag.deleted"""

    ID_FIELD: ClassVar[str] = "tag_id"

    tag_id: str


PAYLOAD_MODELS: dict[EventType, type[EventPayload]] = {
    EventType.LIST_CREATED: ListPayload,
    EventType.LIST_UPDATED: ListPayload,
    EventType.LIST_DELETED: ListDeletedPayload,
    EventType.LIST_REORDERED: ListReorderedPayload,
    EventType.TASK_CREATED: TaskPayload,
    EventType.TASK_UPDATED: TaskPayload,
    EventType.TASK_DELETED: TaskDeletedPayload,
    EventType.TASK_COMPLETED: TaskCompletedPayload,
    EventType.TASK_UNCOMPLETED: TaskUncompletedPayload,
    EventType.TASK_MOVED: TaskMovedPayload,
    EventType.TASK_REORDERED: TaskReorderedPayload,
    EventType.TAG_CREATED: TagPayload,
    EventType.TAG_UPDATED: TagPayload,
    EventType.TAG_DELETED: TagDeletedPayload,
}


def parse_payload(event: Event) -> EventPayload:
    """将事件 payload 校验为对应的类型化模型

    Raises:
        MalformedPayloadError: 事件类型未知或 payload 校验失败
    """
    try:
        model = PAYLOAD_MODELS[EventType(event.event_type)]
    except ValueError:
        raise MalformedPayloadError(
            event.event_type, event.event_id, "unsupported event type"
        ) from None

    try:
        return model.model_validate(event.payload)
    except ValidationError as e:
        reason = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'payload'}: {err['msg']}"
            for err in e.errors()
        )
        raise MalformedPayloadError(event.event_type, event.event_id, reason) from e
