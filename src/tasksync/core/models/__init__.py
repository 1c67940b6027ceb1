"""TaskSync Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import EntityFamily, EventType, Priority, SmartViewType
from .event import Event, EventInput, MediaRef
from .payloads import (
    PAYLOAD_MODELS,
    EventPayload,
    ListDeletedPayload,
    ListPayload,
    ListReorderedPayload,
    TagDeletedPayload,
    TagPayload,
    TaskCompletedPayload,
    TaskDeletedPayload,
    TaskMovedPayload,
    TaskPayload,
    TaskReorderedPayload,
    TaskUncompletedPayload,
    parse_payload,
)
from .results import (
    BatchItemResult,
    IngestResult,
    ProcessResult,
    RebuildResult,
    TaskPage,
)
from .tag import Tag
from .task import Attachment, Location, Recurrence, Subtask, Task
from .task_list import TaskList

__all__ = [
    # 枚举
    "EventType",
    "EntityFamily",
    "Priority",
    "SmartViewType",
    # Event
    "Event",
    "EventInput",
    "MediaRef",
    # Payloads
    "PAYLOAD_MODELS",
    "EventPayload",
    "ListPayload",
    "ListDeletedPayload",
    "ListReorderedPayload",
    "TaskPayload",
    "TaskDeletedPayload",
    "TaskCompletedPayload",
    "TaskUncompletedPayload",
    "TaskMovedPayload",
    "TaskReorderedPayload",
    "TagPayload",
    "TagDeletedPayload",
    "parse_payload",
    # Projections
    "TaskList",
    "Task",
    "Tag",
    "Recurrence",
    "Subtask",
    "Attachment",
    "Location",
    # Results
    "ProcessResult",
    "BatchItemResult",
    "RebuildResult",
    "IngestResult",
    "TaskPage",
]
