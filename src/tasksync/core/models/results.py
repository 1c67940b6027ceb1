"""处理结果模型 -- 驱动器、入口与查询层的结构化返回值"""

from pydantic import Field

from .base import CamelModel
from .task import Task


class ProcessResult(CamelModel):
    """单事件处理确认"""

    processed: bool
    event_type: str


class BatchItemResult(CamelModel):
    """批处理中单个事件的结果"""

    event_id: str
    processed: bool
    error: str | None = None


class RebuildResult(CamelModel):
    """重建统计"""

    processed: int = 0
    errors: int = 0
    total: int = 0


class IngestResult(CamelModel):
    """批量写入事件日志的结果

    重复 event_id 被跳过但仍计入 processed（客户端确认语义）；
    inserted_ids 仅包含本次新写入、需要投影的事件。
    """

    processed: int = 0
    failed: int = 0
    event_ids: list[str] = Field(default_factory=list)
    inserted_ids: list[str] = Field(default_factory=list)


class TaskPage(CamelModel):
    """分页任务查询结果"""

    tasks: list[Task]
    next_cursor: str | None = None
    total_count: int
