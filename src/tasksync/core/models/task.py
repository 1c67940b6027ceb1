"""Task Projection Model -- tasks 表的物化视图行

tasks 表是 events 的物化视图（projection），
所有字段变更必须通过事件投影触发。
"""

from typing import Literal

from pydantic import Field

from .base import CamelModel
from .enums import Priority


class Recurrence(CamelModel):
    """重复规则"""

    frequency: Literal["daily", "weekly", "monthly", "yearly"]
    interval: int = Field(ge=1)
    end_date: str | None = None
    count: int | None = None
    days_of_week: list[int] | None = None


class Subtask(CamelModel):
    """子任务"""

    id: str
    title: str
    completed: bool = False
    sort_order: float = 0


class Attachment(CamelModel):
    """附件元数据（内容由外部媒体子系统存储）"""

    id: str
    type: Literal["image", "file", "voice"]
    url: str
    name: str | None = None
    size: int | None = None
    mime_type: str | None = None


class Location(CamelModel):
    """地点提醒"""

    name: str
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    radius: float | None = None
    trigger_on_entry: bool | None = None
    trigger_on_exit: bool | None = None


class Task(CamelModel):
    """Task 投影

    list_id 为反范式字段：任务计数归属于当前列表。
    tombstoned 为软删除标记，行永不物理删除，以保证迟到的删除事件幂等。
    """

    task_id: str = Field(description="领域 ID（与存储行 ID 无关）")
    user_id: str
    list_id: str
    title: str = "Untitled Task"
    notes: str | None = None
    due_date: str | None = None
    due_time: str | None = None
    priority: Priority = Priority.NONE
    tags: list[str] = Field(default_factory=list, description="标签 ID 列表")
    flag: bool = False
    completed: bool = False
    completed_at: str | None = None
    red_beacon_enabled: bool = False
    mirror_to_calendar: bool = False
    calendar_event_id: str | None = None
    recurrence: Recurrence | None = None
    subtasks: list[Subtask] = Field(default_factory=list)
    attachments: list[Attachment] = Field(default_factory=list)
    location: Location | None = None
    url: str | None = None
    sort_order: float = 0
    created_at: int = Field(description="创建事件的 timestamp（毫秒）")
    updated_at: int = Field(description="最后一次生效事件的 timestamp（毫秒）")
    tombstoned: bool = False
    tombstoned_at: int | None = None
    last_event_id: str
