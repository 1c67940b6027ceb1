"""TaskList Projection Model -- task_lists 表的物化视图行"""

from pydantic import Field

from .base import CamelModel


class TaskList(CamelModel):
    """列表投影

    task_count / completed_task_count 是派生值缓存：
    随任务事件增量维护，rebuild 时从 tasks 表全量重算。
    """

    list_id: str = Field(description="领域 ID")
    user_id: str
    name: str = "Untitled List"
    color: str = "#007AFF"
    icon: str = "list.bullet"
    sort_order: float = 0
    smart_list: bool | None = None
    smart_list_type: str | None = None
    task_count: int = Field(default=0, ge=0)
    completed_task_count: int = Field(default=0, ge=0)
    created_at: int
    updated_at: int
    tombstoned: bool = False
    tombstoned_at: int | None = None
    last_event_id: str
