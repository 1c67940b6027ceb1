"""Tag Projection Model -- tags 表的物化视图行

任务通过 ID 数组引用标签（多对多），删除标签不级联。
"""

from .base import CamelModel


class Tag(CamelModel):
    """标签投影"""

    tag_id: str
    user_id: str
    name: str = "Untitled Tag"
    color: str = "#8E8E93"
    created_at: int
    updated_at: int
    tombstoned: bool = False
    tombstoned_at: int | None = None
    last_event_id: str
