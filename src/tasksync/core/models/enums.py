"""枚举定义 -- 事件类型、优先级、智能视图

事件类型采用点分命名空间：<app>.<entity>.<action>，
前两段决定投影器族（tasks.list / tasks.task / tasks.tag）。
"""

from enum import StrEnum


class EventType(StrEnum):
    """已知事件类型

    事件日志本身接受任意字符串类型（向前兼容更新版本的客户端），
    此枚举仅列出投影引擎能够处理的类型。
    """

    LIST_CREATED = "tasks.list.created"
    LIST_UPDATED = "tasks.list.updated"
    LIST_DELETED = "tasks.list.deleted"
    LIST_REORDERED = "tasks.list.reordered"

    TASK_CREATED = "tasks.task.created"
    TASK_UPDATED = "tasks.task.updated"
    TASK_DELETED = "tasks.task.deleted"
    TASK_COMPLETED = "tasks.task.completed"
    TASK_UNCOMPLETED = "tasks.task.uncompleted"
    TASK_MOVED = "tasks.task.moved"
    TASK_REORDERED = "tasks.task.reordered"

    TAG_CREATED = "tasks.tag.created"
    TAG_UPDATED = "tasks.tag.updated"
    TAG_DELETED = "tasks.tag.deleted"


class EntityFamily(StrEnum):
    """投影器族 -- 对应事件类型的前缀"""

    LIST = "tasks.list."
    TASK = "tasks.task."
    TAG = "tasks.tag."


class Priority(StrEnum):
    """任务优先级"""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def weight(self) -> int:
        """排序权重，数值越大越靠前"""
        return _PRIORITY_WEIGHTS[self]


_PRIORITY_WEIGHTS: dict[Priority, int] = {
    Priority.NONE: 0,
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
}


class SmartViewType(StrEnum):
    """智能视图类型"""

    TODAY = "today"
    SCHEDULED = "scheduled"
    FLAGGED = "flagged"
    COMPLETED = "completed"
    ALL = "all"
