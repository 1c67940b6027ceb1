"""投影引擎异常体系

- EventNotFoundError: 调用方契约违规（致命，不可恢复）
- MalformedPayloadError: 客户端数据问题（可恢复：事件被消费但不产生效果）
"""


class ProjectionError(Exception):
    """投影引擎基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 是否可通过跳过该事件或重建投影恢复
        """
        super().__init__(message)
        self.recoverable = recoverable


class EventNotFoundError(ProjectionError):
    """显式指定的事件不存在

    事件只会在插入之后被引用，找不到说明存储层或调用方存在 bug，
    而不是数据竞争。
    """

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event not found: {event_id}", recoverable=False)
        self.event_id = event_id


class MalformedPayloadError(ProjectionError):
    """payload 校验失败或缺少必需字段

    路由层捕获后记录 warning 并丢弃该事件，不阻塞管线。
    """

    def __init__(self, event_type: str, event_id: str, reason: str) -> None:
        super().__init__(
            f"Malformed payload for {event_type} ({event_id}): {reason}",
            recoverable=True,
        )
        self.event_type = event_type
        self.event_id = event_id
        self.reason = reason
