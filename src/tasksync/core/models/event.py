"""Event Domain Model -- 事件日志记录

事件表 append-only，不允许更新或删除。
event_id 由客户端生成，全局唯一，作为幂等键。
timestamp 为客户端逻辑时间（毫秒），所有排序与冲突判断都基于它；
server_timestamp 仅用于审计。
"""

from typing import Any

from pydantic import Field

from .base import CamelModel


class MediaRef(CamelModel):
    """二进制附件引用（由外部媒体子系统管理）"""

    id: str
    type: str
    storage_id: str | None = None
    url: str | None = None


class EventInput(CamelModel):
    """客户端提交的事件（入口边界 -> 事件日志）"""

    event_id: str = Field(min_length=1, description="客户端生成的全局唯一 ID")
    timestamp: int = Field(ge=0, description="客户端逻辑时间（毫秒）")
    event_type: str = Field(min_length=1, description="点分事件类型")
    schema_version: int = Field(default=1, description="payload 版本")
    payload: dict[str, Any] = Field(default_factory=dict)
    media_refs: list[MediaRef] | None = None


class Event(CamelModel):
    """已落盘事件 -- 投影引擎的唯一输入"""

    event_id: str = Field(description="幂等键")
    user_id: str
    device_id: str
    app_id: str
    timestamp: int = Field(description="客户端逻辑时间（毫秒），用于 LWW 判定")
    server_timestamp: int = Field(description="服务端接收时间（毫秒），仅审计")
    event_type: str
    schema_version: int = 1
    payload: dict[str, Any] = Field(default_factory=dict)
    media_refs: list[MediaRef] | None = None
    consent_snapshot_id: str = ""
