"""事件路由 -- 按事件类型前缀分发到投影器族

- tasks.list. -> ListProjector
- tasks.task. -> TaskProjector
- tasks.tag.  -> TagProjector

未知前缀或未知动作只记录 warning 并视为已处理（向前兼容更新版本的客户端）。
非法 payload 记录 warning 后丢弃，不阻塞管线。
"""

import structlog

from ..exceptions import MalformedPayloadError
from ..models.enums import EntityFamily
from ..models.event import Event
from ..models.payloads import PAYLOAD_MODELS, parse_payload
from .base import EntityProjector, ProjectionContext, RouteOutcome
from .lists import ListProjector
from .tags import TagProjector
from .tasks import TaskProjector

log = structlog.get_logger()

_PROJECTORS: dict[EntityFamily, type[EntityProjector]] = {
    EntityFamily.LIST: ListProjector,
    EntityFamily.TASK: TaskProjector,
    EntityFamily.TAG: TagProjector,
}


def resolve_family(event_type: str) -> EntityFamily | None:
    """根据事件类型前缀确定投影器族"""
    for family in EntityFamily:
        if event_type.startswith(family.value):
            return family
    return None


async def route_event(ctx: ProjectionContext, event: Event) -> RouteOutcome:
    """将一个已落盘事件应用到对应投影

    调用方负责事务边界；投影器内部抛出的非 payload 异常原样向上传播。
    """
    family = resolve_family(event.event_type)
    if family is None:
        log.warning(
            "unknown_event_family",
            event_id=event.event_id,
            event_type=event.event_type,
        )
        return RouteOutcome.IGNORED

    if event.event_type not in PAYLOAD_MODELS:
        log.warning(
            "unknown_event_action",
            event_id=event.event_id,
            event_type=event.event_type,
        )
        return RouteOutcome.IGNORED

    action = event.event_type[len(family.value) :]
    projector = _PROJECTORS[family](ctx)
    try:
        payload = parse_payload(event)
        outcome = await projector.apply(event, action, payload)
    except MalformedPayloadError as e:
        log.warning(
            "malformed_payload_dropped",
            event_id=event.event_id,
            event_type=event.event_type,
            reason=e.reason,
        )
        return RouteOutcome.DROPPED

    log.debug(
        "event_projected",
        event_id=event.event_id,
        event_type=event.event_type,
        outcome=outcome.value,
    )
    return outcome
