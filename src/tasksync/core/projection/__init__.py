"""TaskSync Projection -- 事件路由、实体投影器、计数维护与驱动器"""

from .base import ProjectionContext, RouteOutcome
from .counters import CounterMaintainer
from .engine import ProjectionEngine
from .router import route_event

__all__ = [
    "ProjectionContext",
    "RouteOutcome",
    "CounterMaintainer",
    "ProjectionEngine",
    "route_event",
]
