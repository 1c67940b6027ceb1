"""事件路由测试

测试内容：
1. 前缀分发到对应投影器族
2. 未知族 / 未知动作视为已处理
3. 非法 payload 丢弃
"""

from tasksync.core.projection import ProjectionContext, RouteOutcome, route_event
from tasksync.core.projection.router import resolve_family
from tasksync.core.models import EntityFamily
from tasksync.core.store import StoreGroup


class TestResolveFamily:
    def test_known_prefixes(self):
        assert resolve_family("tasks.list.created") == EntityFamily.LIST
        assert resolve_family("tasks.task.moved") == EntityFamily.TASK
        assert resolve_family("tasks.tag.deleted") == EntityFamily.TAG

    def test_unknown_prefix(self):
        assert resolve_family("notes.note.created") is None
        assert resolve_family("tasks.lists.created") is None


class TestRouteEvent:
    async def test_applied_then_stale(self, store_group: StoreGroup, make_event):
        ctx = ProjectionContext(store_group)
        event = make_event("tasks.list.created", {"listId": "L1"}, 100)

        assert await route_event(ctx, event) == RouteOutcome.APPLIED
        assert await route_event(ctx, event) == RouteOutcome.STALE

    async def test_unknown_family_is_ignored(self, store_group, make_event):
        ctx = ProjectionContext(store_group)
        event = make_event("calendar.event.created", {"id": "x"}, 100)
        assert await route_event(ctx, event) == RouteOutcome.IGNORED

    async def test_unknown_action_is_ignored(self, store_group, make_event):
        ctx = ProjectionContext(store_group)
        event = make_event("tasks.task.archived", {"taskId": "T1"}, 100)
        assert await route_event(ctx, event) == RouteOutcome.IGNORED

    async def test_malformed_payload_is_dropped(self, store_group, make_event):
        ctx = ProjectionContext(store_group)
        event = make_event("tasks.list.created", {"name": "no id"}, 100)
        assert await route_event(ctx, event) == RouteOutcome.DROPPED

    async def test_task_without_list_is_dropped(self, store_group, make_event):
        ctx = ProjectionContext(store_group)
        event = make_event("tasks.task.created", {"taskId": "T1"}, 100)
        assert await route_event(ctx, event) == RouteOutcome.DROPPED

    async def test_missing_target_is_ignored(self, store_group, make_event):
        ctx = ProjectionContext(store_group)
        event = make_event("tasks.task.deleted", {"taskId": "T1"}, 100)
        assert await route_event(ctx, event) == RouteOutcome.IGNORED
