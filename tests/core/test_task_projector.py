"""Task 投影器测试

测试内容：
1. 创建 / update-before-create / 缺 listId 丢弃
2. 部分更新与可空字段清空
3. 完成/取消完成与 completedAt 推导
4. 移动（显式 moved 与隐式 listId 变更）的计数调整
5. 删除与墓碑
"""

from tasksync.core.models import Priority
from tasksync.core.store import StoreGroup


async def _counts(store_group: StoreGroup, list_id: str) -> tuple[int, int]:
    task_list = await store_group.list_store.get_list(list_id)
    return task_list.task_count, task_list.completed_task_count


class TestTaskCreate:
    async def test_created_with_defaults(self, emit, store_group: StoreGroup):
        await emit("tasks.list.created", {"listId": "L1"}, 100)
        await emit(
            "tasks.task.created",
            {"taskId": "T1", "listId": "L1", "title": "Buy milk"},
            200,
        )

        task = await store_group.task_store.get_task("T1")
        assert task.title == "Buy milk"
        assert task.priority == Priority.NONE
        assert task.tags == []
        assert task.flag is False
        assert task.completed is False
        assert task.completed_at is None
        assert task.created_at == 200
        assert await _counts(store_group, "L1") == (1, 0)

    async def test_created_completed_counts_both(self, emit, store_group):
        await emit("tasks.list.created", {"listId": "L1"}, 100)
        await emit(
            "tasks.task.created",
            {"taskId": "T1", "listId": "L1", "completed": True},
            200,
        )

        task = await store_group.task_store.get_task("T1")
        assert task.completed_at == "1970-01-01T00:00:00.200Z"
        assert await _counts(store_group, "L1") == (1, 1)

    async def test_created_without_list_id_is_dropped(self, emit, store_group):
        await emit("tasks.task.created", {"taskId": "T1", "title": "Orphan"}, 100)
        assert await store_group.task_store.get_task("T1") is None

    async def test_updated_before_created_with_list_id_creates(self, emit, store_group):
        await emit("tasks.list.created", {"listId": "L1"}, 100)
        await emit(
            "tasks.task.updated",
            {"taskId": "T1", "listId": "L1", "title": "Early"},
            200,
        )

        task = await store_group.task_store.get_task("T1")
        assert task.title == "Early"
        assert await _counts(store_group, "L1") == (1, 0)

    async def test_updated_before_created_without_list_id_is_dropped(
        self, emit, store_group
    ):
        await emit("tasks.task.updated", {"taskId": "T1", "title": "Early"}, 200)
        assert await store_group.task_store.get_task("T1") is None

    async def test_duplicate_created_does_not_double_count(self, emit, store_group):
        await emit("tasks.list.created", {"listId": "L1"}, 100)
        await emit("tasks.task.created", {"taskId": "T1", "listId": "L1"}, 200)
        await emit(
            "tasks.task.created",
            {"taskId": "T1", "listId": "L1", "title": "Retried"},
            250,
        )

        task = await store_group.task_store.get_task("T1")
        assert task.title == "Retried"
        assert await _counts(store_group, "L1") == (1, 0)

    async def test_task_for_missing_list_is_still_projected(self, emit, store_group):
        await emit("tasks.task.created", {"taskId": "T1", "listId": "nowhere"}, 100)

        task = await store_group.task_store.get_task("T1")
        assert task.list_id == "nowhere"


class TestTaskUpdate:
    async def test_partial_update_and_null_clear(self, emit, store_group):
        await emit(
            "tasks.task.created",
            {
                "taskId": "T1",
                "listId": "L1",
                "title": "Report",
                "notes": "draft",
                "dueDate": "2026-03-01",
                "tags": ["work"],
            },
            100,
        )
        await emit(
            "tasks.task.updated",
            {"taskId": "T1", "notes": None, "priority": "high"},
            200,
        )

        task = await store_group.task_store.get_task("T1")
        assert task.title == "Report"
        assert task.notes is None
        assert task.due_date == "2026-03-01"
        assert task.priority == Priority.HIGH
        assert task.tags == ["work"]
        assert task.updated_at == 200

    async def test_stale_update_is_noop(self, emit, store_group):
        await emit("tasks.task.created", {"taskId": "T1", "listId": "L1", "title": "A"}, 300)
        await emit("tasks.task.updated", {"taskId": "T1", "title": "B"}, 200)

        task = await store_group.task_store.get_task("T1")
        assert task.title == "A"

    async def test_list_id_change_is_implicit_move(self, emit, store_group):
        await emit("tasks.list.created", {"listId": "A"}, 100)
        await emit("tasks.list.created", {"listId": "B"}, 100)
        await emit(
            "tasks.task.created",
            {"taskId": "T1", "listId": "A", "completed": True},
            200,
        )
        await emit(
            "tasks.task.updated",
            {"taskId": "T1", "listId": "B", "title": "Moved"},
            300,
        )

        assert await _counts(store_group, "A") == (0, 0)
        assert await _counts(store_group, "B") == (1, 1)
        task = await store_group.task_store.get_task("T1")
        assert task.title == "Moved"

    async def test_completed_flag_in_update_adjusts_counts(self, emit, store_group):
        await emit("tasks.list.created", {"listId": "L1"}, 100)
        await emit("tasks.task.created", {"taskId": "T1", "listId": "L1"}, 200)
        await emit("tasks.task.updated", {"taskId": "T1", "completed": True}, 300)

        task = await store_group.task_store.get_task("T1")
        assert task.completed_at == "1970-01-01T00:00:00.300Z"
        assert await _counts(store_group, "L1") == (1, 1)


class TestTaskCompletion:
    async def test_complete_and_uncomplete(self, emit, store_group):
        await emit("tasks.list.created", {"listId": "L1"}, 100)
        await emit("tasks.task.created", {"taskId": "T1", "listId": "L1"}, 200)
        await emit("tasks.task.completed", {"taskId": "T1"}, 300)

        task = await store_group.task_store.get_task("T1")
        assert task.completed is True
        assert task.completed_at == "1970-01-01T00:00:00.300Z"
        assert await _counts(store_group, "L1") == (1, 1)

        await emit("tasks.task.uncompleted", {"taskId": "T1"}, 400)

        task = await store_group.task_store.get_task("T1")
        assert task.completed is False
        assert task.completed_at is None
        assert await _counts(store_group, "L1") == (1, 0)

    async def test_completed_at_from_payload(self, emit, store_group):
        await emit("tasks.task.created", {"taskId": "T1", "listId": "L1"}, 200)
        await emit(
            "tasks.task.completed",
            {"taskId": "T1", "completedAt": "2026-01-02T03:04:05.000Z"},
            300,
        )

        task = await store_group.task_store.get_task("T1")
        assert task.completed_at == "2026-01-02T03:04:05.000Z"

    async def test_repeated_completion_counts_once(self, emit, store_group):
        await emit("tasks.list.created", {"listId": "L1"}, 100)
        await emit("tasks.task.created", {"taskId": "T1", "listId": "L1"}, 200)
        await emit("tasks.task.completed", {"taskId": "T1"}, 300)
        await emit("tasks.task.completed", {"taskId": "T1"}, 400)

        assert await _counts(store_group, "L1") == (1, 1)

    async def test_completion_never_creates(self, emit, store_group):
        await emit("tasks.task.completed", {"taskId": "T1"}, 300)
        assert await store_group.task_store.get_task("T1") is None


class TestTaskMoveAndReorder:
    async def test_moved_adjusts_both_lists(self, emit, store_group):
        await emit("tasks.list.created", {"listId": "A"}, 100)
        await emit("tasks.list.created", {"listId": "B"}, 100)
        await emit("tasks.task.created", {"taskId": "T1", "listId": "A"}, 200)
        await emit("tasks.task.completed", {"taskId": "T1"}, 250)
        await emit(
            "tasks.task.moved",
            {"taskId": "T1", "listId": "B", "sortOrder": 2},
            300,
        )

        task = await store_group.task_store.get_task("T1")
        assert task.list_id == "B"
        assert task.sort_order == 2
        assert await _counts(store_group, "A") == (0, 0)
        assert await _counts(store_group, "B") == (1, 1)

    async def test_moved_within_same_list_only_reorders(self, emit, store_group):
        await emit("tasks.list.created", {"listId": "A"}, 100)
        await emit("tasks.task.created", {"taskId": "T1", "listId": "A"}, 200)
        await emit("tasks.task.moved", {"taskId": "T1", "listId": "A", "sortOrder": 5}, 300)

        task = await store_group.task_store.get_task("T1")
        assert task.sort_order == 5
        assert await _counts(store_group, "A") == (1, 0)

    async def test_stale_move_is_noop(self, emit, store_group):
        await emit("tasks.list.created", {"listId": "A"}, 100)
        await emit("tasks.list.created", {"listId": "B"}, 100)
        await emit("tasks.task.created", {"taskId": "T1", "listId": "A"}, 300)
        await emit("tasks.task.moved", {"taskId": "T1", "listId": "B"}, 200)

        task = await store_group.task_store.get_task("T1")
        assert task.list_id == "A"
        assert await _counts(store_group, "A") == (1, 0)
        assert await _counts(store_group, "B") == (0, 0)

    async def test_moved_never_creates(self, emit, store_group):
        await emit("tasks.task.moved", {"taskId": "T1", "listId": "B"}, 300)
        assert await store_group.task_store.get_task("T1") is None

    async def test_reordered(self, emit, store_group):
        await emit("tasks.task.created", {"taskId": "T1", "listId": "A"}, 200)
        await emit("tasks.task.reordered", {"taskId": "T1", "sortOrder": 7.25}, 300)

        task = await store_group.task_store.get_task("T1")
        assert task.sort_order == 7.25


class TestTaskDelete:
    async def test_delete_decrements_counts(self, emit, store_group):
        await emit("tasks.list.created", {"listId": "L1"}, 100)
        await emit(
            "tasks.task.created",
            {"taskId": "T1", "listId": "L1", "completed": True},
            200,
        )
        await emit("tasks.task.deleted", {"taskId": "T1"}, 300)

        task = await store_group.task_store.get_task("T1")
        assert task.tombstoned is True
        assert task.tombstoned_at == 300
        assert await _counts(store_group, "L1") == (0, 0)

    async def test_delete_missing_task_is_noop(self, emit, store_group):
        await emit("tasks.task.deleted", {"taskId": "ghost"}, 300)
        assert await store_group.task_store.get_task("ghost") is None

    async def test_changes_on_tombstoned_task_do_not_touch_counts(self, emit, store_group):
        await emit("tasks.list.created", {"listId": "L1"}, 100)
        await emit("tasks.task.created", {"taskId": "T1", "listId": "L1"}, 200)
        await emit("tasks.task.deleted", {"taskId": "T1"}, 300)
        await emit("tasks.task.completed", {"taskId": "T1"}, 400)
        await emit("tasks.task.deleted", {"taskId": "T1"}, 500)

        task = await store_group.task_store.get_task("T1")
        assert task.tombstoned is True
        assert task.tombstoned_at == 300
        assert await _counts(store_group, "L1") == (0, 0)
