"""事件入口测试

测试内容：
1. 新事件写入并返回 inserted_ids
2. 重复 event_id 跳过但计入 processed
3. 同一批次共用 server_timestamp
4. 入口不做投影
"""

import pytest
from tasksync.core.ingest import IngestService
from tasksync.core.models import EventInput
from tasksync.core.store import StoreGroup


@pytest.fixture
def ingest(store_group: StoreGroup) -> IngestService:
    return IngestService(store_group)


def _input(event_id: str, event_type: str = "tasks.list.created", **payload) -> EventInput:
    return EventInput(
        event_id=event_id,
        timestamp=100,
        event_type=event_type,
        payload=payload or {"listId": "L1"},
    )


async def _insert(ingest: IngestService, events: list[EventInput]):
    return await ingest.insert_event_batch(
        user_id="user-1",
        device_id="device-1",
        app_id="com.orion.tasks",
        events=events,
        consent_snapshot_id="consent-1",
    )


class TestIngest:
    async def test_new_events_are_stored(self, ingest, store_group):
        result = await _insert(ingest, [_input("e1"), _input("e2", listId="L2")])

        assert result.processed == 2
        assert result.failed == 0
        assert result.event_ids == ["e1", "e2"]
        assert result.inserted_ids == ["e1", "e2"]

        stored = await store_group.event_store.get_event("e1")
        assert stored.user_id == "user-1"
        assert stored.device_id == "device-1"
        assert stored.consent_snapshot_id == "consent-1"

    async def test_duplicates_count_as_processed(self, ingest):
        await _insert(ingest, [_input("e1")])

        result = await _insert(ingest, [_input("e1"), _input("e2")])

        assert result.processed == 2
        assert result.event_ids == ["e1", "e2"]
        assert result.inserted_ids == ["e2"]

    async def test_duplicate_within_one_batch(self, ingest):
        result = await _insert(ingest, [_input("e1"), _input("e1")])

        assert result.processed == 2
        assert result.inserted_ids == ["e1"]

    async def test_batch_shares_server_timestamp(self, ingest, store_group):
        await _insert(ingest, [_input("e1"), _input("e2")])

        first = await store_group.event_store.get_event("e1")
        second = await store_group.event_store.get_event("e2")
        assert first.server_timestamp == second.server_timestamp
        assert first.server_timestamp > 0

    async def test_unknown_event_types_are_kept(self, ingest, store_group):
        result = await _insert(ingest, [_input("e1", "reminders.alarm.fired", alarmId="a")])

        assert result.inserted_ids == ["e1"]
        assert (await store_group.event_store.get_event("e1")).event_type == (
            "reminders.alarm.fired"
        )

    async def test_ingest_does_not_project(self, ingest, store_group):
        await _insert(ingest, [_input("e1")])
        assert await store_group.list_store.get_list("L1") is None

    async def test_write_failure_is_counted(self, ingest, store_group, monkeypatch):
        original = store_group.event_store.append_event

        async def _flaky(event):
            if event.event_id == "bad":
                raise RuntimeError("disk full")
            await original(event)

        monkeypatch.setattr(store_group.event_store, "append_event", _flaky)

        result = await _insert(ingest, [_input("ok"), _input("bad")])

        assert result.processed == 1
        assert result.failed == 1
        assert result.inserted_ids == ["ok"]
        assert await store_group.event_store.event_exists("bad") is False
