"""事件入口 API 测试

测试内容：
1. 缺少用户身份返回 401
2. 缺少 consentSnapshotId 返回 422
3. 写入成功 + 重复事件计入 processed
4. 后台投影完成后可查询
"""

from httpx import AsyncClient

USER_HEADERS = {"X-User-Id": "user-1", "X-Device-Id": "device-1"}


def _event(event_id: str, event_type: str, timestamp: int, **payload) -> dict:
    return {
        "eventId": event_id,
        "timestamp": timestamp,
        "eventType": event_type,
        "payload": payload,
    }


class TestEventBatch:
    async def test_missing_user_returns_401(self, client: AsyncClient):
        resp = await client.post(
            "/api/events/batch",
            json={
                "events": [_event("e1", "tasks.list.created", 100, listId="L1")],
                "consentSnapshotId": "consent-1",
            },
        )
        assert resp.status_code == 401
        assert resp.json()["error"]["code"] == "UNAUTHORIZED"

    async def test_missing_consent_returns_422(self, client: AsyncClient):
        resp = await client.post(
            "/api/events/batch",
            json={"events": [_event("e1", "tasks.list.created", 100, listId="L1")]},
            headers=USER_HEADERS,
        )
        assert resp.status_code == 422

    async def test_batch_is_acknowledged_and_projected(self, client, sync_events):
        data = await sync_events(
            [
                _event("e1", "tasks.list.created", 100, listId="L1", name="Home"),
                _event("e2", "tasks.task.created", 200, taskId="T1", listId="L1", title="Buy milk"),
            ]
        )

        assert data == {
            "success": True,
            "processed": 2,
            "failed": 0,
            "eventIds": ["e1", "e2"],
        }

        resp = await client.get("/api/lists/L1", headers=USER_HEADERS)
        assert resp.status_code == 200
        task_list = resp.json()["list"]
        assert task_list["name"] == "Home"
        assert task_list["taskCount"] == 1

    async def test_duplicate_events_are_acknowledged(self, client, sync_events):
        events = [_event("e1", "tasks.list.created", 100, listId="L1")]
        await sync_events(events)

        data = await sync_events(events)

        assert data["processed"] == 1
        assert data["eventIds"] == ["e1"]

    async def test_bad_payload_does_not_fail_batch(self, client, sync_events):
        data = await sync_events(
            [
                _event("e1", "tasks.task.created", 100, taskId="T1"),
                _event("e2", "tasks.tag.created", 110, tagId="G1", name="work"),
            ]
        )

        assert data["processed"] == 2
        resp = await client.get("/api/tags", headers=USER_HEADERS)
        assert [t["tagId"] for t in resp.json()["tags"]] == ["G1"]
        resp = await client.get("/api/tasks/T1", headers=USER_HEADERS)
        assert resp.status_code == 404

    async def test_device_id_recorded(self, test_app, sync_events):
        await sync_events(
            [_event("e1", "tasks.list.created", 100, listId="L1")],
            headers={"X-User-Id": "user-1"},
        )

        event = await test_app.state.store_group.event_store.get_event("e1")
        assert event.device_id == "unknown"
        assert event.consent_snapshot_id == "consent-1"
