"""统计 API 测试"""

from datetime import date, datetime

import pytest
from pracsphere.gateway import deps

ALICE = {"X-Forwarded-Email": "alice@example.com"}
BOB = {"X-Forwarded-Email": "bob@example.com"}
FIXED_NOW = datetime(2026, 1, 18, 21, 45)


@pytest.fixture
def fixed_now(app):
    app.dependency_overrides[deps.get_now] = lambda: FIXED_NOW
    yield FIXED_NOW
    app.dependency_overrides.clear()


async def _create(client, title, due, priority="medium", headers=ALICE):
    resp = await client.post(
        "/api/tasks",
        data={
            "title": title,
            "description": f"{title} notes",
            "dueDate": due,
            "priority": priority,
        },
        headers=headers,
    )
    assert resp.status_code == 201
    return resp.json()["task_id"]


async def _complete(client, task_id):
    resp = await client.patch(
        f"/api/tasks/{task_id}", json={"status": "completed"}, headers=ALICE
    )
    assert resp.status_code == 200


async def _seed(client):
    await _create(client, "A", "2026-01-18", "high")
    await _create(client, "B", "2026-01-25")
    await _create(client, "D", "2026-01-10")
    await _complete(client, await _create(client, "E", "2026-01-01", "high"))
    await _complete(client, await _create(client, "F", "2026-01-30", "low"))
    # 其他用户的任务不参与统计
    await _create(client, "Z", "2025-12-01", "high", headers=BOB)


class TestAnalytics:
    async def test_requires_identity(self, client):
        resp = await client.get("/api/analytics")
        assert resp.status_code == 401

    async def test_empty(self, client, fixed_now):
        resp = await client.get("/api/analytics", headers=ALICE)
        assert resp.status_code == 200
        body = resp.json()
        assert body["total_tasks"] == 0
        assert body["completion_rate"] == 0
        assert body["productivity_score"] == 0

    async def test_statistics(self, client, fixed_now):
        await _seed(client)

        body = (await client.get("/api/analytics", headers=ALICE)).json()
        assert body["total_tasks"] == 5
        assert body["completed_tasks"] == 2
        assert body["pending_tasks"] == 3
        assert body["overdue_tasks"] == 1
        assert body["completion_rate"] == 40
        assert body["today_tasks"] == 1
        assert body["week_tasks"] == 2
        assert body["high_priority"] == 1
        assert body["medium_priority"] == 2
        assert body["low_priority"] == 0
        assert body["productivity_score"] == 16

    async def test_dashboard(self, client, fixed_now):
        await _seed(client)

        body = (await client.get("/api/analytics/dashboard", headers=ALICE)).json()
        assert body["statistics"]["total_tasks"] == 5
        assert [t["title"] for t in body["upcoming"]] == ["D", "A", "B"]
        assert {t["title"] for t in body["recent_completed"]} == {"E", "F"}
        assert [t["title"] for t in body["high_priority_tasks"]] == ["A"]

    async def test_status_counts(self, client, fixed_now):
        await _seed(client)

        body = (await client.get("/api/analytics/status-counts", headers=ALICE)).json()
        assert body == {"all": 5, "pending": 3, "completed": 2, "overdue": 1}


class TestTimezone:
    def test_get_now_uses_configured_zone(self, app):
        from pracsphere.gateway.config import GatewayConfig

        app.state.gateway_config = GatewayConfig(timezone="Asia/Tokyo")

        class _Request:
            pass

        request = _Request()
        request.app = app
        now = deps.get_now(request)
        assert now.utcoffset().total_seconds() == 9 * 3600
        assert isinstance(now.date(), date)
