"""Tests for the dashboard issue endpoints."""

from __future__ import annotations

import sqlite3

import pytest
from httpx import AsyncClient

import issueboard.dashboard as dash_module
from issueboard.dashboard import create_app
from tests.api.conftest import DashboardData


class TestHealth:
    async def test_health(self, client: AsyncClient) -> None:
        resp = await client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "database": "ready"}


class TestListIssues:
    async def test_newest_first(self, client: AsyncClient, dashboard_data: DashboardData) -> None:
        resp = await client.get("/api/issues")
        assert resp.status_code == 200
        ids = dashboard_data.ids
        assert [i["id"] for i in resp.json()] == [ids["export"], ids["dashboard"], ids["login"]]

    async def test_filter(self, client: AsyncClient) -> None:
        resp = await client.get("/api/issues", params={"status": "open", "priority": "high"})
        assert [i["title"] for i in resp.json()] == ["Login button broken"]

    async def test_invalid_filter(self, client: AsyncClient) -> None:
        resp = await client.get("/api/issues", params={"status": "closed"})
        assert resp.status_code == 400
        error = resp.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"] == {"param": "status", "value": "closed"}


class TestCreateIssue:
    async def test_create_reports_similar(self, client: AsyncClient, dashboard_data: DashboardData) -> None:
        resp = await client.post(
            "/api/issues",
            json={"title": "Login button crash", "priority": "high", "created_by": "u-1", "created_by_email": "a@b.c"},
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["issue"]["title"] == "Login button crash"
        assert body["issue"]["status"] == "open"
        assert body["issue"]["created_by"] == "u-1"
        assert body["issue"]["created_by_email"] == "a@b.c"
        assert body["similar"] == [
            {"id": dashboard_data.ids["login"], "title": "Login button broken", "status": "open", "priority": "high"}
        ]

    async def test_missing_creator(self, client: AsyncClient) -> None:
        resp = await client.post("/api/issues", json={"title": "No creator"})
        assert resp.status_code == 400
        assert "created_by" in resp.json()["error"]["message"]

    async def test_missing_title(self, client: AsyncClient) -> None:
        resp = await client.post("/api/issues", json={"created_by": "u"})
        assert resp.status_code == 400

    async def test_invalid_priority(self, client: AsyncClient) -> None:
        resp = await client.post("/api/issues", json={"title": "Bad", "priority": "P0", "created_by": "u"})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_non_string_title(self, client: AsyncClient) -> None:
        resp = await client.post("/api/issues", json={"title": 42, "created_by": "u"})
        assert resp.status_code == 400

    async def test_invalid_json(self, client: AsyncClient) -> None:
        resp = await client.post("/api/issues", content=b"{not json", headers={"content-type": "application/json"})
        assert resp.status_code == 400

    async def test_body_must_be_object(self, client: AsyncClient) -> None:
        resp = await client.post("/api/issues", json=["title"])
        assert resp.status_code == 400


class TestIssueDetail:
    async def test_detail_includes_transitions(self, client: AsyncClient, dashboard_data: DashboardData) -> None:
        resp = await client.get(f"/api/issue/{dashboard_data.ids['login']}")
        assert resp.status_code == 200
        data = resp.json()
        assert data["title"] == "Login button broken"
        assert data["valid_transitions"] == ["in_progress"]

    async def test_not_found(self, client: AsyncClient) -> None:
        resp = await client.get("/api/issue/test-nope")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "ISSUE_NOT_FOUND"


class TestUpdateStatus:
    async def test_open_to_done_conflict(self, client: AsyncClient, dashboard_data: DashboardData) -> None:
        issue_id = dashboard_data.ids["login"]
        resp = await client.put(f"/api/issue/{issue_id}/status", json={"status": "done"})
        assert resp.status_code == 409
        error = resp.json()["error"]
        assert error["code"] == "INVALID_TRANSITION"
        assert error["details"] == {"current": "open", "requested": "done", "valid_transitions": ["in_progress"]}
        assert (await client.get(f"/api/issue/{issue_id}")).json()["status"] == "open"

    async def test_allowed(self, client: AsyncClient, dashboard_data: DashboardData) -> None:
        resp = await client.put(f"/api/issue/{dashboard_data.ids['dashboard']}/status", json={"status": "done"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "done"

    async def test_missing_status(self, client: AsyncClient, dashboard_data: DashboardData) -> None:
        resp = await client.put(f"/api/issue/{dashboard_data.ids['login']}/status", json={})
        assert resp.status_code == 400

    async def test_unknown_status(self, client: AsyncClient, dashboard_data: DashboardData) -> None:
        resp = await client.put(f"/api/issue/{dashboard_data.ids['login']}/status", json={"status": "closed"})
        assert resp.status_code == 400

    async def test_not_found(self, client: AsyncClient) -> None:
        resp = await client.put("/api/issue/test-nope/status", json={"status": "in_progress"})
        assert resp.status_code == 404


class TestUpdatePriority:
    async def test_update(self, client: AsyncClient, dashboard_data: DashboardData) -> None:
        resp = await client.put(f"/api/issue/{dashboard_data.ids['export']}/priority", json={"priority": "high"})
        assert resp.status_code == 200
        assert resp.json()["priority"] == "high"

    async def test_invalid(self, client: AsyncClient, dashboard_data: DashboardData) -> None:
        resp = await client.put(f"/api/issue/{dashboard_data.ids['export']}/priority", json={"priority": "urgent"})
        assert resp.status_code == 400

    async def test_not_found(self, client: AsyncClient) -> None:
        resp = await client.put("/api/issue/test-nope/priority", json={"priority": "low"})
        assert resp.status_code == 404


class TestPatchIssue:
    async def test_patch(self, client: AsyncClient, dashboard_data: DashboardData) -> None:
        resp = await client.patch(
            f"/api/issue/{dashboard_data.ids['login']}",
            json={"title": "Login button unresponsive", "assigned_to": "carol"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["title"] == "Login button unresponsive"
        assert data["assigned_to"] == "carol"

    async def test_write_once_field(self, client: AsyncClient, dashboard_data: DashboardData) -> None:
        resp = await client.patch(f"/api/issue/{dashboard_data.ids['login']}", json={"created_by": "mallory"})
        assert resp.status_code == 400

    async def test_forbidden_transition(self, client: AsyncClient, dashboard_data: DashboardData) -> None:
        resp = await client.patch(f"/api/issue/{dashboard_data.ids['login']}", json={"status": "done"})
        assert resp.status_code == 409


class TestDeleteIssue:
    async def test_delete(self, client: AsyncClient, dashboard_data: DashboardData) -> None:
        issue_id = dashboard_data.ids["export"]
        resp = await client.delete(f"/api/issue/{issue_id}")
        assert resp.status_code == 200
        assert resp.json() == {"deleted": issue_id}
        assert (await client.get(f"/api/issue/{issue_id}")).status_code == 404

    async def test_missing_leaves_others(self, client: AsyncClient) -> None:
        resp = await client.delete("/api/issue/test-nope")
        assert resp.status_code == 404
        assert len((await client.get("/api/issues")).json()) == 3


class TestSimilar:
    async def test_similar(self, client: AsyncClient, dashboard_data: DashboardData) -> None:
        resp = await client.get("/api/similar", params={"title": "Export to Excel"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["total"] == 1
        assert data["similar"][0]["id"] == dashboard_data.ids["export"]

    async def test_short_title(self, client: AsyncClient) -> None:
        data = (await client.get("/api/similar", params={"title": "ab"})).json()
        assert data == {"title": "ab", "similar": [], "total": 0}


class TestTransitions:
    @pytest.mark.parametrize(
        ("status", "expected"),
        [("open", ["in_progress"]), ("in_progress", ["open", "done"]), ("done", ["open", "in_progress"])],
    )
    async def test_transitions(self, client: AsyncClient, status: str, expected: list[str]) -> None:
        resp = await client.get(f"/api/transitions/{status}")
        assert resp.json() == {"status": status, "valid_transitions": expected}

    async def test_unknown(self, client: AsyncClient) -> None:
        assert (await client.get("/api/transitions/closed")).status_code == 400


class TestStoreErrors:
    async def test_store_unavailable_is_503(self, client: AsyncClient, dashboard_data: DashboardData) -> None:
        dashboard_data.store.conn.execute("DROP TABLE issues")
        resp = await client.get("/api/issues")
        assert resp.status_code == 503
        assert resp.json()["error"]["code"] == "STORE_UNAVAILABLE"

    async def test_corrupt_row_is_500(self, client: AsyncClient, dashboard_data: DashboardData) -> None:
        conn: sqlite3.Connection = dashboard_data.store.conn
        conn.execute("UPDATE issues SET created_at = 'garbage' WHERE id = ?", (dashboard_data.ids["login"],))
        conn.commit()
        resp = await client.get(f"/api/issue/{dashboard_data.ids['login']}")
        assert resp.status_code == 500
        assert resp.json()["error"]["code"] == "DECODE_ERROR"

    async def test_corrupt_row_does_not_block_create(
        self, client: AsyncClient, dashboard_data: DashboardData
    ) -> None:
        conn: sqlite3.Connection = dashboard_data.store.conn
        conn.execute("UPDATE issues SET created_at = 'garbage' WHERE id = ?", (dashboard_data.ids["login"],))
        conn.commit()
        resp = await client.post("/api/issues", json={"title": "Login button crash", "created_by": "u"})
        assert resp.status_code == 201
        assert resp.json()["similar"] == []

    async def test_no_store(self) -> None:
        from httpx import ASGITransport

        dash_module._store = None
        transport = ASGITransport(app=create_app())
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            resp = await c.get("/api/issues")
            assert resp.status_code == 500
            health = await c.get("/api/health")
            assert health.json()["database"] == "missing"
