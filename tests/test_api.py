"""Tests for the HTTP surface."""

import pytest
from httpx import AsyncClient

from conftest import ADMIN_HEADERS, TECH_HEADERS, USER_HEADERS

REPORT_BODY = {
    "location": "Room 101",
    "problemType": "electrical",
    "problemDetails": "Socket sparks when plugged in",
    "images": ["data:image/jpeg;base64,/9j/4AAQ"],
}


async def sign_in_everyone(client: AsyncClient) -> None:
    for headers in (ADMIN_HEADERS, TECH_HEADERS, USER_HEADERS):
        response = await client.post("/session", headers=headers)
        assert response.status_code == 200


async def file_report(client: AsyncClient, **overrides) -> dict:
    response = await client.post(
        "/reports", json={**REPORT_BODY, **overrides}, headers=USER_HEADERS
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.integration
@pytest.mark.asyncio
class TestSessionEndpoint:

    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_first_admin_sign_in(self, client: AsyncClient):
        response = await client.post("/session", headers=ADMIN_HEADERS)

        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "admin"
        assert data["user"]["id"] == "admin1"
        assert data["user"]["displayName"] == "Admin"
        assert "createdAt" in data["user"]

    async def test_missing_principal(self, client: AsyncClient):
        response = await client.post("/session")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "HTTP_401"


@pytest.mark.integration
@pytest.mark.asyncio
class TestReportEndpoints:

    async def test_end_to_end(self, client: AsyncClient):
        await sign_in_everyone(client)

        # File
        report = await file_report(client)
        assert report["status"] == "pending"
        assert report["assignedTo"] is None
        assert report["hiddenFromAdmin"] is False
        assert report["reporterId"] == "user1"

        # Assign, then assign again
        response = await client.post(
            f"/reports/{report['id']}/assign",
            json={"technicianId": "tech1", "technicianName": "Somchai"},
            headers=ADMIN_HEADERS,
        )
        assert response.status_code == 200
        assigned = response.json()
        assert assigned["assignedTo"] == "tech1"
        assert assigned["assignedBy"] == "admin1"

        response = await client.post(
            f"/reports/{report['id']}/assign",
            json={"technicianId": "tech1", "technicianName": "Somchai"},
            headers=ADMIN_HEADERS,
        )
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ALREADY_ASSIGNED"

        # Technician sees it in their queue and completes it directly
        response = await client.get("/reports/assigned", headers=TECH_HEADERS)
        assert [r["id"] for r in response.json()] == [report["id"]]

        response = await client.patch(
            f"/reports/{report['id']}/status",
            json={"status": "completed"},
            headers=TECH_HEADERS,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "completed"
        assert response.json()["assignedAt"] == assigned["assignedAt"]

        # Hide
        response = await client.delete(f"/reports/{report['id']}", headers=ADMIN_HEADERS)
        assert response.status_code == 200
        assert response.json()["hiddenFromAdmin"] is True

        response = await client.get("/reports", headers=ADMIN_HEADERS)
        assert response.json() == []

        response = await client.get("/reports/mine", headers=USER_HEADERS)
        mine = response.json()
        assert [r["id"] for r in mine] == [report["id"]]
        assert mine[0]["hiddenFromAdmin"] is True

    async def test_validation_error_lists_fields(self, client: AsyncClient):
        response = await client.post(
            "/reports",
            json={**REPORT_BODY, "location": "", "images": []},
            headers=USER_HEADERS,
        )

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["fields"] == ["location", "images"]

    async def test_null_field_is_missing(self, client: AsyncClient):
        response = await client.post(
            "/reports", json={**REPORT_BODY, "location": None}, headers=USER_HEADERS
        )

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["fields"] == ["location"]

    async def test_null_fields_listed_together(self, client: AsyncClient):
        response = await client.post(
            "/reports",
            json={"location": "Lab", "problemType": None, "problemDetails": None, "images": None},
            headers=USER_HEADERS,
        )

        assert response.status_code == 422
        assert response.json()["error"]["details"]["fields"] == [
            "problemType", "problemDetails", "images",
        ]

    async def test_list_filtered_by_status_and_search(self, client: AsyncClient):
        await sign_in_everyone(client)
        lab = await file_report(client, location="Chemistry Lab", problemType="plumbing")
        hall = await file_report(client, location="Main Hall")
        await client.patch(
            f"/reports/{hall['id']}/status",
            json={"status": "completed"},
            headers=TECH_HEADERS,
        )

        response = await client.get(
            "/reports", params={"status": "completed"}, headers=ADMIN_HEADERS
        )
        assert [r["id"] for r in response.json()] == [hall["id"]]

        response = await client.get(
            "/reports", params={"search": "PLUMB"}, headers=ADMIN_HEADERS
        )
        assert [r["id"] for r in response.json()] == [lab["id"]]

        response = await client.get(
            "/reports", params={"search": "reporter"}, headers=ADMIN_HEADERS
        )
        assert [r["id"] for r in response.json()] == [hall["id"], lab["id"]]

        response = await client.get(
            "/reports",
            params={"status": "completed", "search": "zzz"},
            headers=ADMIN_HEADERS,
        )
        assert response.json() == []

    async def test_list_unknown_status_filter(self, client: AsyncClient):
        response = await client.get(
            "/reports", params={"status": "done"}, headers=ADMIN_HEADERS
        )

        assert response.status_code == 422
        assert response.json()["error"]["details"]["fields"] == ["status"]

    async def test_admin_reads_technician_queue_by_query_param(self, client: AsyncClient):
        await sign_in_everyone(client)
        report = await file_report(client)
        await client.post(
            f"/reports/{report['id']}/assign",
            json={"technicianId": "tech1"},
            headers=ADMIN_HEADERS,
        )

        response = await client.get(
            "/reports/assigned", params={"technicianId": "tech1"}, headers=ADMIN_HEADERS
        )
        assert response.status_code == 200
        assert [r["id"] for r in response.json()] == [report["id"]]

        response = await client.get("/reports/assigned", headers=ADMIN_HEADERS)
        assert response.json() == []

    async def test_user_cannot_list_all(self, client: AsyncClient):
        response = await client.get("/reports", headers=USER_HEADERS)

        assert response.status_code == 403
        assert response.json()["error"] == {
            "code": "PERMISSION_DENIED",
            "message": "Permission denied",
        }

    async def test_user_cannot_assign_or_hide(self, client: AsyncClient):
        await sign_in_everyone(client)
        report = await file_report(client)

        response = await client.post(
            f"/reports/{report['id']}/assign",
            json={"technicianId": "tech1"},
            headers=USER_HEADERS,
        )
        assert response.status_code == 403

        response = await client.delete(f"/reports/{report['id']}", headers=USER_HEADERS)
        assert response.status_code == 403

        response = await client.get(f"/reports/{report['id']}", headers=USER_HEADERS)
        assert response.json() == report

    async def test_unknown_status(self, client: AsyncClient):
        report = await file_report(client)

        response = await client.patch(
            f"/reports/{report['id']}/status",
            json={"status": "done"},
            headers=ADMIN_HEADERS,
        )
        assert response.status_code == 422
        assert response.json()["error"]["details"]["fields"] == ["status"]

    async def test_missing_report(self, client: AsyncClient):
        response = await client.get("/reports/nope", headers=ADMIN_HEADERS)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "RESOURCE_NOT_FOUND"

    async def test_malformed_body(self, client: AsyncClient):
        response = await client.patch(
            "/reports/any/status", json={}, headers=ADMIN_HEADERS
        )

        assert response.status_code == 422
        assert response.json()["error"]["details"]["errors"]

    async def test_stats(self, client: AsyncClient):
        await file_report(client)
        await file_report(client)

        response = await client.get("/reports/stats", headers=TECH_HEADERS)

        assert response.status_code == 200
        assert response.json() == {
            "total": 2,
            "pending": 2,
            "inProgress": 0,
            "completed": 0,
        }


@pytest.mark.integration
@pytest.mark.asyncio
class TestUserEndpoints:

    async def test_role_change(self, client: AsyncClient):
        await sign_in_everyone(client)

        response = await client.patch(
            "/users/user1/role", json={"role": "technician"}, headers=ADMIN_HEADERS
        )
        assert response.status_code == 200
        assert response.json()["role"] == "technician"

        response = await client.get("/users/technicians", headers=ADMIN_HEADERS)
        assert sorted(u["id"] for u in response.json()) == ["tech1", "user1"]

    async def test_admin_cannot_change_own_role(self, client: AsyncClient):
        await sign_in_everyone(client)

        response = await client.patch(
            "/users/admin1/role", json={"role": "user"}, headers=ADMIN_HEADERS
        )
        assert response.status_code == 403

        response = await client.post("/session", headers=ADMIN_HEADERS)
        assert response.json()["role"] == "admin"

    async def test_list_users_filtered(self, client: AsyncClient):
        await sign_in_everyone(client)

        response = await client.get(
            "/users", params={"role": "user"}, headers=ADMIN_HEADERS
        )
        assert [u["email"] for u in response.json()] == ["reporter@org.com"]

    async def test_user_cannot_list_users(self, client: AsyncClient):
        response = await client.get("/users", headers=USER_HEADERS)
        assert response.status_code == 403
