"""Integration tests for the employee directory endpoints."""
from __future__ import annotations

from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from employee_directory.services.employee_service import matches_username_or_email


def _create(client: TestClient, username: str, email: str, name: str = "Test User", age: int | None = 30) -> dict:
    response = client.post(
        "/api/v1/employees",
        json={"name": name, "username": username, "email": email, "age": age},
    )
    assert response.status_code == 200, response.text
    return response.json()


def test_create_and_get_employee(test_client: TestClient):
    created = _create(test_client, "asha", "asha@example.com", name="Asha Rao")

    response = test_client.get(f"/api/v1/employees/{created['id']}")

    assert response.status_code == 200
    data = response.json()
    assert data["username"] == "asha"
    assert data["email"] == "asha@example.com"
    assert data["name"] == "Asha Rao"


def test_create_duplicate_username_forbidden(test_client: TestClient):
    _create(test_client, "asha", "asha@example.com")

    response = test_client.post(
        "/api/v1/employees",
        json={"name": "Other", "username": "asha", "email": "other@example.com"},
    )

    assert response.status_code == 403
    body = response.json()
    assert "asha" in body["message"]
    assert body["details"] == "uri=/api/v1/employees"


def test_create_rejects_invalid_email(test_client: TestClient):
    response = test_client.post(
        "/api/v1/employees",
        json={"name": "Bad", "username": "bad-email", "email": "not-an-email"},
    )

    assert response.status_code == 422


def test_list_employees(test_client: TestClient):
    _create(test_client, "asha", "asha@example.com")
    _create(test_client, "bela", "bela@example.com")

    response = test_client.get("/api/v1/employees")

    assert response.status_code == 200
    assert [e["username"] for e in response.json()] == ["asha", "bela"]


def test_get_missing_employee_returns_404(test_client: TestClient):
    response = test_client.get("/api/v1/employees/999")

    assert response.status_code == 404
    assert response.json()["message"] == "Employee ID 999 not found"


def test_delete_employee(test_client: TestClient):
    created = _create(test_client, "asha", "asha@example.com")

    response = test_client.delete(f"/api/v1/employees/{created['id']}")
    assert response.status_code == 200
    assert test_client.get(f"/api/v1/employees/{created['id']}").status_code == 404
    assert test_client.delete(f"/api/v1/employees/{created['id']}").status_code == 404


def test_update_employee_partial(test_client: TestClient):
    created = _create(test_client, "asha", "asha@example.com", age=30)

    response = test_client.put(
        f"/api/v1/employees/{created['id']}",
        json={"email": "asha.rao@example.com"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "asha.rao@example.com"
    assert data["username"] == "asha"
    assert data["age"] == 30


def test_update_missing_employee_returns_404(test_client: TestClient):
    response = test_client.put("/api/v1/employees/42", json={"name": "Nobody"})

    assert response.status_code == 404


def test_update_to_taken_username_forbidden(test_client: TestClient):
    _create(test_client, "asha", "asha@example.com")
    bela = _create(test_client, "bela", "bela@example.com")

    response = test_client.put(f"/api/v1/employees/{bela['id']}", json={"username": "asha"})

    assert response.status_code == 403


def test_employees_by_email(test_client: TestClient):
    _create(test_client, "asha", "shared@example.com")
    _create(test_client, "bela", "shared@example.com")
    _create(test_client, "chen", "chen@example.com")

    response = test_client.get("/api/v1/employeesByEmail/shared@example.com")

    assert response.status_code == 200
    assert [e["username"] for e in response.json()] == ["asha", "bela"]
    assert test_client.get("/api/v1/employeesByEmail/none@example.com").status_code == 404


def test_search_by_username_or_email(test_client: TestClient):
    _create(test_client, "AshaRao", "asha@corp.example.com")
    _create(test_client, "bela", "bela@EXAMPLE.org")
    _create(test_client, "chen", "chen@corp.example.com")

    by_username = test_client.get("/api/v1/employeesByUsernameOrEmail", params={"username": "asha"})
    either = test_client.get(
        "/api/v1/employeesByUsernameOrEmail",
        params={"username": "BEL", "email": "corp"},
    )
    nothing = test_client.get("/api/v1/employeesByUsernameOrEmail")

    assert [e["username"] for e in by_username.json()] == ["AshaRao"]
    assert [e["username"] for e in either.json()] == ["AshaRao", "bela", "chen"]
    assert nothing.json() == []


@pytest.mark.parametrize(
    "username, email, expected",
    [
        ("ASH", None, True),
        (None, "EXAMPLE.COM", True),
        ("zzz", "example", True),
        ("zzz", "nope", False),
        ("", "  ", False),
        (None, None, False),
    ],
)
def test_matches_username_or_email(username, email, expected):
    employee = SimpleNamespace(username="asha", email="asha@example.com")

    assert matches_username_or_email(employee, username=username, email=email) is expected
