from __future__ import annotations

import uuid

from fastapi.testclient import TestClient


def test_create_list_and_upsert_by_email(client: TestClient) -> None:
    created = client.post(
        "/api/v1/users",
        json={"name": " Zahra Ahmadi ", "email": "Zahra@Example.org", "role": "editor", "organization": "NSDO"},
    )

    assert created.status_code == 201
    body = created.json()
    assert body["name"] == "Zahra Ahmadi"
    assert body["email"] == "zahra@example.org"
    assert body["role"] == "editor"

    again = client.post(
        "/api/v1/users", json={"name": "Zahra A.", "email": "zahra@example.org", "role": "administrator"}
    )
    assert again.status_code == 200
    assert again.json()["id"] == body["id"]
    assert again.json()["role"] == "administrator"

    client.post("/api/v1/users", json={"name": "Bilal", "email": "bilal@example.org"})
    listing = client.get("/api/v1/users").json()["items"]
    assert [(item["name"], item["role"]) for item in listing] == [("Bilal", "viewer"), ("Zahra A.", "administrator")]


def test_user_validation(client: TestClient) -> None:
    bad_email = client.post("/api/v1/users", json={"name": "Zahra", "email": "not-an-email"})
    bad_role = client.post("/api/v1/users", json={"name": "Zahra", "email": "zahra@example.org", "role": "owner"})
    blank_name = client.post("/api/v1/users", json={"name": "  ", "email": "zahra@example.org"})

    assert bad_email.status_code == 422
    assert bad_role.status_code == 422
    assert blank_name.status_code == 422
    assert client.get("/api/v1/users").json()["items"] == []


def test_patch_and_delete_user(client: TestClient) -> None:
    user_id = client.post("/api/v1/users", json={"name": "Zahra", "email": "zahra@example.org"}).json()["id"]

    patched = client.patch(f"/api/v1/users/{user_id}", json={"role": "editor"})
    assert patched.status_code == 200
    assert patched.json()["role"] == "editor"
    assert patched.json()["name"] == "Zahra"

    assert client.delete(f"/api/v1/users/{user_id}").status_code == 204
    assert client.get("/api/v1/users").json()["items"] == []

    missing = uuid.uuid4()
    assert client.delete(f"/api/v1/users/{missing}").status_code == 404
    assert client.patch(f"/api/v1/users/{missing}", json={"name": "X"}).status_code == 404
