from __future__ import annotations

import uuid

from fastapi.testclient import TestClient


def _complaint_payload(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "full_name": " Amina Rahimi ",
        "email": "amina@example.org",
        "phone": "  ",
        "message": "Distribution point closed before noon.",
        "province": "Kabul",
    }
    payload.update(overrides)
    return payload


def _create_project(client: TestClient) -> str:
    response = client.post(
        "/api/v1/projects",
        json={"code": "P1", "name": "Kabul Health", "sector": "Health", "provinces": ["Kabul"]},
    )
    assert response.status_code == 201
    return response.json()["id"]


def test_submit_and_list_complaints(client: TestClient) -> None:
    project_id = _create_project(client)

    created = client.post("/api/v1/complaints", json=_complaint_payload(project_id=project_id))

    assert created.status_code == 201
    body = created.json()
    assert body["full_name"] == "Amina Rahimi"
    assert body["phone"] is None
    assert body["status"] == "open"
    assert body["project_id"] == project_id

    listing = client.get("/api/v1/complaints")
    assert listing.status_code == 200
    assert [item["id"] for item in listing.json()["items"]] == [body["id"]]


def test_complaint_validation(client: TestClient) -> None:
    blank_name = client.post("/api/v1/complaints", json=_complaint_payload(full_name="   "))
    missing_message = client.post(
        "/api/v1/complaints", json={"full_name": "Amina", "email": "amina@example.org"}
    )
    unknown_project = client.post("/api/v1/complaints", json=_complaint_payload(project_id=str(uuid.uuid4())))
    bad_email = client.post("/api/v1/complaints", json=_complaint_payload(email="amina.example.org"))

    assert blank_name.status_code == 422
    assert missing_message.status_code == 422
    assert unknown_project.status_code == 422
    assert bad_email.status_code == 422
    assert client.get("/api/v1/complaints").json()["items"] == []


def test_status_update_moves_complaint_between_counts(client: TestClient) -> None:
    project_id = _create_project(client)
    complaint_id = client.post("/api/v1/complaints", json=_complaint_payload(project_id=project_id)).json()["id"]

    updated = client.patch(f"/api/v1/complaints/{complaint_id}", json={"status": "in_review"})

    assert updated.status_code == 200
    assert updated.json()["status"] == "in_review"
    assert client.get("/api/v1/complaints", params={"status": "open"}).json()["items"] == []
    assert len(client.get("/api/v1/complaints", params={"status": "in_review"}).json()["items"]) == 1

    overview = client.get("/api/v1/dashboards/overview").json()
    assert overview["complaints"]["open"] == 0
    assert overview["complaints"]["in_review"] == 1

    invalid = client.patch(f"/api/v1/complaints/{complaint_id}", json={"status": "closed"})
    assert invalid.status_code == 422


def test_delete_complaint(client: TestClient) -> None:
    complaint_id = client.post("/api/v1/complaints", json=_complaint_payload()).json()["id"]

    deleted = client.delete(f"/api/v1/complaints/{complaint_id}")

    assert deleted.status_code == 204
    assert client.get("/api/v1/complaints").json()["items"] == []
    assert client.delete(f"/api/v1/complaints/{complaint_id}").status_code == 404
    assert client.patch(f"/api/v1/complaints/{complaint_id}", json={"status": "resolved"}).status_code == 404
