from __future__ import annotations

from fastapi.testclient import TestClient

from tests.factories import PNG_PIXEL_BASE64, truncated_png_base64


def test_branding_defaults(client: TestClient) -> None:
    response = client.get("/api/v1/branding")

    assert response.status_code == 200
    assert response.json() == {"organization_name": "NSDO", "logo_data_url": None}


def test_update_branding_round_trip(client: TestClient) -> None:
    logo = f"data:image/png;base64,{PNG_PIXEL_BASE64}"

    updated = client.put("/api/v1/branding", json={"organization_name": " Relief Partners ", "logo_data_url": logo})

    assert updated.status_code == 200
    assert updated.json() == {"organization_name": "Relief Partners", "logo_data_url": logo}
    assert client.get("/api/v1/branding").json()["logo_data_url"] == logo

    cleared = client.put("/api/v1/branding", json={"organization_name": "Relief Partners", "logo_data_url": None})
    assert cleared.status_code == 200
    assert cleared.json()["logo_data_url"] is None


def test_malformed_logo_is_rejected(client: TestClient) -> None:
    not_a_data_uri = client.put(
        "/api/v1/branding", json={"organization_name": "NSDO", "logo_data_url": "https://example.org/logo.png"}
    )
    bad_base64 = client.put(
        "/api/v1/branding", json={"organization_name": "NSDO", "logo_data_url": "data:image/png;base64,@@@"}
    )

    assert not_a_data_uri.status_code == 422
    assert bad_base64.status_code == 422
    assert client.get("/api/v1/branding").json()["logo_data_url"] is None


def test_truncated_logo_is_rejected(client: TestClient) -> None:
    response = client.put(
        "/api/v1/branding",
        json={"organization_name": "NSDO", "logo_data_url": f"data:image/png;base64,{truncated_png_base64()}"},
    )

    assert response.status_code == 422
    assert response.json()["detail"] == "logo_data_url is not a readable image."
    assert client.get("/api/v1/branding").json()["logo_data_url"] is None

    report = client.post("/api/v1/reports/generate", json={})
    assert report.status_code == 200


def test_omitted_logo_keeps_stored_logo(client: TestClient) -> None:
    logo = f"data:image/png;base64,{PNG_PIXEL_BASE64}"
    client.put("/api/v1/branding", json={"organization_name": "NSDO", "logo_data_url": logo})

    renamed = client.put("/api/v1/branding", json={"organization_name": "Relief Partners"})

    assert renamed.status_code == 200
    assert renamed.json() == {"organization_name": "Relief Partners", "logo_data_url": logo}

    cleared = client.put("/api/v1/branding", json={"organization_name": "Relief Partners", "logo_data_url": None})
    assert cleared.json()["logo_data_url"] is None
