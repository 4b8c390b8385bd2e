from __future__ import annotations


async def test_health(client):
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_missing_user_header_is_rejected(client):
    response = await client.get("/api/v1/notifications")
    assert response.status_code == 401
    assert response.json()["code"] == "auth_error"


async def test_malformed_user_header_is_rejected(client):
    response = await client.get("/api/v1/notifications", headers={"X-User-ID": "not-a-uuid"})
    assert response.status_code == 401
    assert response.json()["code"] == "auth_error"


async def test_request_validation_uses_error_envelope(client, auth_headers):
    response = await client.post(
        "/api/v1/reproduction/breeding-records", json={"method": "AI"}, headers=auth_headers
    )
    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "validation_error"
    assert body["details"]["errors"]
