from __future__ import annotations

from datetime import date, timedelta
from uuid import uuid4


async def seed_two_reminders(client, seed, user_id, auth_headers) -> list[dict]:
    for tag in ("A-1", "A-2"):
        cow_id = await seed.animal(user_id, tag)
        await seed.breeding(user_id, cow_id, date.today() - timedelta(days=50))
    await client.post("/api/v1/reproduction/reconcile", headers=auth_headers)
    response = await client.get("/api/v1/notifications", headers=auth_headers)
    return response.json()["notifications"]


async def test_list_and_paginate(client, seed, user_id, auth_headers):
    notifications = await seed_two_reminders(client, seed, user_id, auth_headers)
    assert len(notifications) == 2
    assert all(n["read"] is False and n["channel"] == "in_app" for n in notifications)

    page = await client.get(
        "/api/v1/notifications", params={"limit": 1, "offset": 1}, headers=auth_headers
    )
    body = page.json()
    assert body["total"] == 1
    assert body["unread_count"] == 2
    assert body["limit"] == 1 and body["offset"] == 1


async def test_toggle_read_state(client, seed, user_id, auth_headers):
    first, _ = await seed_two_reminders(client, seed, user_id, auth_headers)

    response = await client.patch(
        f"/api/v1/notifications/{first['id']}", json={"read": True}, headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["read"] is True
    assert response.json()["read_at"] is not None

    unread = await client.get(
        "/api/v1/notifications", params={"unread_only": True}, headers=auth_headers
    )
    assert first["id"] not in [n["id"] for n in unread.json()["notifications"]]
    assert unread.json()["unread_count"] == 1

    response = await client.patch(
        f"/api/v1/notifications/{first['id']}", json={"read": False}, headers=auth_headers
    )
    assert response.json()["read"] is False
    assert response.json()["read_at"] is None


async def test_read_notification_survives_reconcile(client, seed, user_id, auth_headers):
    first, _ = await seed_two_reminders(client, seed, user_id, auth_headers)
    await client.patch(
        f"/api/v1/notifications/{first['id']}", json={"read": True}, headers=auth_headers
    )

    again = await client.post("/api/v1/reproduction/reconcile", headers=auth_headers)
    assert again.json()["upserts"] == []

    listing = (await client.get("/api/v1/notifications", headers=auth_headers)).json()
    by_id = {n["id"]: n for n in listing["notifications"]}
    assert by_id[first["id"]]["read"] is True


async def test_mark_read_and_mark_all(client, seed, user_id, auth_headers):
    first, second = await seed_two_reminders(client, seed, user_id, auth_headers)

    response = await client.patch(
        "/api/v1/notifications/mark-read",
        json={"notification_ids": [first["id"], str(uuid4())]},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json() == {"marked_count": 1}

    response = await client.post("/api/v1/notifications/mark-all-read", headers=auth_headers)
    assert response.json() == {"marked_count": 1}

    listing = (await client.get("/api/v1/notifications", headers=auth_headers)).json()
    assert listing["unread_count"] == 0


async def test_other_users_cannot_touch_notifications(client, seed, user_id, auth_headers):
    first, _ = await seed_two_reminders(client, seed, user_id, auth_headers)
    intruder = {"X-User-ID": str(uuid4())}

    response = await client.patch(
        f"/api/v1/notifications/{first['id']}", json={"read": True}, headers=intruder
    )
    assert response.status_code == 404

    response = await client.patch(
        "/api/v1/notifications/mark-read",
        json={"notification_ids": [first["id"]]},
        headers=intruder,
    )
    assert response.json() == {"marked_count": 0}
