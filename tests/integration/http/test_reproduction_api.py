from __future__ import annotations

from datetime import date, timedelta
from uuid import uuid4

from sqlalchemy import select

from src.infrastructure.db.orm.animal import AnimalORM
from src.infrastructure.db.orm.breeding_record import BreedingRecordORM


def days_ago(n: int) -> date:
    return date.today() - timedelta(days=n)


async def list_notifications(client, headers, **params):
    response = await client.get("/api/v1/notifications", params=params, headers=headers)
    assert response.status_code == 200
    return response.json()


async def test_breeding_record_triggers_pd_reminder(client, seed, user_id, auth_headers):
    cow_id = await seed.animal(user_id, "A-100", name="Bella")

    response = await client.post(
        "/api/v1/reproduction/breeding-records",
        json={"animal_id": str(cow_id), "breeding_date": days_ago(50).isoformat(), "method": "AI"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    record = response.json()
    assert record["pd_result"] == "Unchecked"

    listing = await list_notifications(client, auth_headers)
    assert listing["unread_count"] == 1
    [notification] = listing["notifications"]
    assert notification["type"] == "pd_check"
    assert notification["animal_id"] == str(cow_id)
    assert notification["scheduled_for"] == (date.today() + timedelta(days=5)).isoformat()
    assert "#A-100 Bella" in notification["body"]
    assert notification["metadata"]["breeding_record_id"] == record["id"]


async def test_second_open_cycle_is_rejected(client, seed, user_id, auth_headers):
    cow_id = await seed.animal(user_id, "A-1")
    await seed.breeding(user_id, cow_id, days_ago(10))

    response = await client.post(
        "/api/v1/reproduction/breeding-records",
        json={"animal_id": str(cow_id), "breeding_date": days_ago(1).isoformat(), "method": "AI"},
        headers=auth_headers,
    )
    assert response.status_code == 409
    assert response.json()["code"] == "ambiguous_state"


async def test_pregnancy_to_calving_flow(app, client, seed, user_id, auth_headers):
    cow_id = await seed.animal(user_id, "A-1")
    bull_id = await seed.animal(user_id, "S-1", sex="Male")

    created = await client.post(
        "/api/v1/reproduction/breeding-records",
        json={
            "animal_id": str(cow_id),
            "breeding_date": days_ago(276).isoformat(),
            "method": "Natural",
            "sire_id": str(bull_id),
        },
        headers=auth_headers,
    )
    assert created.status_code == 201
    record_id = created.json()["id"]
    assert (await list_notifications(client, auth_headers))["notifications"] == []

    checked = await client.patch(
        f"/api/v1/reproduction/breeding-records/{record_id}/pregnancy-check",
        json={"result": "Pregnant", "check_date": days_ago(220).isoformat()},
        headers=auth_headers,
    )
    assert checked.status_code == 200
    assert checked.json()["confirmed_pregnant"] is True

    listing = await list_notifications(client, auth_headers)
    assert [n["type"] for n in listing["notifications"]] == ["expected_calving"]

    calving = await client.post(
        "/api/v1/reproduction/calvings",
        json={
            "animal_id": str(cow_id),
            "calving_date": date.today().isoformat(),
            "calf_ear_tag": "C-1",
            "calf_sex": "Female",
        },
        headers=auth_headers,
    )
    assert calving.status_code == 201
    body = calving.json()
    assert body["breeding_record_id"] == record_id
    assert body["calf"]["dam_id"] == str(cow_id)
    assert body["calf"]["sire_id"] == str(bull_id)

    # Cycle closed: nothing new to send
    reconcile = await client.post("/api/v1/reproduction/reconcile", headers=auth_headers)
    assert reconcile.status_code == 200
    assert reconcile.json()["upserts"] == []
    assert len((await list_notifications(client, auth_headers))["notifications"]) == 1

    status = await client.get(
        f"/api/v1/reproduction/animals/{cow_id}/status", headers=auth_headers
    )
    assert status.json()["label"] == "Fresh"
    assert status.json()["days_since_calving"] == 0

    async with app.state.session_factory() as session:
        calf = (
            await session.execute(select(AnimalORM).where(AnimalORM.ear_tag == "C-1"))
        ).scalar_one()
        assert calf.user_id == user_id
        assert calf.dam_id == cow_id


async def test_duplicate_calf_tag_conflicts(client, seed, user_id, auth_headers):
    cow_id = await seed.animal(user_id, "A-1")
    await seed.animal(user_id, "C-1")
    response = await client.post(
        "/api/v1/reproduction/calvings",
        json={
            "animal_id": str(cow_id),
            "calving_date": date.today().isoformat(),
            "calf_ear_tag": "C-1",
            "calf_sex": "Male",
        },
        headers=auth_headers,
    )
    assert response.status_code == 409
    assert response.json()["code"] == "conflict"


async def test_reconcile_endpoint_is_idempotent(app, client, seed, user_id, auth_headers):
    cow_id = await seed.animal(user_id, "A-1")
    record_id = await seed.breeding(user_id, cow_id, days_ago(300))

    first = await client.post("/api/v1/reproduction/reconcile", headers=auth_headers)
    assert first.status_code == 200
    body = first.json()
    assert [u["type"] for u in body["upserts"]] == ["reopen_breeding"]
    assert body["written"] == 1
    assert body["flagged_records"] == [str(record_id)]

    second = await client.post("/api/v1/reproduction/reconcile", headers=auth_headers)
    assert second.json()["upserts"] == []
    assert second.json()["written"] == 0
    assert len((await list_notifications(client, auth_headers))["notifications"]) == 1

    async with app.state.session_factory() as session:
        row = await session.get(BreedingRecordORM, record_id)
        assert row.reopen_flagged_at is not None
        assert row.pd_result == "Unchecked"


async def test_reconcile_reports_ambiguous_animals(client, seed, user_id, auth_headers):
    cow_id = await seed.animal(user_id, "A-1")
    await seed.breeding(user_id, cow_id, days_ago(50))
    await seed.breeding(user_id, cow_id, days_ago(52))

    body = (await client.post("/api/v1/reproduction/reconcile", headers=auth_headers)).json()
    assert body["upserts"] == []
    assert [(i["subject_id"], i["code"]) for i in body["issues"]] == [
        (str(cow_id), "ambiguous_state")
    ]


async def test_herd_status(client, seed, user_id, auth_headers):
    fresh = await seed.animal(user_id, "A-1")
    await seed.calving(user_id, fresh, days_ago(10))
    due = await seed.animal(user_id, "A-2")
    await seed.calving(user_id, due, days_ago(100))
    await seed.animal(user_id, "A-3", reproductive_override="Pregnant")
    await seed.animal(user_id, "S-1", sex="Male")
    await seed.animal(user_id, "A-9", lifecycle_status="Sold")

    response = await client.get("/api/v1/reproduction/status", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    labels = {item["ear_tag"]: (item["label"], item["origin"]) for item in body["items"]}
    assert labels == {
        "A-1": ("Fresh", "computed"),
        "A-2": ("Heat-Detection-Due", "computed"),
        "A-3": ("Pregnant", "override"),
        "S-1": ("N/A", "computed"),
    }
    assert body["errors"] == 0

    everything = await client.get(
        "/api/v1/reproduction/status", params={"include_inactive": True}, headers=auth_headers
    )
    assert everything.json()["total"] == 5


async def test_due_dates_endpoint(client, seed, user_id, auth_headers):
    cow_id = await seed.animal(user_id, "A-1")
    record_id = await seed.breeding(user_id, cow_id, date(2024, 1, 1))

    response = await client.get(
        f"/api/v1/reproduction/breeding-records/{record_id}/due-dates", headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json() == {
        "breeding_record_id": str(record_id),
        "pregnancy_check_due": "2024-02-25",
        "expected_calving_due": "2024-10-07",
        "heat_check_due": "2024-01-22",
        "post_pd_treatment_due": None,
        "keep_in_breeding_until": None,
        "reopen_date": None,
    }

    negative = await seed.breeding(user_id, cow_id, date(2024, 3, 1), pd_result="Not Pregnant")
    response = await client.get(
        f"/api/v1/reproduction/breeding-records/{negative}/due-dates", headers=auth_headers
    )
    assert response.json()["expected_calving_due"] is None


async def test_negative_pregnancy_check_reports_follow_up(client, seed, user_id, auth_headers):
    cow_id = await seed.animal(user_id, "A-1")
    record_id = await seed.breeding(user_id, cow_id, date(2024, 1, 1))

    checked = await client.patch(
        f"/api/v1/reproduction/breeding-records/{record_id}/pregnancy-check",
        json={"result": "Not Pregnant", "check_date": "2024-03-01"},
        headers=auth_headers,
    )
    assert checked.status_code == 200
    body = checked.json()
    assert body["pd_result"] == "Not Pregnant"
    assert body["post_pd_treatment_due_date"] == "2024-03-30"
    assert body["reopen_date"] == "2024-04-30"

    response = await client.get(
        f"/api/v1/reproduction/breeding-records/{record_id}/due-dates", headers=auth_headers
    )
    assert response.json() == {
        "breeding_record_id": str(record_id),
        "pregnancy_check_due": None,
        "expected_calving_due": None,
        "heat_check_due": None,
        "post_pd_treatment_due": "2024-03-30",
        "keep_in_breeding_until": "2024-03-30",
        "reopen_date": "2024-04-30",
    }


async def test_herd_status_survives_unknown_pd_result(client, seed, user_id, auth_headers):
    good = await seed.animal(user_id, "A-1")
    await seed.calving(user_id, good, days_ago(10))
    bad = await seed.animal(user_id, "A-2")
    await seed.breeding(user_id, bad, days_ago(60), pd_result="Maybe")

    response = await client.get("/api/v1/reproduction/status", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert body["errors"] == 1
    by_tag = {item["ear_tag"]: item for item in body["items"]}
    assert by_tag["A-1"]["label"] == "Fresh"
    assert by_tag["A-2"]["error"]["code"] == "validation_error"


async def test_records_are_scoped_to_user(client, seed, user_id, auth_headers):
    cow_id = await seed.animal(user_id, "A-1")
    record_id = await seed.breeding(user_id, cow_id, days_ago(50))
    intruder = {"X-User-ID": str(uuid4())}

    response = await client.get(
        f"/api/v1/reproduction/breeding-records/{record_id}/due-dates", headers=intruder
    )
    assert response.status_code == 404
    assert response.json()["code"] == "not_found"

    response = await client.get(f"/api/v1/reproduction/animals/{cow_id}/status", headers=intruder)
    assert response.status_code == 404

    body = (await client.post("/api/v1/reproduction/reconcile", headers=intruder)).json()
    assert body["upserts"] == []
    assert (await list_notifications(client, intruder))["notifications"] == []
