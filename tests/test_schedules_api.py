import json
from unittest.mock import patch

import pytest

from app.services.turnover import Decision

DAY = "2026-11-02"


@pytest.fixture()
def hall(seed):
    return seed.hall(seed.facility())


def _post(client, hall_id, slot_type, ceremony_time, **extra):
    body = {
        "date": DAY,
        "hall_id": hall_id,
        "slot_type": slot_type,
        "ceremony_time": ceremony_time,
        "family_name": "山田",
    }
    body.update(extra)
    return client.post("/schedules/", json=body)


def test_booking_refused_without_capacity(client, hall) -> None:
    res = _post(client, hall.id, "葬儀", "10:00")
    assert res.status_code == 409
    assert res.json()["detail"]["code"] == "no_capacity_configured"


def test_wake_after_funeral_respects_interval(client, seed, hall, redis_mock) -> None:
    seed.capacity(hall, 2)

    assert _post(client, hall.id, "葬儀", "9:00").status_code == 201

    res = _post(client, hall.id, "通夜", "16:00")
    assert res.status_code == 409
    detail = res.json()["detail"]
    assert detail["code"] == "turnover_too_soon"
    assert detail["min_wake_time"] == "17:00"

    res = _post(client, hall.id, "通夜", "17:00")
    assert res.status_code == 201
    assert res.json()["ceremony_time"] == "17:00"

    assert redis_mock.rpush.call_count == 2
    queue, raw = redis_mock.rpush.call_args.args
    assert queue == "events:p2p"
    assert json.loads(raw)["type"] == "schedule_created"


def test_capacity_exceeded(client, seed, hall) -> None:
    seed.capacity(hall, 1)
    seed.schedule(hall, "葬儀", "09:00")

    res = _post(client, hall.id, "通夜", "20:00")
    assert res.status_code == 409
    assert res.json()["detail"]["code"] == "capacity_exceeded"


def test_tomobiki_refuses_funeral_but_not_wake(client, seed, hall) -> None:
    seed.capacity(hall, 2)
    seed.rokuyo(DAY, "友引")

    res = _post(client, hall.id, "葬儀", "10:00")
    assert res.status_code == 409
    assert res.json()["detail"]["code"] == "tomobiki_restriction"

    assert _post(client, hall.id, "通夜", "18:00").status_code == 201


def test_family_name_required_unless_external(client, seed, hall) -> None:
    seed.capacity(hall, 2)

    assert _post(client, hall.id, "葬儀", "10:00", family_name=None).status_code == 422

    res = _post(client, hall.id, "葬儀", "10:00", family_name=None, status="external")
    assert res.status_code == 201
    assert res.json()["family_name"] is None


def test_invalid_time_and_unknown_hall(client, hall) -> None:
    assert _post(client, hall.id, "葬儀", "10時").status_code == 422
    assert _post(client, 999, "葬儀", "10:00").status_code == 404


def test_edit_does_not_conflict_with_itself(client, seed, hall) -> None:
    seed.capacity(hall, 1)
    created = _post(client, hall.id, "葬儀", "09:00").json()

    res = client.patch(f"/schedules/{created['id']}", json={"ceremony_time": "10:00"})
    assert res.status_code == 200
    assert res.json()["ceremony_time"] == "10:00"


def test_edit_rechecks_turnover_against_existing_wake(client, seed, hall) -> None:
    seed.capacity(hall, 2)
    funeral = seed.schedule(hall, "葬儀", "09:00")
    seed.schedule(hall, "通夜", "18:00")

    res = client.patch(f"/schedules/{funeral.id}", json={"ceremony_time": "11:00"})
    assert res.status_code == 409
    assert res.json()["detail"]["min_wake_time"] == "19:00"

    assert client.get(f"/schedules/{funeral.id}").json()["ceremony_time"] == "09:00"


def test_status_only_edit_skips_placement_checks(client, seed, hall) -> None:
    # no capacity configured at all: a status change must still go through
    funeral = seed.schedule(hall, "葬儀", "09:00")

    res = client.patch(f"/schedules/{funeral.id}", json={"status": "preparing"})
    assert res.status_code == 200
    assert res.json()["status"] == "preparing"


def test_edit_cannot_drop_family_name(client, seed, hall) -> None:
    funeral = seed.schedule(hall, "葬儀", "09:00")
    res = client.patch(f"/schedules/{funeral.id}", json={"family_name": " "})
    assert res.status_code == 422


def test_moving_to_another_hall_checks_that_hall(client, seed, hall) -> None:
    seed.capacity(hall, 1)
    other = seed.hall(hall.facility, name="家族葬ホール")
    funeral = seed.schedule(hall, "葬儀", "09:00")

    res = client.patch(f"/schedules/{funeral.id}", json={"hall_id": other.id})
    assert res.status_code == 409
    assert res.json()["detail"]["code"] == "no_capacity_configured"


def test_bulk_registration_is_all_or_nothing(client, seed, hall) -> None:
    seed.capacity(hall, 3)

    res = client.post("/schedules/bulk", json={"schedules": [
        {"date": DAY, "hall_id": hall.id, "slot_type": "葬儀", "ceremony_time": "09:00", "family_name": "田中"},
        {"date": DAY, "hall_id": hall.id, "slot_type": "通夜", "ceremony_time": "16:00", "family_name": "鈴木"},
    ]})
    assert res.status_code == 409
    assert res.json()["detail"]["index"] == 1
    assert res.json()["detail"]["code"] == "turnover_too_soon"

    assert client.get("/schedules/", params={"date": DAY}).json() == []


def test_bulk_rows_see_each_other(client, seed, hall) -> None:
    seed.capacity(hall, 3)

    res = client.post("/schedules/bulk", json={"schedules": [
        {"date": DAY, "hall_id": hall.id, "slot_type": "葬儀", "ceremony_time": "09:00", "family_name": "田中"},
        {"date": DAY, "hall_id": hall.id, "slot_type": "通夜", "ceremony_time": "17:00", "family_name": "鈴木"},
    ]})
    assert res.status_code == 201
    assert [row["slot_type"] for row in res.json()] == ["葬儀", "通夜"]

    res = client.post("/schedules/bulk", json={"schedules": [
        {"date": DAY, "hall_id": hall.id, "slot_type": "葬儀", "ceremony_time": "10:00", "family_name": "高橋"},
    ]})
    assert res.status_code == 409
    assert res.json()["detail"]["code"] == "already_booked"


def test_delete_frees_the_slot(client, seed, hall, redis_mock) -> None:
    seed.capacity(hall, 1)
    created = _post(client, hall.id, "葬儀", "09:00").json()

    assert client.delete(f"/schedules/{created['id']}").status_code == 204
    assert json.loads(redis_mock.rpush.call_args.args[1])["type"] == "schedule_deleted"
    assert client.get(f"/schedules/{created['id']}").status_code == 404

    assert _post(client, hall.id, "葬儀", "11:00").status_code == 201


def test_list_filters_by_hall_and_date(client, seed, hall) -> None:
    other = seed.hall(hall.facility, name="家族葬ホール")
    seed.schedule(hall, "葬儀", "09:00")
    seed.schedule(other, "葬儀", "10:00")
    seed.schedule(hall, "葬儀", "10:00", day="2026-11-03")

    rows = client.get("/schedules/", params={"hall_id": hall.id, "date": DAY}).json()
    assert len(rows) == 1
    assert rows[0]["ceremony_time"] == "09:00"

    rows = client.get("/schedules/", params={"facility_id": hall.facility_id}).json()
    assert len(rows) == 3


# The unique (hall_id, date, slot_type) key decides when two writers
# both pass the admission check on the same snapshot.
@patch("app.routers.schedules.check_admission", return_value=Decision.accept())
def test_unique_slot_refuses_second_writer(_check, client, seed, hall, redis_mock) -> None:
    seed.schedule(hall, "葬儀", "09:00")

    res = _post(client, hall.id, "葬儀", "10:00")
    assert res.status_code == 409
    assert res.json()["detail"]["code"] == "already_booked"
    assert redis_mock.rpush.call_count == 0

    res = client.post("/schedules/bulk", json={"schedules": [
        {"date": DAY, "hall_id": hall.id, "slot_type": "通夜", "ceremony_time": "18:00", "family_name": "鈴木"},
        {"date": DAY, "hall_id": hall.id, "slot_type": "葬儀", "ceremony_time": "11:00", "family_name": "高橋"},
    ]})
    assert res.status_code == 409
    assert res.json()["detail"]["index"] == 1
    assert res.json()["detail"]["code"] == "already_booked"

    rows = client.get("/schedules/", params={"hall_id": hall.id, "date": DAY}).json()
    assert [(r["slot_type"], r["ceremony_time"]) for r in rows] == [("葬儀", "09:00")]


@patch("app.routers.schedules.check_admission", return_value=Decision.accept())
def test_unique_slot_refuses_conflicting_edit(_check, client, seed, hall) -> None:
    seed.schedule(hall, "葬儀", "09:00")
    wake = seed.schedule(hall, "通夜", "18:00")

    res = client.patch(f"/schedules/{wake.id}", json={"slot_type": "葬儀"})
    assert res.status_code == 409
    assert res.json()["detail"]["code"] == "already_booked"
    assert client.get(f"/schedules/{wake.id}").json()["slot_type"] == "通夜"
