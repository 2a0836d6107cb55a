DAY = "2026-11-02"


def test_wake_slots_follow_turnover_rules(client, seed) -> None:
    hall = seed.hall(seed.facility(start_hour=9, end_hour=18))
    seed.capacity(hall, 2)
    seed.schedule(hall, "葬儀", "09:00")

    res = client.get("/slots/day", params={"hall_id": hall.id, "date": DAY, "slot_type": "通夜"})
    assert res.status_code == 200
    body = res.json()

    assert body["booked_count"] == 1
    assert body["max_count"] == 2
    assert [t["time"] for t in body["times"] if t["available"]] == ["17:00", "18:00"]
    assert {t["code"] for t in body["times"] if not t["available"]} == {"turnover_too_soon"}


def test_funeral_slots_on_tomobiki(client, seed) -> None:
    hall = seed.hall(seed.facility(start_hour=9, end_hour=12))
    seed.capacity(hall, 2)
    seed.rokuyo(DAY, "友引")

    body = client.get("/slots/day", params={"hall_id": hall.id, "date": DAY, "slot_type": "葬儀"}).json()

    assert body["rokuyo"] == "友引"
    assert body["is_tomobiki"] is True
    assert len(body["times"]) == 4
    assert all(t["code"] == "tomobiki_restriction" for t in body["times"])


def test_slots_without_capacity(client, seed) -> None:
    hall = seed.hall(seed.facility(start_hour=10, end_hour=10))

    body = client.get("/slots/day", params={"hall_id": hall.id, "date": DAY, "slot_type": "葬儀"}).json()
    assert body["times"] == [{
        "time": "10:00",
        "available": False,
        "code": "no_capacity_configured",
        "reason": "No capacity configured for this hall on this date",
    }]


def test_unknown_hall(client) -> None:
    res = client.get("/slots/day", params={"hall_id": 1, "date": DAY, "slot_type": "葬儀"})
    assert res.status_code == 404
