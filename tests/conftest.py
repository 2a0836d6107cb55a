# tests/conftest.py
import json
import os

# Settings() is read at import time; point it at throwaway values first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import get_db
from app.main import app
from app.models import Base, DailyCapacities, Facilities, Halls, Rokuyo, Schedules

DAY = "2026-11-02"


class Seeder:
    """Inserts rows directly, bypassing the admission guard."""

    def __init__(self, db):
        self.db = db

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def facility(self, **overrides) -> Facilities:
        values = {
            "name": "イズモホール豊橋",
            "turnover_rules": [],
            "turnover_interval_hours": 8,
        }
        values.update(overrides)
        if not isinstance(values["turnover_rules"], str):
            values["turnover_rules"] = json.dumps(values["turnover_rules"], ensure_ascii=False)
        return self._save(Facilities(**values))

    def hall(self, facility: Facilities, name: str = "メインホール") -> Halls:
        return self._save(Halls(facility_id=facility.id, name=name))

    def capacity(self, hall: Halls, max_count: int, day: str = DAY) -> DailyCapacities:
        return self._save(DailyCapacities(hall_id=hall.id, date=day, max_count=max_count))

    def schedule(
        self,
        hall: Halls,
        slot_type: str,
        ceremony_time: str | None,
        day: str = DAY,
        family_name: str = "山田",
        status: str = "occupied",
    ) -> Schedules:
        return self._save(Schedules(
            hall_id=hall.id,
            date=day,
            slot_type=slot_type,
            ceremony_time=ceremony_time,
            family_name=family_name,
            status=status,
        ))

    def rokuyo(self, day: str = DAY, rokuyo: str = "友引") -> Rokuyo:
        return self._save(Rokuyo(date=day, rokuyo=rokuyo, is_tomobiki=int(rokuyo == "友引")))


@pytest.fixture()
def engine():
    """SQLite in-memory shared by the app and the test (StaticPool)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def seed(db) -> Seeder:
    return Seeder(db)


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def redis_mock():
    # Tests must never talk to a real Redis
    with patch("app.services.events.redis_client") as mock:
        yield mock
