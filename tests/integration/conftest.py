"""
Fixtures for integration tests that need a seeded database.

The schema is built from the declarative metadata on an in-memory SQLite
engine. The PostgreSQL exclusion constraint lives in the migration only, so
these tests exercise the in-transaction availability check.
"""

from __future__ import annotations

from typing import Generator

import pytest
from sqlalchemy import create_engine, insert
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from rental_reservations.db.store import ReservationStore
from rental_reservations.models.base import Base
from rental_reservations.models.payments import Comment
from rental_reservations.models.rooms import Location, Room
from rental_reservations.models.users import User as UserRow


@pytest.fixture
def sqlite_engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    with engine.begin() as conn:
        conn.execute(
            insert(UserRow),
            [
                {"id": 1, "name": "Guest", "email": "guest@example.com"},
                {"id": 2, "name": "Host", "email": "host@example.com"},
                {"id": 3, "name": "Other guest", "email": "other@example.com"},
            ],
        )
        conn.execute(
            insert(Location).values(
                id=1, country="KR", city="Seoul", borough="Mapo", detail_address="1-2"
            )
        )
        conn.execute(
            insert(Room),
            [
                {
                    "id": 10,
                    "name": "Seaside cabin",
                    "host_id": 2,
                    "location_id": 1,
                    "room_cost": 20000.0,
                    "cleaning_cost": 5000.0,
                    "tax": 1000.0,
                    "bed_num": 2,
                    "bedroom_num": 1,
                    "bathroom_num": 1,
                },
                {
                    "id": 11,
                    "name": "City loft",
                    "host_id": 2,
                    "location_id": None,
                    "room_cost": 10000.0,
                    "cleaning_cost": 0.0,
                    "tax": 0.0,
                    "bed_num": 1,
                    "bedroom_num": 1,
                    "bathroom_num": 1,
                },
            ],
        )
        conn.execute(insert(Comment).values(id=100, user_id=1, content="Lovely stay"))

    yield engine
    engine.dispose()


@pytest.fixture
def store(sqlite_engine: Engine) -> ReservationStore:
    return ReservationStore(sqlite_engine)
