"""
Shared test configuration.

Environment defaults are set before any rental_reservations module is
imported, because config.py reads them at import time.
"""

from __future__ import annotations

import os
import tempfile

os.environ.setdefault(
    "DATABASE_URL", f"sqlite:///{os.path.join(tempfile.gettempdir(), 'rental-reservations-test.db')}"
)
os.environ.setdefault("PAYMENT_GATEWAY_URL", "https://gateway.test/")
os.environ.setdefault("PAYMENT_APPLICATION_ID", "test-app")
os.environ.setdefault("PAYMENT_PRIVATE_KEY", "test-key")
os.environ.setdefault("LOG_LEVEL", "INFO")

from datetime import date  # noqa: E402
from typing import Callable  # noqa: E402

import pytest  # noqa: E402

from rental_reservations.cache import token_cache  # noqa: E402
from rental_reservations.schemas.reservations import (  # noqa: E402
    PaymentRecord,
    ReservationRecord,
    RoomSnapshot,
    User,
)


@pytest.fixture(autouse=True)
def clear_token_cache() -> None:
    """Start every test without cached gateway tokens."""
    token_cache.clear()


@pytest.fixture
def guest() -> User:
    return User(id=1, name="Guest", email="guest@example.com")


@pytest.fixture
def host() -> User:
    return User(id=2, name="Host", email="host@example.com")


@pytest.fixture
def room(host: User) -> RoomSnapshot:
    return RoomSnapshot(
        id=10,
        name="Seaside cabin",
        host_id=host.id,
        room_cost=20000.0,
        cleaning_cost=5000.0,
        tax=1000.0,
    )


def _make_reservation(
    check_in: date,
    check_out: date,
    reservation_id: int | None = None,
    room_id: int = 10,
    user_id: int = 1,
    price: float | None = None,
) -> ReservationRecord:
    """Build a reservation record, optionally with an attached payment."""
    payment = None
    if price is not None:
        payment = PaymentRecord(id=reservation_id, receipt_id=f"receipt-{reservation_id}", price=price)
    return ReservationRecord(
        id=reservation_id,
        room_id=room_id,
        user_id=user_id,
        check_in=check_in,
        check_out=check_out,
        guest_num=2,
        total_cost=price or 0.0,
        payment=payment,
    )


@pytest.fixture
def make_reservation() -> Callable[..., ReservationRecord]:
    """Factory fixture for reservation records."""
    return _make_reservation
