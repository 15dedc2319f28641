"""
Unit tests for date validation and the half-open overlap check.
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from rental_reservations.errors import InvalidDateRange, ReservationConflict
from rental_reservations.services.availability import (
    check_available_date,
    check_strange_date,
    windows_overlap,
)

TODAY = date(2024, 3, 1)
EXISTING_IN = date(2024, 3, 10)
EXISTING_OUT = date(2024, 3, 15)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("check_in", "check_out", "expected"),
    [
        # check-in strictly inside the existing stay
        (date(2024, 3, 12), date(2024, 3, 20), True),
        # candidate encloses the existing stay
        (date(2024, 3, 8), date(2024, 3, 17), True),
        # check-out strictly inside the existing stay
        (date(2024, 3, 5), date(2024, 3, 12), True),
        # identical window
        (date(2024, 3, 10), date(2024, 3, 15), True),
        # candidate inside the existing stay
        (date(2024, 3, 11), date(2024, 3, 13), True),
        # back-to-back after: check-in on the existing check-out day
        (date(2024, 3, 15), date(2024, 3, 20), False),
        # back-to-back before: check-out on the existing check-in day
        (date(2024, 3, 5), date(2024, 3, 10), False),
        # disjoint
        (date(2024, 3, 20), date(2024, 3, 25), False),
    ],
)
def test_windows_overlap_half_open(check_in: date, check_out: date, expected: bool) -> None:
    """Test that overlap follows [check_in, check_out) semantics."""
    assert windows_overlap(check_in, check_out, EXISTING_IN, EXISTING_OUT) is expected
    # The predicate is symmetric
    assert windows_overlap(EXISTING_IN, EXISTING_OUT, check_in, check_out) is expected


@pytest.mark.unit
def test_check_available_date_raises_on_overlap(make_reservation) -> None:
    """Test the 2024-03-12..20 request against a 2024-03-10..15 booking."""
    existing = [make_reservation(EXISTING_IN, EXISTING_OUT, reservation_id=1)]

    with pytest.raises(ReservationConflict):
        check_available_date(existing, date(2024, 3, 12), date(2024, 3, 20))


@pytest.mark.unit
def test_check_available_date_allows_adjacent_booking(make_reservation) -> None:
    """Test that checking in on the day another guest checks out is allowed."""
    existing = [make_reservation(EXISTING_IN, EXISTING_OUT, reservation_id=1)]

    check_available_date(existing, date(2024, 3, 15), date(2024, 3, 20))


@pytest.mark.unit
def test_check_available_date_checks_every_reservation(make_reservation) -> None:
    """Test that a conflict with a later reservation in the list is still found."""
    existing = [
        make_reservation(date(2024, 3, 1), date(2024, 3, 3), reservation_id=1),
        make_reservation(date(2024, 3, 20), date(2024, 3, 22), reservation_id=2),
    ]

    with pytest.raises(ReservationConflict, match="2024-03-20"):
        check_available_date(existing, date(2024, 3, 18), date(2024, 3, 21))


@pytest.mark.unit
def test_check_available_date_with_no_reservations() -> None:
    check_available_date([], date(2024, 3, 18), date(2024, 3, 21))


@pytest.mark.unit
def test_check_strange_date_rejects_past_check_in() -> None:
    """Test that bookings starting before today are rejected."""
    with pytest.raises(InvalidDateRange, match="past"):
        check_strange_date(TODAY - timedelta(days=2), TODAY - timedelta(days=1), today=TODAY)


@pytest.mark.unit
def test_check_strange_date_rejects_inverted_range() -> None:
    """Test that check-out before check-in is rejected."""
    with pytest.raises(InvalidDateRange):
        check_strange_date(TODAY + timedelta(days=2), TODAY + timedelta(days=1), today=TODAY)


@pytest.mark.unit
def test_check_strange_date_rejects_zero_night_stay() -> None:
    with pytest.raises(InvalidDateRange):
        check_strange_date(TODAY + timedelta(days=1), TODAY + timedelta(days=1), today=TODAY)


@pytest.mark.unit
def test_check_strange_date_accepts_valid_range() -> None:
    """Test that a future range, including one starting today, passes."""
    check_strange_date(TODAY + timedelta(days=1), TODAY + timedelta(days=2), today=TODAY)
    check_strange_date(TODAY, TODAY + timedelta(days=1), today=TODAY)


@pytest.mark.unit
def test_check_strange_date_defaults_to_current_day() -> None:
    """Test that the check uses the real current date when none is given."""
    with pytest.raises(InvalidDateRange):
        check_strange_date(date(2000, 1, 1), date(2000, 1, 2))
