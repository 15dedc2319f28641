"""
Date-range validation and availability checks for room bookings.

A reservation occupies the half-open window [check_in, check_out): a guest
checking out on day X does not block another guest checking in on day X.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

import structlog

from rental_reservations.errors import InvalidDateRange, ReservationConflict
from rental_reservations.schemas.reservations import ReservationRecord
from rental_reservations.utils.datetime import utc_today

logger = structlog.get_logger(__name__)


def windows_overlap(a_in: date, a_out: date, b_in: date, b_out: date) -> bool:
    """
    Return True if the half-open windows [a_in, a_out) and [b_in, b_out) intersect.

    Example:
        >>> windows_overlap(date(2024, 3, 10), date(2024, 3, 15), date(2024, 3, 12), date(2024, 3, 20))
        True
        >>> windows_overlap(date(2024, 3, 10), date(2024, 3, 15), date(2024, 3, 15), date(2024, 3, 20))
        False
    """
    return a_in < b_out and b_in < a_out


def check_strange_date(check_in: date, check_out: date, today: Optional[date] = None) -> None:
    """
    Reject past-dated or inverted date ranges.

    Args:
        check_in: Requested check-in date
        check_out: Requested check-out date
        today: Reference day (default: current UTC date)

    Raises:
        InvalidDateRange: If check_in is before today or check_out is not after check_in
    """
    today = today or utc_today()

    if check_in < today:
        raise InvalidDateRange(f"Check-in {check_in} is in the past")
    if check_out <= check_in:
        raise InvalidDateRange(f"Check-out {check_out} must be after check-in {check_in}")


def check_available_date(
    existing: Iterable[ReservationRecord], check_in: date, check_out: date
) -> None:
    """
    Ensure a candidate window does not overlap any existing reservation.

    Args:
        existing: Reservations already held for the room
        check_in: Candidate check-in date
        check_out: Candidate check-out date

    Raises:
        ReservationConflict: On the first overlapping reservation
    """
    for reservation in existing:
        if windows_overlap(check_in, check_out, reservation.check_in, reservation.check_out):
            logger.info(
                "reservation_conflict",
                room_id=reservation.room_id,
                conflicting_reservation_id=reservation.id,
                check_in=str(check_in),
                check_out=str(check_out),
            )
            raise ReservationConflict(
                f"Room {reservation.room_id} is already booked from "
                f"{reservation.check_in} to {reservation.check_out}"
            )
