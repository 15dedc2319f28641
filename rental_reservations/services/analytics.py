"""
Host-facing statistics: previous-month occupancy and yearly income by month.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Optional

import structlog

from rental_reservations.config import RECOMMENDED_OCCUPANCY_THRESHOLD
from rental_reservations.db.store import ReservationStore
from rental_reservations.schemas.reservations import IncomeResponse, ReservationRecord, User
from rental_reservations.utils.datetime import days_in_month, previous_month_bounds, utc_today

logger = structlog.get_logger(__name__)


def get_before_month_reservation(
    store: ReservationStore, room_id: int, today: Optional[date] = None
) -> list[ReservationRecord]:
    """
    Reservations of a room that checked in during the previous calendar month.
    """
    start, end = previous_month_bounds(today or utc_today())
    return store.find_by_date_range_and_room(room_id, start, end)


def occupancy_rate(reservations: Iterable[ReservationRecord], month_start: date) -> float:
    """
    Fraction of the month's days that fall inside at least one reservation.

    Each reservation covers [check_in, check_out); days outside the month are
    ignored and overlapping reservations count a day once.
    """
    month_days = days_in_month(month_start)
    month_end = month_start + timedelta(days=month_days)

    covered: set[date] = set()
    for reservation in reservations:
        day = max(reservation.check_in, month_start)
        last = min(reservation.check_out, month_end)
        while day < last:
            covered.add(day)
            day += timedelta(days=1)

    return len(covered) / month_days


def get_before_month_reservation_rate(
    store: ReservationStore, room_id: int, today: Optional[date] = None
) -> float:
    """
    Occupancy of a room over the previous calendar month, between 0.0 and 1.0.
    """
    start, end = previous_month_bounds(today or utc_today())
    # Stays that checked in before the month still cover its first days
    reservations = store.find_overlapping_window(room_id, start, end)
    rate = occupancy_rate(reservations, start)

    logger.debug("occupancy_computed", room_id=room_id, month=str(start), rate=rate)
    return rate


def check_recommended_room(
    store: ReservationStore,
    room_id: int,
    today: Optional[date] = None,
    threshold: float = RECOMMENDED_OCCUPANCY_THRESHOLD,
) -> bool:
    """
    A room is recommended when last month's occupancy reached the threshold.
    """
    return get_before_month_reservation_rate(store, room_id, today) >= threshold


def filter_by_host_and_year(store: ReservationStore, host: User, year: int) -> list[ReservationRecord]:
    """
    Paid reservations on the host's rooms with check-in inside the given year.
    """
    after = date(year - 1, 12, 31)
    before = date(year + 1, 1, 1)
    return [
        reservation
        for reservation in store.find_by_host_with_payment(host)
        if after < reservation.check_in < before
    ]


def aggregate_income_by_month(
    reservations: Iterable[ReservationRecord], year: Optional[int] = None
) -> IncomeResponse:
    """
    Sum payment prices into 12 buckets keyed by check-in month (1 = January).

    Reservations without a payment contribute nothing.
    """
    reservations = list(reservations)
    if year is None:
        year = reservations[0].check_in.year if reservations else utc_today().year

    income = IncomeResponse(year=year)
    for reservation in reservations:
        if reservation.payment is None:
            continue
        income.add(reservation.payment.price, reservation.check_in.month)
    return income


def host_income_for_year(store: ReservationStore, host: User, year: int) -> IncomeResponse:
    income = aggregate_income_by_month(filter_by_host_and_year(store, host, year), year)
    logger.info("host_income_computed", host_id=host.id, year=year, total=income.total)
    return income
