from datetime import date
from typing import Any, Mapping, Optional

from sqlalchemy import Select, func, select
from sqlalchemy.engine import Connection

from rental_reservations.models.payments import Payment
from rental_reservations.models.reservations import Reservation
from rental_reservations.models.rooms import Room
from rental_reservations.schemas.reservations import (
    BookedDates,
    PaymentRecord,
    ReservationRecord,
)


def _reservation_query() -> Select[Any]:
    """Base SELECT of reservation columns with the attached payment, if any."""
    return select(
        Reservation.id,
        Reservation.room_id,
        Reservation.user_id,
        Reservation.check_in,
        Reservation.check_out,
        Reservation.guest_num,
        Reservation.total_cost,
        Reservation.comment_id,
        Reservation.comment_existed,
        Payment.id.label("payment_id"),
        Payment.receipt_id,
        Payment.price,
    ).outerjoin(Payment, Reservation.payment_id == Payment.id)


def _to_record(row: Mapping[str, Any]) -> ReservationRecord:
    payment = None
    if row["payment_id"] is not None:
        payment = PaymentRecord(id=row["payment_id"], receipt_id=row["receipt_id"], price=row["price"])

    return ReservationRecord(
        id=row["id"],
        room_id=row["room_id"],
        user_id=row["user_id"],
        check_in=row["check_in"],
        check_out=row["check_out"],
        guest_num=row["guest_num"],
        total_cost=row["total_cost"],
        payment=payment,
        comment_id=row["comment_id"],
        comment_existed=bool(row["comment_existed"]),
    )


def _fetch_all(conn: Connection, stmt: Select[Any]) -> list[ReservationRecord]:
    return [_to_record(row) for row in conn.execute(stmt).mappings().fetchall()]


def get_reservation(conn: Connection, reservation_id: int) -> Optional[ReservationRecord]:
    """
    Fetch a single reservation with its payment.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        reservation_id (int): Reservation ID.

    Returns:
        Optional[ReservationRecord]: The reservation, or None if not found.
    """
    row = conn.execute(_reservation_query().where(Reservation.id == reservation_id)).mappings().fetchone()
    return _to_record(row) if row else None


def get_reservations_by_room(conn: Connection, room_id: int) -> list[ReservationRecord]:
    """
    Fetch every reservation of a room, ordered by check-in.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        room_id (int): Room ID.

    Returns:
        list[ReservationRecord]: Reservations of the room.
    """
    stmt = _reservation_query().where(Reservation.room_id == room_id).order_by(Reservation.check_in)
    return _fetch_all(conn, stmt)


def get_reservations_by_user(conn: Connection, user_id: int) -> list[ReservationRecord]:
    """
    Fetch every reservation made by a user, most recent check-in first.
    """
    stmt = (
        _reservation_query()
        .where(Reservation.user_id == user_id)
        .order_by(Reservation.check_in.desc(), Reservation.id.desc())
    )
    return _fetch_all(conn, stmt)


def get_reservations_page_by_user(
    conn: Connection, user_id: int, page: int, size: int
) -> tuple[list[ReservationRecord], int]:
    """
    Fetch one page of a user's reservations.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        user_id (int): User ID.
        page (int): Zero-based page number.
        size (int): Page size.

    Returns:
        tuple[list[ReservationRecord], int]: The page items and the total row count.
    """
    total = conn.execute(
        select(func.count()).select_from(Reservation).where(Reservation.user_id == user_id)
    ).scalar_one()

    stmt = (
        _reservation_query()
        .where(Reservation.user_id == user_id)
        .order_by(Reservation.check_in.desc(), Reservation.id.desc())
        .limit(size)
        .offset(page * size)
    )
    return _fetch_all(conn, stmt), int(total)


def get_reservations_by_check_in_range(
    conn: Connection, room_id: int, start: date, end: date
) -> list[ReservationRecord]:
    """
    Fetch reservations of a room whose check-in falls in [start, end].

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        room_id (int): Room ID.
        start (date): First check-in date to include.
        end (date): Last check-in date to include.
    """
    stmt = (
        _reservation_query()
        .where(
            Reservation.room_id == room_id,
            Reservation.check_in >= start,
            Reservation.check_in <= end,
        )
        .order_by(Reservation.check_in)
    )
    return _fetch_all(conn, stmt)


def get_reservations_overlapping(
    conn: Connection, room_id: int, start: date, end: date
) -> list[ReservationRecord]:
    """
    Fetch reservations of a room whose [check_in, check_out) window has a
    night between start and end, inclusive.

    Stays that began before start or run past end are included.
    """
    stmt = (
        _reservation_query()
        .where(
            Reservation.room_id == room_id,
            Reservation.check_in <= end,
            Reservation.check_out > start,
        )
        .order_by(Reservation.check_in)
    )
    return _fetch_all(conn, stmt)


def get_paid_reservations_by_host(conn: Connection, host_id: int) -> list[ReservationRecord]:
    """
    Fetch paid reservations across all rooms hosted by a user.

    Only reservations with an attached payment are returned.
    """
    stmt = (
        _reservation_query()
        .join(Room, Reservation.room_id == Room.id)
        .where(Room.host_id == host_id, Reservation.payment_id.is_not(None))
        .order_by(Reservation.check_in)
    )
    return _fetch_all(conn, stmt)


def get_reservation_by_payment(conn: Connection, payment_id: int) -> Optional[ReservationRecord]:
    """
    Reverse lookup from a payment to the reservation that owns it.
    """
    row = (
        conn.execute(_reservation_query().where(Reservation.payment_id == payment_id))
        .mappings()
        .fetchone()
    )
    return _to_record(row) if row else None


def get_booked_dates(conn: Connection, room_id: int, from_date: date) -> list[BookedDates]:
    """
    Fetch reserved windows of a room that end after from_date.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        room_id (int): Room ID.
        from_date (date): Windows that checked out on or before this day are skipped.
    """
    stmt = (
        select(Reservation.check_in, Reservation.check_out)
        .where(Reservation.room_id == room_id, Reservation.check_out > from_date)
        .order_by(Reservation.check_in)
    )
    return [
        BookedDates(check_in=row.check_in, check_out=row.check_out)
        for row in conn.execute(stmt).fetchall()
    ]
