"""
Reservation store: the persistence boundary of the reservation core.

Each public method runs in its own transaction on the given engine. Methods
that combine several statements (reserve, attach_payment, delete_with_payment)
commit or roll back as one unit.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

import structlog
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError

from rental_reservations.db.readers.reservations import (
    get_booked_dates,
    get_paid_reservations_by_host,
    get_reservation,
    get_reservation_by_payment,
    get_reservations_by_check_in_range,
    get_reservations_by_room,
    get_reservations_by_user,
    get_reservations_overlapping,
    get_reservations_page_by_user,
)
from rental_reservations.db.readers.rooms import get_room_snapshot
from rental_reservations.db.writers import payments as payment_writer
from rental_reservations.db.writers import reservations as reservation_writer
from rental_reservations.errors import NotFound, ReservationConflict
from rental_reservations.models.reservations import NO_OVERLAP_CONSTRAINT
from rental_reservations.schemas.reservations import (
    BookedDates,
    PaymentRecord,
    ReservationPage,
    ReservationRecord,
    RoomSnapshot,
    User,
)
from rental_reservations.services.availability import check_available_date

logger = structlog.get_logger(__name__)


class ReservationStore:
    """
    Reservation persistence backed by a SQLAlchemy engine.

    Example:
        >>> store = ReservationStore(engine)
        >>> reservation = store.find_by_id(42)
        >>> store.delete_by_id(42)
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    # ------------------------------------------------------------------ reads

    def find_room(self, room_id: int) -> RoomSnapshot:
        with self.engine.connect() as conn:
            room = get_room_snapshot(conn, room_id)
        if room is None:
            raise NotFound(f"Room {room_id} not found")
        return room

    def find_by_id(self, reservation_id: int) -> ReservationRecord:
        """
        Fetch a reservation with its payment.

        Raises:
            NotFound: If no reservation has this ID
        """
        with self.engine.connect() as conn:
            reservation = get_reservation(conn, reservation_id)
        if reservation is None:
            raise NotFound(f"Reservation {reservation_id} not found")
        return reservation

    def find_by_room_id(self, room_id: int) -> list[ReservationRecord]:
        with self.engine.connect() as conn:
            return get_reservations_by_room(conn, room_id)

    def find_by_user(self, user: User) -> list[ReservationRecord]:
        with self.engine.connect() as conn:
            return get_reservations_by_user(conn, user.id)

    def find_by_user_paged(self, user: User, page: int, size: int = 10) -> ReservationPage:
        if page < 0 or size < 1:
            raise ValueError(f"Invalid page request page={page} size={size}")
        with self.engine.connect() as conn:
            items, total = get_reservations_page_by_user(conn, user.id, page, size)
        return ReservationPage(items=items, page=page, size=size, total=total)

    def find_by_date_range_and_room(
        self, room_id: int, start: date, end: date
    ) -> list[ReservationRecord]:
        with self.engine.connect() as conn:
            return get_reservations_by_check_in_range(conn, room_id, start, end)

    def find_overlapping_window(
        self, room_id: int, start: date, end: date
    ) -> list[ReservationRecord]:
        """
        Reservations of a room with at least one night in [start, end].
        """
        with self.engine.connect() as conn:
            return get_reservations_overlapping(conn, room_id, start, end)

    def find_by_host_with_payment(self, host: User) -> list[ReservationRecord]:
        with self.engine.connect() as conn:
            return get_paid_reservations_by_host(conn, host.id)

    def find_by_payment_id(self, payment_id: int) -> ReservationRecord:
        with self.engine.connect() as conn:
            reservation = get_reservation_by_payment(conn, payment_id)
        if reservation is None:
            raise NotFound(f"No reservation owns payment {payment_id}")
        return reservation

    def find_booked_dates(self, room_id: int, from_date: date) -> list[BookedDates]:
        with self.engine.connect() as conn:
            return get_booked_dates(conn, room_id, from_date)

    # ----------------------------------------------------------------- writes

    def save(self, reservation: ReservationRecord) -> ReservationRecord:
        """
        Insert a new reservation, or update an existing one when it has an ID.

        No availability check is made here; new bookings go through reserve().

        Raises:
            NotFound: If updating a reservation that no longer exists
        """
        with self.engine.begin() as conn:
            if reservation.id is None:
                reservation_id = reservation_writer.insert_reservation(conn, reservation)
                return reservation.model_copy(update={"id": reservation_id})

            updated = reservation_writer.update_reservation(
                conn,
                reservation.id,
                {
                    "guest_num": reservation.guest_num,
                    "total_cost": reservation.total_cost,
                    "payment_id": reservation.payment.id if reservation.payment else None,
                    "comment_id": reservation.comment_id,
                    "comment_existed": reservation.comment_existed,
                },
            )
        if not updated:
            raise NotFound(f"Reservation {reservation.id} not found")
        return reservation

    def reserve(self, reservation: ReservationRecord) -> ReservationRecord:
        """
        Check availability and insert a new reservation in one transaction.

        On PostgreSQL the reservations table also carries an exclusion
        constraint on (room_id, daterange(check_in, check_out)), so a concurrent
        insert that slipped past the read fails here instead of double-booking.

        Raises:
            ReservationConflict: If the window overlaps an existing reservation
        """
        try:
            with self.engine.begin() as conn:
                existing = get_reservations_by_room(conn, reservation.room_id)
                check_available_date(existing, reservation.check_in, reservation.check_out)
                reservation_id = reservation_writer.insert_reservation(conn, reservation)
        except IntegrityError as e:
            if NO_OVERLAP_CONSTRAINT in str(e.orig):
                logger.warning(
                    "reservation_race_lost",
                    room_id=reservation.room_id,
                    check_in=str(reservation.check_in),
                    check_out=str(reservation.check_out),
                )
                raise ReservationConflict(
                    f"Room {reservation.room_id} was booked concurrently for these dates"
                ) from e
            raise

        return reservation.model_copy(update={"id": reservation_id})

    def attach_payment(self, reservation_id: int, payment: PaymentRecord) -> ReservationRecord:
        """
        Persist a verified payment and attach it to its reservation atomically.

        Raises:
            NotFound: If the reservation does not exist (the payment is rolled back)
        """
        with self.engine.begin() as conn:
            saved = payment_writer.insert_payment(conn, payment)
            if not reservation_writer.attach_payment(conn, reservation_id, saved.id):
                raise NotFound(f"Reservation {reservation_id} not found")
            reservation = get_reservation(conn, reservation_id)
        if reservation is None:
            raise NotFound(f"Reservation {reservation_id} not found")
        return reservation

    def attach_comment(self, reservation_id: int, comment_id: int) -> ReservationRecord:
        with self.engine.begin() as conn:
            if not reservation_writer.attach_comment(conn, reservation_id, comment_id):
                raise NotFound(f"Reservation {reservation_id} not found")
            reservation = get_reservation(conn, reservation_id)
        if reservation is None:
            raise NotFound(f"Reservation {reservation_id} not found")
        return reservation

    def delete_by_id(self, reservation_id: int) -> None:
        """
        Delete a reservation.

        Raises:
            NotFound: If there was nothing to delete
        """
        with self.engine.begin() as conn:
            deleted = reservation_writer.delete_reservation(conn, reservation_id)
        if not deleted:
            raise NotFound(f"Reservation {reservation_id} not found")

    def delete_payment(self, payment_id: int) -> None:
        with self.engine.begin() as conn:
            deleted = payment_writer.delete_payment(conn, payment_id)
        if not deleted:
            raise NotFound(f"Payment {payment_id} not found")

    def delete_with_payment(self, reservation_id: int, payment_id: Optional[int]) -> None:
        """
        Delete a reservation and its payment in one transaction.

        Raises:
            NotFound: If the reservation was already deleted
        """
        with self.engine.begin() as conn:
            if not reservation_writer.delete_reservation(conn, reservation_id):
                raise NotFound(f"Reservation {reservation_id} not found")
            if payment_id is not None:
                payment_writer.delete_payment(conn, payment_id)
