from typing import Any

import structlog
from sqlalchemy import delete, insert, update
from sqlalchemy.engine import Connection

from rental_reservations.models.reservations import Reservation
from rental_reservations.schemas.reservations import ReservationRecord
from rental_reservations.utils.datetime import utc_now

logger = structlog.get_logger(__name__)


def insert_reservation(conn: Connection, reservation: ReservationRecord) -> int:
    """
    Insert a new reservation row.

    Args:
        conn (Connection): SQLAlchemy DB connection (within a transaction).
        reservation (ReservationRecord): Reservation to insert; its id is ignored.

    Returns:
        int: Assigned reservation ID.
    """
    now = utc_now()
    stmt = (
        insert(Reservation)
        .values(
            room_id=reservation.room_id,
            user_id=reservation.user_id,
            check_in=reservation.check_in,
            check_out=reservation.check_out,
            guest_num=reservation.guest_num,
            total_cost=reservation.total_cost,
            payment_id=reservation.payment.id if reservation.payment else None,
            comment_id=reservation.comment_id,
            comment_existed=reservation.comment_existed,
            created_at=now,
            updated_at=now,
        )
        .returning(Reservation.id)
    )
    return int(conn.execute(stmt).scalar_one())


def update_reservation(conn: Connection, reservation_id: int, data: dict[str, Any]) -> int:
    """
    Update reservation fields.

    Args:
        conn (Connection): SQLAlchemy DB connection.
        reservation_id (int): Reservation ID.
        data (dict): Column values to set.

    Returns:
        int: Number of rows updated (0 if the reservation does not exist).
    """
    data["updated_at"] = utc_now()
    stmt = update(Reservation).where(Reservation.id == reservation_id).values(**data)
    return conn.execute(stmt).rowcount


def attach_payment(conn: Connection, reservation_id: int, payment_id: int) -> int:
    """
    Point a reservation at its verified payment.
    """
    return update_reservation(conn, reservation_id, {"payment_id": payment_id})


def attach_comment(conn: Connection, reservation_id: int, comment_id: int) -> int:
    """
    Point a reservation at the guest's review and flag that a review exists.
    """
    return update_reservation(
        conn, reservation_id, {"comment_id": comment_id, "comment_existed": True}
    )


def delete_reservation(conn: Connection, reservation_id: int) -> int:
    """
    Permanently delete a reservation.

    Returns:
        int: Number of rows deleted (0 if the reservation does not exist).
    """
    result = conn.execute(delete(Reservation).where(Reservation.id == reservation_id))
    logger.debug("reservation_row_deleted", reservation_id=reservation_id, rows=result.rowcount)
    return result.rowcount
