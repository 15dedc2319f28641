"""Reservation lifecycle: create, pay, comment and cancel."""

from __future__ import annotations

from datetime import date
from typing import Optional

import structlog

from rental_reservations.db.store import ReservationStore
from rental_reservations.errors import (
    GatewayError,
    NotFound,
    PaymentVerificationFailed,
    ReservationAlreadyPaid,
    ReservationConflict,
)
from rental_reservations.gateway.client import PaymentGateway
from rental_reservations.metrics import (
    payments_processed,
    reservation_conflicts,
    reservations_cancelled,
    reservations_created,
)
from rental_reservations.schemas.reservations import (
    BookedDates,
    CancelRequest,
    CommentRecord,
    PaymentRecord,
    ReservationPage,
    ReservationRecord,
    RoomSnapshot,
    User,
)
from rental_reservations.services.availability import check_strange_date
from rental_reservations.utils.datetime import utc_today

logger = structlog.get_logger(__name__)

# Service fee applied on top of the nightly rate
SERVICE_FEE_RATE = 1.1


def calc_cost(room: RoomSnapshot, check_in: date, check_out: date) -> float:
    """
    Authoritative price of a stay.

    One-off tax and cleaning fee plus the nightly rate with service fee for
    every night in [check_in, check_out).
    """
    nights = (check_out - check_in).days
    return room.tax + room.cleaning_cost + room.room_cost * SERVICE_FEE_RATE * nights


class ReservationService:
    """
    Orchestrates reservation creation, payment confirmation and cancellation.

    The acting user is passed to every operation. A reservation that belongs to
    another user is reported as NotFound, the same as a missing one.
    """

    def __init__(self, store: ReservationStore, gateway: PaymentGateway):
        self.store = store
        self.gateway = gateway

    def create(
        self,
        user: User,
        room: RoomSnapshot,
        check_in: date,
        check_out: date,
        guest_num: int,
        total_cost: float,
        today: Optional[date] = None,
    ) -> ReservationRecord:
        """
        Book a room for [check_in, check_out).

        Raises:
            InvalidDateRange: Past or inverted dates
            ReservationConflict: The room is already booked for an overlapping window
        """
        check_strange_date(check_in, check_out, today)

        reservation = ReservationRecord(
            room_id=room.id,
            user_id=user.id,
            check_in=check_in,
            check_out=check_out,
            guest_num=guest_num,
            total_cost=total_cost,
        )
        try:
            saved = self.store.reserve(reservation)
        except ReservationConflict:
            reservation_conflicts.inc()
            raise

        reservations_created.inc()
        logger.info(
            "reservation_created",
            reservation_id=saved.id,
            room_id=room.id,
            user_id=user.id,
            check_in=str(check_in),
            check_out=str(check_out),
        )
        return saved

    def confirm_with_payment(
        self, user: User, reservation: ReservationRecord, payment: PaymentRecord
    ) -> ReservationRecord:
        """
        Verify a gateway receipt, attach it to the reservation and capture it.

        Nothing is written unless the gateway verifies the receipt against the
        computed cost. If the final confirm call fails, the payment stays
        attached and the GatewayError is raised for the caller to reconcile.

        The stored row is re-read by id, so ownership and cost never depend
        on the fields of the record passed in.

        Raises:
            NotFound: Reservation missing or owned by someone else
            ReservationAlreadyPaid: A payment is already attached
            PaymentVerificationFailed: Receipt unpaid or amount mismatch
            GatewayError: Gateway unreachable or rejected the call
        """
        reservation = self._load_for_user(user, reservation)
        if reservation.is_paid:
            payments_processed.labels(status="already_paid").inc()
            logger.warning(
                "payment_rejected_already_paid",
                reservation_id=reservation.id,
                receipt_id=payment.receipt_id,
            )
            raise ReservationAlreadyPaid(f"Reservation {reservation.id} is already paid")

        room = self.store.find_room(reservation.room_id)
        expected_cost = calc_cost(room, reservation.check_in, reservation.check_out)

        try:
            token = self.gateway.get_access_token()
            self.gateway.verify(token, payment.receipt_id, expected_cost)
        except PaymentVerificationFailed:
            payments_processed.labels(status="verification_failed").inc()
            raise
        except GatewayError:
            payments_processed.labels(status="gateway_error").inc()
            raise

        saved = self.store.attach_payment(reservation.id, payment)

        try:
            self.gateway.confirm(token, payment.receipt_id)
        except GatewayError:
            payments_processed.labels(status="gateway_error").inc()
            logger.error(
                "payment_confirm_failed_after_persist",
                reservation_id=saved.id,
                payment_id=saved.payment.id if saved.payment else None,
                receipt_id=payment.receipt_id,
            )
            raise

        payments_processed.labels(status="confirmed").inc()
        logger.info(
            "reservation_paid",
            reservation_id=saved.id,
            receipt_id=payment.receipt_id,
            price=payment.price,
        )
        return saved

    def cancel(self, user: User, reservation_id: int, cancel_request: CancelRequest) -> None:
        """
        Cancel a reservation, refunding its payment through the gateway.

        The refund is requested before anything is deleted locally, so a
        gateway failure leaves the reservation and payment in place and the
        cancellation can be retried. Unpaid reservations are simply deleted.

        Raises:
            NotFound: Reservation missing or owned by someone else
            GatewayError: The gateway refused or could not be reached
        """
        reservation = self.get_for_user(user, reservation_id)
        payment = reservation.payment

        if payment is not None:
            cancel_request = cancel_request.model_copy(update={"receipt_id": payment.receipt_id})
            token = self.gateway.get_access_token(fresh=True)
            self.gateway.cancel(cancel_request, token)

        self.store.delete_with_payment(reservation_id, payment.id if payment else None)

        reservations_cancelled.labels(paid=str(payment is not None).lower()).inc()
        logger.info(
            "reservation_cancelled",
            reservation_id=reservation_id,
            user_id=user.id,
            refunded=payment is not None,
            reason=cancel_request.reason,
        )

    def attach_comment(
        self, user: User, reservation: ReservationRecord, comment: CommentRecord
    ) -> ReservationRecord:
        """
        Link a guest review to the reservation and flag that a review exists.
        """
        reservation = self._load_for_user(user, reservation)
        updated = self.store.attach_comment(reservation.id, comment.id)
        logger.info("reservation_commented", reservation_id=reservation.id, comment_id=comment.id)
        return updated

    def get_for_user(self, user: User, reservation_id: int) -> ReservationRecord:
        """
        Fetch one of the user's reservations.

        Raises:
            NotFound: Reservation missing or owned by someone else
        """
        reservation = self.store.find_by_id(reservation_id)
        self._ensure_owner(user, reservation)
        return reservation

    def list_for_user(self, user: User) -> list[ReservationRecord]:
        return self.store.find_by_user(user)

    def page_for_user(self, user: User, page: int, size: int = 10) -> ReservationPage:
        return self.store.find_by_user_paged(user, page, size)

    def booked_dates(self, room_id: int, from_date: Optional[date] = None) -> list[BookedDates]:
        """Reserved windows of a room that are still running or upcoming."""
        return self.store.find_booked_dates(room_id, from_date or utc_today())

    def _load_for_user(self, user: User, reservation: ReservationRecord) -> ReservationRecord:
        if reservation.id is None:
            raise NotFound("Reservation has not been saved")
        return self.get_for_user(user, reservation.id)

    @staticmethod
    def _ensure_owner(user: User, reservation: ReservationRecord) -> None:
        if reservation.user_id != user.id:
            logger.warning(
                "reservation_access_denied", reservation_id=reservation.id, user_id=user.id
            )
            raise NotFound(f"Reservation {reservation.id} not found for user {user.id}")
