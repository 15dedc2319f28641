"""
Error types raised by the reservation core.

Validation and conflict errors are raised before any write happens. Gateway
errors are raised after logging and are never retried automatically.
"""

from __future__ import annotations


class ReservationError(Exception):
    """Base class for all reservation core errors."""


class InvalidDateRange(ReservationError):
    """Check-in is in the past, or check-out is not after check-in."""


class ReservationConflict(ReservationError):
    """The requested dates overlap an existing reservation for the same room."""


class NotFound(ReservationError):
    """
    Unknown reservation, room or payment id.

    Also raised when a reservation exists but does not belong to the acting
    user, so callers cannot probe for other users' reservation ids.
    """


class PaymentVerificationFailed(ReservationError):
    """The gateway rejected the receipt or its amount does not match the expected cost."""


class GatewayError(ReservationError):
    """Network or protocol failure talking to the payment gateway."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ReservationAlreadyPaid(ReservationError):
    """A payment is already attached; a second receipt would charge the guest twice."""
