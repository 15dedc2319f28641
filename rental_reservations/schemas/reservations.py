from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """
    Acting principal for a reservation operation (guest or host).
    """

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="User ID")
    name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Login email")


class Location(BaseModel):
    """
    Address of a room.
    """

    model_config = ConfigDict(from_attributes=True)

    country: Optional[str] = None
    city: Optional[str] = None
    borough: Optional[str] = None
    neighborhood: Optional[str] = None
    detail_address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def full_address(self) -> str:
        parts = [self.country, self.city, self.borough, self.neighborhood, self.detail_address]
        return " ".join(p for p in parts if p)


class RoomSnapshot(BaseModel):
    """
    Read-only view of a bookable room as seen by the reservation core.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Room ID")
    name: str = Field(..., description="Listing title")
    host_id: int = Field(..., description="User ID of the host")
    room_cost: float = Field(..., description="Nightly rate")
    cleaning_cost: float = Field(0.0, description="One-off cleaning fee per stay")
    tax: float = Field(0.0, description="One-off tax per stay")
    bed_num: int = 0
    bedroom_num: int = 0
    bathroom_num: int = 0
    people_limit: Optional[int] = None
    location: Optional[Location] = None


class PaymentRecord(BaseModel):
    """
    Gateway charge linked to a reservation. id is None until persisted.
    """

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    receipt_id: str = Field(..., description="Gateway receipt identifier")
    price: float = Field(..., description="Charged amount")


class CommentRecord(BaseModel):
    """
    Guest review attached to a finished reservation.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    content: str


class ReservationRecord(BaseModel):
    """
    A room booking over the half-open window [check_in, check_out).

    payment is populated whenever a payment is attached; a reservation without
    one is still pending.
    """

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    room_id: int
    user_id: int
    check_in: date
    check_out: date
    guest_num: int
    total_cost: float
    payment: Optional[PaymentRecord] = None
    comment_id: Optional[int] = None
    comment_existed: bool = False

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    @property
    def is_paid(self) -> bool:
        return self.payment is not None

    def trip_status(self, today: date) -> str:
        """
        Status label shown in a guest's reservation list.

        Returns "completed" once check-out is in the past, "reserved" otherwise.
        """
        if self.check_out < today:
            return "completed"
        return "reserved"


class CancelRequest(BaseModel):
    """
    Cancellation sent to the payment gateway.

    receipt_id is filled in from the reservation's payment before the request
    is sent. price is only set for partial refunds.
    """

    receipt_id: Optional[str] = Field(None, description="Gateway receipt to cancel")
    name: str = Field(..., description="Name of the person requesting the cancellation")
    reason: str = Field(..., description="Cancellation reason")
    price: Optional[float] = Field(None, description="Partial refund amount")


class ReservationPage(BaseModel):
    """
    One page of a user's reservations (page numbers start at 0).
    """

    items: list[ReservationRecord]
    page: int
    size: int
    total: int


class BookedDates(BaseModel):
    """
    Reserved window of a room, used to grey out calendar days.
    """

    check_in: date
    check_out: date


class IncomeResponse(BaseModel):
    """
    A host's income for one year, bucketed by check-in month (1 = January).
    """

    year: int
    by_month: dict[int, float] = Field(
        default_factory=lambda: {month: 0.0 for month in range(1, 13)}
    )

    def add(self, price: float, month: int) -> None:
        if month not in self.by_month:
            raise ValueError(f"Month must be between 1 and 12, got {month}")
        self.by_month[month] += price

    @property
    def total(self) -> float:
        return sum(self.by_month.values())

    def as_list(self) -> list[float]:
        return [self.by_month[month] for month in range(1, 13)]
