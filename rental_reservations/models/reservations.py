# models/reservations.py

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    false,
)
from sqlalchemy.sql import func

from rental_reservations.models.base import Base

# PostgreSQL exclusion constraint created by the initial migration.
# Inserts that lose an availability race fail on it with an IntegrityError.
NO_OVERLAP_CONSTRAINT = "reservations_no_overlap_per_room"


class Reservation(Base):
    """
    ORM model for a guest booking of a room over [check_in, check_out).

    A reservation is pending while payment_id is NULL and paid once a verified
    payment is attached. Cancelling deletes the row together with its payment.
    """

    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("check_in < check_out", name="ck_reservations_check_in_before_check_out"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    room_id = Column(
        Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    check_in = Column(Date, nullable=False)
    check_out = Column(Date, nullable=False)
    guest_num = Column(Integer, nullable=False)
    total_cost = Column(Float, nullable=False)
    payment_id = Column(
        Integer, ForeignKey("payments.id", ondelete="SET NULL"), nullable=True, unique=True
    )
    comment_id = Column(Integer, ForeignKey("comments.id", ondelete="SET NULL"), nullable=True)
    comment_existed = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
