"""SQLAlchemy models for payments and guest comments attached to reservations."""

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from rental_reservations.models.base import Base


class Payment(Base):
    """
    ORM model for a verified gateway charge.

    receipt_id is the gateway's identifier for the charge. The owning
    reservation points at this row; the reverse lookup is a query on
    reservations.payment_id.
    """

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    receipt_id = Column(String, nullable=False, unique=True)
    price = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Comment(Base):
    """ORM model for a guest review left after a stay."""

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
