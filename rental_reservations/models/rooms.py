"""SQLAlchemy models for bookable rooms and their addresses."""

from sqlalchemy import Column, Float, ForeignKey, Integer, String

from rental_reservations.models.base import Base


class Location(Base):
    """ORM model for the street address and coordinates of a room."""

    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    country = Column(String, nullable=True)
    city = Column(String, nullable=True)
    borough = Column(String, nullable=True)
    neighborhood = Column(String, nullable=True)
    detail_address = Column(String, nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)


class Room(Base):
    """
    ORM model for a bookable unit.

    The reservation core only reads rooms. room_cost is the nightly rate;
    cleaning_cost and tax are charged once per stay.
    """

    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    host_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    location_id = Column(Integer, ForeignKey("locations.id"), nullable=True)
    room_cost = Column(Float, nullable=False)
    cleaning_cost = Column(Float, nullable=False, default=0.0)
    tax = Column(Float, nullable=False, default=0.0)
    bed_num = Column(Integer, nullable=False, default=0)
    bedroom_num = Column(Integer, nullable=False, default=0)
    bathroom_num = Column(Integer, nullable=False, default=0)
    people_limit = Column(Integer, nullable=True)
