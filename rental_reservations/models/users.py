"""SQLAlchemy model for guests and hosts."""

from sqlalchemy import Column, Integer, String

from rental_reservations.models.base import Base


class User(Base):
    """
    ORM model for platform users.

    The same table holds guests and hosts; a user is a host when at least one
    room references it through rooms.host_id.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True)
    image_url = Column(String, nullable=True)
