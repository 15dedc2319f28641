from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Rooms, users, payments, comments and reservations share this metadata so
    the Alembic environment and test fixtures can create the whole schema at once.
    """

    pass
