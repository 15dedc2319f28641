from typing import Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from rental_reservations.models.rooms import Location, Room
from rental_reservations.schemas.reservations import Location as LocationSnapshot
from rental_reservations.schemas.reservations import RoomSnapshot


def get_room_snapshot(conn: Connection, room_id: int) -> Optional[RoomSnapshot]:
    """
    Fetch the cost fields and address of a room.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        room_id (int): Room ID.

    Returns:
        Optional[RoomSnapshot]: Room snapshot, or None if the room does not exist.
    """
    stmt = (
        select(
            Room.id,
            Room.name,
            Room.host_id,
            Room.room_cost,
            Room.cleaning_cost,
            Room.tax,
            Room.bed_num,
            Room.bedroom_num,
            Room.bathroom_num,
            Room.people_limit,
            Location.id.label("location_id"),
            Location.country,
            Location.city,
            Location.borough,
            Location.neighborhood,
            Location.detail_address,
            Location.latitude,
            Location.longitude,
        )
        .outerjoin(Location, Room.location_id == Location.id)
        .where(Room.id == room_id)
    )
    row = conn.execute(stmt).mappings().fetchone()
    if row is None:
        return None

    location = None
    if row["location_id"] is not None:
        location = LocationSnapshot(
            country=row["country"],
            city=row["city"],
            borough=row["borough"],
            neighborhood=row["neighborhood"],
            detail_address=row["detail_address"],
            latitude=row["latitude"],
            longitude=row["longitude"],
        )

    return RoomSnapshot(
        id=row["id"],
        name=row["name"],
        host_id=row["host_id"],
        room_cost=row["room_cost"],
        cleaning_cost=row["cleaning_cost"],
        tax=row["tax"],
        bed_num=row["bed_num"],
        bedroom_num=row["bedroom_num"],
        bathroom_num=row["bathroom_num"],
        people_limit=row["people_limit"],
        location=location,
    )
