"""
SQLAlchemy engine singleton with connection pooling.

A single engine is shared by the reservation store and the readiness probe.
Pool settings match a web workload where every lifecycle operation holds one
connection for the duration of its transaction.
"""

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from rental_reservations.config import DATABASE_URL

if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set.")

engine: Engine = create_engine(
    DATABASE_URL,
    future=True,
    pool_size=10,
    max_overflow=20,
    pool_pre_ping=True,  # Detect connections dropped by the server
    pool_recycle=3600,
    echo=False,
)


def check_engine_health(db_engine: Engine | None = None) -> bool:
    """
    Check if the database is reachable.

    Used by the /ready endpoint before the service accepts traffic.

    Args:
        db_engine: Engine to probe (default: the module engine)

    Returns:
        bool: True if a trivial query succeeds, False otherwise
    """
    try:
        with (db_engine or engine).connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
