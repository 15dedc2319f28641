from sqlalchemy import delete, insert
from sqlalchemy.engine import Connection

from rental_reservations.models.payments import Payment
from rental_reservations.schemas.reservations import PaymentRecord
from rental_reservations.utils.datetime import utc_now


def insert_payment(conn: Connection, payment: PaymentRecord) -> PaymentRecord:
    """
    Insert a verified payment.

    Args:
        conn (Connection): SQLAlchemy DB connection (within a transaction).
        payment (PaymentRecord): Payment to store; its id is ignored.

    Returns:
        PaymentRecord: The payment with its assigned ID.
    """
    stmt = (
        insert(Payment)
        .values(receipt_id=payment.receipt_id, price=payment.price, created_at=utc_now())
        .returning(Payment.id)
    )
    payment_id = conn.execute(stmt).scalar_one()
    return payment.model_copy(update={"id": int(payment_id)})


def delete_payment(conn: Connection, payment_id: int) -> int:
    """
    Permanently delete a payment.

    Returns:
        int: Number of rows deleted.
    """
    return conn.execute(delete(Payment).where(Payment.id == payment_id)).rowcount
