import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ticketbari.core.errors import ForbiddenError, InvalidStateError
from ticketbari.core.security import utcnow
from ticketbari.models.payment import Payment
from ticketbari.models.ticket import Ticket
from ticketbari.services.bookings import BookingStatus, apply_transition, get_booking_or_404

logger = logging.getLogger(__name__)


def _cents(value) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"))


def record_payment(
    db: Session,
    user_email: str,
    booking_id: int,
    transaction_id: str,
    amount: Optional[float] = None,
) -> Payment:
    """Record a confirmed payment, mark its booking paid and take the seats off the ticket.

    The three writes share one transaction: either all of them commit or none do.
    """
    booking = get_booking_or_404(db, booking_id)
    if booking.user_email != user_email:
        raise ForbiddenError("You can only pay for your own bookings")
    if db.query(Payment.id).filter(Payment.transaction_id == transaction_id).first():
        raise InvalidStateError("Payment already recorded")
    if amount is not None and _cents(amount) != _cents(booking.total_price):
        raise InvalidStateError("Payment amount does not match booking total")

    now = utcnow()
    try:
        payment = Payment(
            booking_id=booking.id,
            ticket_id=booking.ticket_id,
            ticket_title=booking.ticket_title,
            user_email=booking.user_email,
            vendor_email=booking.vendor_email,
            amount=booking.total_price,
            booking_quantity=booking.booking_quantity,
            transaction_id=transaction_id,
            payment_date=now,
        )
        db.add(payment)
        apply_transition(db, booking, BookingStatus.PAID, now=now, transaction_id=transaction_id)
        decremented = (
            db.query(Ticket)
            .filter(Ticket.id == booking.ticket_id, Ticket.ticket_quantity >= booking.booking_quantity)
            .update({Ticket.ticket_quantity: Ticket.ticket_quantity - booking.booking_quantity}, synchronize_session=False)
        )
        if not decremented:
            raise InvalidStateError("Not enough tickets available")
        db.commit()
    except InvalidStateError:
        db.rollback()
        raise
    except IntegrityError:
        # lost a race on the unique transaction id
        db.rollback()
        raise InvalidStateError("Payment already recorded")
    db.refresh(payment)
    logger.info(
        "Payment %s recorded: booking %s, ticket %s, %d seat(s), txn %s",
        payment.id, booking.id, booking.ticket_id, booking.booking_quantity, transaction_id,
    )
    return payment
