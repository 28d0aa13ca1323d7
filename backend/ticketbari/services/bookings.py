"""Booking state machine.

    pending --accept--> accepted --pay--> paid
    pending --reject--> rejected
    pending --cancel--> cancelled

Every transition is a conditional UPDATE on the expected current status, so a
request racing another transition on the same booking gets InvalidStateError
instead of silently overwriting it.
"""
import logging
from datetime import datetime
from enum import Enum

from sqlalchemy.orm import Session

from ticketbari.core.errors import ForbiddenError, InvalidStateError, NotFoundError
from ticketbari.core.security import utcnow
from ticketbari.models.booking import Booking
from ticketbari.models.ticket import Ticket
from ticketbari.models.user import User

logger = logging.getLogger(__name__)


class BookingStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    PAID = "paid"


TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.PENDING: {BookingStatus.ACCEPTED, BookingStatus.REJECTED, BookingStatus.CANCELLED},
    BookingStatus.ACCEPTED: {BookingStatus.PAID},
    BookingStatus.REJECTED: set(),
    BookingStatus.CANCELLED: set(),
    BookingStatus.PAID: set(),
}

# column stamped when a booking enters the state
_TIMESTAMP_FIELDS = {
    BookingStatus.ACCEPTED: "accepted_at",
    BookingStatus.REJECTED: "rejected_at",
    BookingStatus.CANCELLED: "cancelled_at",
    BookingStatus.PAID: "paid_at",
}


def can_transition(current: str, target: BookingStatus) -> bool:
    try:
        return target in TRANSITIONS[BookingStatus(current)]
    except ValueError:
        return False


def get_booking_or_404(db: Session, booking_id: int) -> Booking:
    booking = db.get(Booking, booking_id)
    if not booking:
        raise NotFoundError("Booking not found")
    return booking


def apply_transition(db: Session, booking: Booking, target: BookingStatus, now: datetime | None = None, **extra) -> None:
    """Move ``booking`` to ``target`` inside the caller's transaction; does not commit."""
    current = booking.status
    if not can_transition(current, target):
        raise InvalidStateError(f"Cannot change booking from {current} to {target.value}")
    values = {Booking.status: target.value, getattr(Booking, _TIMESTAMP_FIELDS[target]): now or utcnow()}
    for key, value in extra.items():
        values[getattr(Booking, key)] = value
    updated = (
        db.query(Booking)
        .filter(Booking.id == booking.id, Booking.status == current)
        .update(values, synchronize_session=False)
    )
    if not updated:
        raise InvalidStateError("Booking was modified concurrently, reload and retry")


def create_booking(db: Session, user_email: str, ticket_id: int, quantity: int) -> Booking:
    # Lock the ticket row so the availability check holds until the insert commits
    ticket = db.query(Ticket).filter(Ticket.id == ticket_id).with_for_update().first()
    if not ticket:
        raise NotFoundError("Ticket not found")
    if ticket.verification_status != "approved" or ticket.is_hidden:
        db.rollback()
        raise InvalidStateError("Ticket is not available for booking")
    if ticket.ticket_quantity < quantity:
        db.rollback()
        raise InvalidStateError("Not enough tickets available")
    now = utcnow()
    if ticket.departure_date_time < now:
        db.rollback()
        raise InvalidStateError("Cannot book - departure time has passed")

    user = db.query(User).filter(User.email == user_email).first()
    booking = Booking(
        ticket_id=ticket.id,
        ticket_title=ticket.title,
        from_location=ticket.from_location,
        to_location=ticket.to_location,
        departure_date_time=ticket.departure_date_time,
        user_email=user_email,
        user_name=user.name if user else None,
        vendor_email=ticket.vendor_email,
        booking_quantity=quantity,
        unit_price=ticket.price,
        total_price=ticket.price * quantity,
        status=BookingStatus.PENDING.value,
        created_at=now,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s created by %s for ticket %s x%d", booking.id, user_email, ticket.id, quantity)
    return booking


def vendor_decide(db: Session, booking_id: int, vendor_email: str, target: BookingStatus) -> Booking:
    """Accept or reject a pending booking on one of the vendor's tickets."""
    booking = get_booking_or_404(db, booking_id)
    if booking.vendor_email != vendor_email:
        raise ForbiddenError("You can only manage bookings for your own tickets")
    apply_transition(db, booking, target)
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s %s by %s", booking.id, target.value, vendor_email)
    return booking


def cancel_booking(db: Session, booking_id: int, user_email: str) -> Booking:
    booking = get_booking_or_404(db, booking_id)
    if booking.user_email != user_email:
        raise ForbiddenError("You can only cancel your own bookings")
    if booking.status != BookingStatus.PENDING.value:
        raise InvalidStateError("Can only cancel pending bookings")
    apply_transition(db, booking, BookingStatus.CANCELLED)
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s cancelled by %s", booking.id, user_email)
    return booking
