"""Ticket catalog workflows: public search, vendor ownership, admin moderation."""
import logging
import math
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Query, Session, aliased

from ticketbari.core.errors import ForbiddenError, InvalidStateError, NotFoundError
from ticketbari.core.security import utcnow
from ticketbari.models.booking import Booking
from ticketbari.models.payment import Payment
from ticketbari.models.ticket import Ticket
from ticketbari.models.user import User

logger = logging.getLogger(__name__)

PRICE_SORTS = {"lowToHigh", "highToLow"}


def _like(term: str) -> str:
    # escape LIKE wildcards so user input is matched literally
    escaped = term.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def visible_tickets(db: Session) -> Query:
    """Tickets the public may see: approved and not hidden."""
    return db.query(Ticket).filter(Ticket.verification_status == "approved", Ticket.is_hidden.is_(False))


def search_tickets(
    db: Session,
    *,
    from_location: Optional[str] = None,
    to_location: Optional[str] = None,
    search: Optional[str] = None,
    transport_type: Optional[str] = None,
    sort_price: Optional[str] = None,
    page: int = 1,
    limit: int = 9,
) -> dict:
    q = visible_tickets(db)
    if from_location:
        q = q.filter(Ticket.from_location.ilike(_like(from_location), escape="\\"))
    if to_location:
        q = q.filter(Ticket.to_location.ilike(_like(to_location), escape="\\"))
    if search:
        s = _like(search)
        q = q.filter(or_(
            Ticket.from_location.ilike(s, escape="\\"),
            Ticket.to_location.ilike(s, escape="\\"),
            Ticket.title.ilike(s, escape="\\"),
        ))
    if transport_type and transport_type != "all":
        q = q.filter(Ticket.transport_type == transport_type)

    if sort_price == "lowToHigh":
        q = q.order_by(Ticket.price.asc(), Ticket.id.asc())
    elif sort_price == "highToLow":
        q = q.order_by(Ticket.price.desc(), Ticket.id.asc())
    else:
        q = q.order_by(Ticket.created_at.desc(), Ticket.id.desc())

    total = q.count()
    items = q.offset((page - 1) * limit).limit(limit).all()
    logger.info(
        "Ticket search from=%s to=%s transport=%s found=%d",
        from_location or "all", to_location or "all", transport_type or "all", total,
    )
    return {
        "tickets": items,
        "total": total,
        "total_pages": math.ceil(total / limit),
        "current_page": page,
    }


def get_ticket_or_404(db: Session, ticket_id: int) -> Ticket:
    ticket = db.get(Ticket, ticket_id)
    if not ticket:
        raise NotFoundError("Ticket not found")
    return ticket


def get_owned_mutable_ticket(db: Session, ticket_id: int, vendor_email: str) -> Ticket:
    """Load a ticket the vendor may still edit or delete."""
    ticket = get_ticket_or_404(db, ticket_id)
    if ticket.vendor_email != vendor_email:
        raise ForbiddenError("You can only manage your own tickets")
    if ticket.verification_status == "rejected":
        raise InvalidStateError("Cannot modify rejected tickets")
    return ticket


def create_ticket(db: Session, vendor: User, data: dict) -> Ticket:
    if vendor.is_fraud:
        raise ForbiddenError("Fraud vendors cannot add tickets")
    ticket = Ticket(
        **data,
        vendor_email=vendor.email,
        verification_status="pending",
        is_advertised=False,
        is_hidden=False,
        created_at=utcnow(),
    )
    if not ticket.vendor_name:
        ticket.vendor_name = vendor.name
    db.add(ticket)
    db.commit()
    db.refresh(ticket)
    logger.info("Ticket %s created by %s", ticket.id, vendor.email)
    return ticket


def set_advertised(db: Session, ticket_id: int, advertised: bool, max_advertised: int) -> Ticket:
    ticket = get_ticket_or_404(db, ticket_id)
    if not advertised:
        ticket.is_advertised = False
        db.commit()
        db.refresh(ticket)
        return ticket
    if ticket.is_advertised:
        return ticket
    # Count and flag in one statement so two admins cannot both take the last slot
    other = aliased(Ticket)
    advertised_count = select(func.count(other.id)).where(other.is_advertised.is_(True)).scalar_subquery()
    updated = (
        db.query(Ticket)
        .filter(Ticket.id == ticket_id, advertised_count < max_advertised)
        .update({Ticket.is_advertised: True}, synchronize_session=False)
    )
    if not updated:
        db.rollback()
        logger.info("Advertise refused for ticket %s: cap of %d reached", ticket_id, max_advertised)
        raise InvalidStateError(f"Cannot advertise more than {max_advertised} tickets")
    db.commit()
    db.refresh(ticket)
    return ticket


def delete_ticket(db: Session, ticket: Ticket) -> int:
    """Delete a ticket with its bookings. Returns how many bookings went with it.

    Payments stay on record with their ticket and booking references cleared.
    """
    ticket_id = ticket.id
    booking_ids = select(Booking.id).where(Booking.ticket_id == ticket_id)
    db.query(Payment).filter(or_(Payment.ticket_id == ticket_id, Payment.booking_id.in_(booking_ids))).update(
        {Payment.ticket_id: None, Payment.booking_id: None}, synchronize_session=False
    )
    removed = db.query(Booking).filter(Booking.ticket_id == ticket_id).delete(synchronize_session=False)
    db.delete(ticket)
    db.commit()
    logger.info("Ticket %s deleted with %d booking(s)", ticket_id, removed)
    return removed


def mark_vendor_fraud(db: Session, user_id: int) -> tuple[User, int]:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    user.is_fraud = True
    user.fraud_marked_at = utcnow()
    hidden = (
        db.query(Ticket)
        .filter(Ticket.vendor_email == user.email)
        .update({Ticket.is_hidden: True}, synchronize_session=False)
    )
    db.commit()
    db.refresh(user)
    logger.warning("User %s marked as fraud, %d ticket(s) hidden", user.email, hidden)
    return user, hidden
