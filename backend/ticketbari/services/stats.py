"""Read-only dashboard aggregates."""
from sqlalchemy import func
from sqlalchemy.orm import Session

from ticketbari.models.booking import Booking
from ticketbari.models.payment import Payment
from ticketbari.models.ticket import Ticket
from ticketbari.models.user import User
from ticketbari.services.catalog import visible_tickets

# Shown while there are no bookings to measure
DEFAULT_SATISFACTION_RATE = 98


def _count(db: Session, column, *criteria) -> int:
    return db.query(func.count(column)).filter(*criteria).scalar() or 0


def _sum(db: Session, column, *criteria) -> float:
    return float(db.query(func.coalesce(func.sum(column), 0)).filter(*criteria).scalar() or 0)


def public_stats(db: Session) -> dict:
    total_bookings = _count(db, Booking.id)
    paid_bookings = _count(db, Booking.id, Booking.status == "paid")
    routes = db.query(Ticket.from_location, Ticket.to_location).distinct().count()
    if total_bookings:
        satisfaction_rate = round(paid_bookings / total_bookings * 100)
    else:
        satisfaction_rate = DEFAULT_SATISFACTION_RATE
    return {
        "total_users": _count(db, User.id),
        "total_tickets_sold": int(_sum(db, Booking.booking_quantity, Booking.status == "paid")),
        "total_routes": routes,
        "satisfaction_rate": satisfaction_rate,
        "total_vendors": _count(db, User.id, User.role == "vendor"),
        "total_tickets": _count(db, Ticket.id, Ticket.verification_status == "approved"),
    }


def admin_stats(db: Session) -> dict:
    return {
        "total_users": _count(db, User.id),
        "total_vendors": _count(db, User.id, User.role == "vendor"),
        "total_tickets": _count(db, Ticket.id),
        "pending_tickets": _count(db, Ticket.id, Ticket.verification_status == "pending"),
        "total_bookings": _count(db, Booking.id),
        "total_revenue": _sum(db, Payment.amount),
    }


def vendor_stats(db: Session, email: str) -> dict:
    return {
        "total_revenue": _sum(db, Payment.amount, Payment.vendor_email == email),
        "total_tickets_sold": int(_sum(db, Payment.booking_quantity, Payment.vendor_email == email)),
        "total_tickets_added": _count(db, Ticket.id, Ticket.vendor_email == email),
        "pending_bookings": _count(db, Booking.id, Booking.vendor_email == email, Booking.status == "pending"),
    }


def user_stats(db: Session, email: str) -> dict:
    return {
        "total_bookings": _count(db, Booking.id, Booking.user_email == email),
        "pending_bookings": _count(db, Booking.id, Booking.user_email == email, Booking.status == "pending"),
        "paid_bookings": _count(db, Booking.id, Booking.user_email == email, Booking.status == "paid"),
        "total_spent": _sum(db, Payment.amount, Payment.user_email == email),
        "tickets_purchased": int(_sum(db, Payment.booking_quantity, Payment.user_email == email)),
    }


def locations(db: Session) -> dict:
    rows = visible_tickets(db).with_entities(Ticket.from_location, Ticket.to_location).all()
    return {
        "from_locations": sorted({r.from_location for r in rows}),
        "to_locations": sorted({r.to_location for r in rows}),
    }
