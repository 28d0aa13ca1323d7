from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ticketbari.api.deps import ensure_self, get_current_email, require_vendor
from ticketbari.db.session import get_db
from ticketbari.models.booking import Booking
from ticketbari.models.user import User
from ticketbari.schemas.booking import BookingCreate, BookingOut
from ticketbari.services import bookings as booking_service
from ticketbari.services.bookings import BookingStatus

router = APIRouter()


@router.post("", response_model=BookingOut)
@router.post("/", response_model=BookingOut)
def create_booking(payload: BookingCreate, db: Session = Depends(get_db), email: str = Depends(get_current_email)):
    return booking_service.create_booking(db, email, payload.ticket_id, payload.booking_quantity)


@router.get("/user/{email}", response_model=List[BookingOut])
def user_bookings(email: str, db: Session = Depends(get_db), caller: str = Depends(get_current_email)):
    ensure_self(email, caller)
    return db.query(Booking).filter(Booking.user_email == caller).order_by(Booking.created_at.desc(), Booking.id.desc()).all()


@router.get("/vendor/{email}", response_model=List[BookingOut])
def vendor_bookings(email: str, db: Session = Depends(get_db), vendor: User = Depends(require_vendor)):
    ensure_self(email, vendor.email)
    return db.query(Booking).filter(Booking.vendor_email == vendor.email).order_by(Booking.created_at.desc(), Booking.id.desc()).all()


@router.patch("/accept/{booking_id}", response_model=BookingOut)
def accept_booking(booking_id: int, db: Session = Depends(get_db), vendor: User = Depends(require_vendor)):
    return booking_service.vendor_decide(db, booking_id, vendor.email, BookingStatus.ACCEPTED)


@router.patch("/reject/{booking_id}", response_model=BookingOut)
def reject_booking(booking_id: int, db: Session = Depends(get_db), vendor: User = Depends(require_vendor)):
    return booking_service.vendor_decide(db, booking_id, vendor.email, BookingStatus.REJECTED)


@router.patch("/cancel/{booking_id}", response_model=BookingOut)
def cancel_booking(booking_id: int, db: Session = Depends(get_db), email: str = Depends(get_current_email)):
    return booking_service.cancel_booking(db, booking_id, email)
