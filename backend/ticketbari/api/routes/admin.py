import logging
from typing import List

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ticketbari.api.deps import require_admin
from ticketbari.core.security import utcnow
from ticketbari.db.session import get_db
from ticketbari.models.payment import Payment
from ticketbari.models.ticket import Ticket
from ticketbari.schemas.payment import PaymentOut
from ticketbari.schemas.ticket import AdvertiseUpdate, TicketOut, VerificationUpdate
from ticketbari.services import catalog, stats

router = APIRouter(dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)


@router.get("/tickets", response_model=List[TicketOut])
def list_all_tickets(db: Session = Depends(get_db)):
    return db.query(Ticket).order_by(Ticket.created_at.desc(), Ticket.id.desc()).all()


@router.patch("/tickets/advertise/{ticket_id}", response_model=TicketOut)
def toggle_advertise(ticket_id: int, payload: AdvertiseUpdate, request: Request, db: Session = Depends(get_db)):
    max_advertised = request.app.state.settings.max_advertised_tickets
    return catalog.set_advertised(db, ticket_id, payload.is_advertised, max_advertised)


@router.patch("/tickets/{ticket_id}", response_model=TicketOut)
def set_verification_status(ticket_id: int, payload: VerificationUpdate, db: Session = Depends(get_db)):
    ticket = catalog.get_ticket_or_404(db, ticket_id)
    ticket.verification_status = payload.verification_status
    ticket.verified_at = utcnow()
    if ticket.verification_status == "rejected":
        # a rejected ticket gives up its advertising slot
        ticket.is_advertised = False
    db.commit()
    db.refresh(ticket)
    logger.info("Ticket %s marked %s", ticket.id, ticket.verification_status)
    return ticket


@router.delete("/tickets/{ticket_id}")
def delete_ticket(ticket_id: int, db: Session = Depends(get_db)):
    ticket = catalog.get_ticket_or_404(db, ticket_id)
    removed = catalog.delete_ticket(db, ticket)
    return {"status": "deleted", "bookings_removed": removed}


@router.get("/payments", response_model=List[PaymentOut])
def list_all_payments(db: Session = Depends(get_db)):
    return db.query(Payment).order_by(Payment.payment_date.desc(), Payment.id.desc()).all()


@router.get("/stats", response_model=dict)
def admin_stats(db: Session = Depends(get_db)):
    return stats.admin_stats(db)
