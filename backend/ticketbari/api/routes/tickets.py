from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ticketbari.api.deps import ensure_self, get_current_email, require_vendor
from ticketbari.core.security import utcnow
from ticketbari.db.session import get_db
from ticketbari.models.ticket import Ticket
from ticketbari.models.user import User
from ticketbari.schemas.ticket import TicketCreate, TicketOut, TicketPage, TicketUpdate
from ticketbari.services import catalog

router = APIRouter()

ADVERTISED_LIMIT = 6
LATEST_LIMIT = 8


@router.post("", response_model=TicketOut)
@router.post("/", response_model=TicketOut)
def create_ticket(payload: TicketCreate, db: Session = Depends(get_db), vendor: User = Depends(require_vendor)):
    return catalog.create_ticket(db, vendor, payload.model_dump())


@router.get("", response_model=TicketPage)
@router.get("/", response_model=TicketPage)
def list_tickets(
    db: Session = Depends(get_db),
    search: Optional[str] = None,
    from_location: Optional[str] = Query(None, alias="from", description="From location, case-insensitive substring"),
    to_location: Optional[str] = Query(None, alias="to", description="To location, case-insensitive substring"),
    transport_type: Optional[str] = Query(None, description="Exact transport type, 'all' disables the filter"),
    sort_price: Optional[str] = Query(None, pattern="^(lowToHigh|highToLow)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(9, ge=1, le=100),
):
    """Public catalogue: approved, visible tickets, newest first unless sorted by price."""
    return catalog.search_tickets(
        db,
        from_location=from_location,
        to_location=to_location,
        search=search,
        transport_type=transport_type,
        sort_price=sort_price,
        page=page,
        limit=limit,
    )


@router.get("/advertised", response_model=List[TicketOut])
def advertised_tickets(db: Session = Depends(get_db)):
    return (
        catalog.visible_tickets(db)
        .filter(Ticket.is_advertised.is_(True))
        .order_by(Ticket.id.asc())
        .limit(ADVERTISED_LIMIT)
        .all()
    )


@router.get("/latest", response_model=List[TicketOut])
def latest_tickets(db: Session = Depends(get_db)):
    return catalog.visible_tickets(db).order_by(Ticket.created_at.desc(), Ticket.id.desc()).limit(LATEST_LIMIT).all()


@router.get("/vendor/{email}", response_model=List[TicketOut])
def vendor_tickets(email: str, db: Session = Depends(get_db), vendor: User = Depends(require_vendor)):
    ensure_self(email, vendor.email)
    return db.query(Ticket).filter(Ticket.vendor_email == vendor.email).order_by(Ticket.created_at.desc(), Ticket.id.desc()).all()


@router.get("/{ticket_id}", response_model=TicketOut, dependencies=[Depends(get_current_email)])
def get_ticket(ticket_id: int, db: Session = Depends(get_db)):
    return catalog.get_ticket_or_404(db, ticket_id)


@router.patch("/{ticket_id}", response_model=TicketOut)
def update_ticket(ticket_id: int, payload: TicketUpdate, db: Session = Depends(get_db), vendor: User = Depends(require_vendor)):
    ticket = catalog.get_owned_mutable_ticket(db, ticket_id, vendor.email)
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(ticket, key, value)
    ticket.updated_at = utcnow()
    db.commit()
    db.refresh(ticket)
    return ticket


@router.delete("/{ticket_id}")
def delete_ticket(ticket_id: int, db: Session = Depends(get_db), vendor: User = Depends(require_vendor)):
    ticket = catalog.get_owned_mutable_ticket(db, ticket_id, vendor.email)
    removed = catalog.delete_ticket(db, ticket)
    return {"status": "deleted", "bookings_removed": removed}
