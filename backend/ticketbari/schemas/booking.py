from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class BookingCreate(BaseModel):
    ticket_id: int
    booking_quantity: int = Field(..., ge=1, description="Number of seats requested")


class BookingOut(BaseModel):
    id: int
    ticket_id: int
    ticket_title: str
    from_location: str
    to_location: str
    departure_date_time: datetime
    user_email: str
    user_name: Optional[str] = None
    vendor_email: str
    booking_quantity: int
    unit_price: float
    total_price: float
    status: str
    created_at: datetime
    accepted_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    transaction_id: Optional[str] = None

    class Config:
        from_attributes = True
