from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PaymentIntentRequest(BaseModel):
    amount: float = Field(..., gt=0, description="Amount in major currency units")


class PaymentIntentOut(BaseModel):
    client_secret: str


class PaymentCreate(BaseModel):
    booking_id: int
    transaction_id: str = Field(..., min_length=1, max_length=255)
    # Optional cross-check; must equal the booking total when given
    amount: Optional[float] = Field(None, ge=0)


class PaymentOut(BaseModel):
    id: int
    booking_id: Optional[int] = None
    ticket_id: Optional[int] = None
    ticket_title: str
    user_email: str
    vendor_email: str
    amount: float
    booking_quantity: int
    transaction_id: str
    payment_date: datetime

    class Config:
        from_attributes = True
