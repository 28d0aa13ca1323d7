from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ticketbari.core.security import to_naive_utc

VerificationStatus = Literal["pending", "approved", "rejected"]


class TicketBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    from_location: str = Field(..., min_length=1, max_length=128)
    to_location: str = Field(..., min_length=1, max_length=128)
    transport_type: str = Field(..., min_length=1, max_length=32)
    price: float = Field(..., ge=0)
    ticket_quantity: int = Field(..., ge=0)
    departure_date_time: datetime
    perks: List[str] = Field(default_factory=list)
    image: Optional[str] = None
    vendor_name: Optional[str] = None

    @field_validator("departure_date_time")
    @classmethod
    def _naive_utc(cls, v: datetime) -> datetime:
        return to_naive_utc(v)


class TicketCreate(TicketBase):
    pass


class TicketUpdate(BaseModel):
    """Fields a vendor may change. Moderation fields are admin-only."""
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    from_location: Optional[str] = Field(None, min_length=1, max_length=128)
    to_location: Optional[str] = Field(None, min_length=1, max_length=128)
    transport_type: Optional[str] = Field(None, min_length=1, max_length=32)
    price: Optional[float] = Field(None, ge=0)
    ticket_quantity: Optional[int] = Field(None, ge=0)
    departure_date_time: Optional[datetime] = None
    perks: Optional[List[str]] = None
    image: Optional[str] = None
    vendor_name: Optional[str] = None

    @field_validator("departure_date_time")
    @classmethod
    def _naive_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v) if v is not None else v


class TicketOut(BaseModel):
    id: int
    title: str
    vendor_email: str
    vendor_name: Optional[str] = None
    from_location: str
    to_location: str
    transport_type: str
    price: float
    ticket_quantity: int
    departure_date_time: datetime
    perks: List[str] = []
    image: Optional[str] = None
    verification_status: str
    verified_at: Optional[datetime] = None
    is_advertised: bool
    is_hidden: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TicketPage(BaseModel):
    tickets: List[TicketOut]
    total: int
    total_pages: int
    current_page: int


class VerificationUpdate(BaseModel):
    verification_status: VerificationStatus


class AdvertiseUpdate(BaseModel):
    is_advertised: bool
