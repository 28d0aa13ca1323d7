from datetime import datetime

from sqlalchemy import JSON, String, Integer, Boolean, DateTime, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column

from ticketbari.core.security import utcnow
from ticketbari.models.base import Base

VERIFICATION_STATUSES = ("pending", "approved", "rejected")


class Ticket(Base):
    __tablename__ = "tickets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(255))
    vendor_email: Mapped[str] = mapped_column(String(255), index=True)
    vendor_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    from_location: Mapped[str] = mapped_column(String(128), index=True)
    to_location: Mapped[str] = mapped_column(String(128), index=True)
    transport_type: Mapped[str] = mapped_column(String(32), index=True)  # bus | train | launch | plane
    price: Mapped[float] = mapped_column(Numeric(10, 2))
    ticket_quantity: Mapped[int] = mapped_column(Integer)
    departure_date_time: Mapped[datetime] = mapped_column(DateTime)
    perks: Mapped[list] = mapped_column(JSON, default=list)
    image: Mapped[str | None] = mapped_column(Text, nullable=True)
    verification_status: Mapped[str] = mapped_column(String(16), default="pending", index=True)
    verified_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    is_advertised: Mapped[bool] = mapped_column(Boolean, default=False)
    # Set when the owning vendor is marked as fraud
    is_hidden: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
