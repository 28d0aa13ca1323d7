from datetime import datetime

from sqlalchemy import String, Integer, ForeignKey, DateTime, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from ticketbari.core.security import utcnow
from ticketbari.models.base import Base


class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    ticket_id: Mapped[int] = mapped_column(Integer, ForeignKey("tickets.id", ondelete="CASCADE"), index=True)
    # Ticket snapshot at booking time
    ticket_title: Mapped[str] = mapped_column(String(255))
    from_location: Mapped[str] = mapped_column(String(128))
    to_location: Mapped[str] = mapped_column(String(128))
    departure_date_time: Mapped[datetime] = mapped_column(DateTime)
    user_email: Mapped[str] = mapped_column(String(255), index=True)
    user_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    vendor_email: Mapped[str] = mapped_column(String(255), index=True)
    booking_quantity: Mapped[int] = mapped_column(Integer)
    unit_price: Mapped[float] = mapped_column(Numeric(10, 2))
    total_price: Mapped[float] = mapped_column(Numeric(12, 2))
    status: Mapped[str] = mapped_column(String(16), default="pending", index=True)  # pending, accepted, rejected, cancelled, paid
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    accepted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    rejected_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    transaction_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
