from datetime import datetime

from sqlalchemy import String, Integer, ForeignKey, DateTime, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from ticketbari.core.security import utcnow
from ticketbari.models.base import Base


class Payment(Base):
    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # Payments outlive the bookings/tickets they reference (admin ticket delete)
    booking_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("bookings.id", ondelete="SET NULL"), nullable=True, index=True)
    ticket_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("tickets.id", ondelete="SET NULL"), nullable=True)
    ticket_title: Mapped[str] = mapped_column(String(255))
    user_email: Mapped[str] = mapped_column(String(255), index=True)
    vendor_email: Mapped[str] = mapped_column(String(255), index=True)
    amount: Mapped[float] = mapped_column(Numeric(12, 2))
    booking_quantity: Mapped[int] = mapped_column(Integer)
    transaction_id: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    payment_date: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
