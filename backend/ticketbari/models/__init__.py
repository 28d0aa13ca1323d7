from ticketbari.models.base import Base
from ticketbari.models.user import User
from ticketbari.models.ticket import Ticket
from ticketbari.models.booking import Booking
from ticketbari.models.payment import Payment

__all__ = ["Base", "User", "Ticket", "Booking", "Payment"]
