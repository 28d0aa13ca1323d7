"""Idempotent demo data: a seed admin, a seed vendor and a few approved tickets.

Run standalone with ``python -m ticketbari.db.init_db``.
"""
import logging
from datetime import timedelta

from ticketbari.core.config import Settings, get_settings
from ticketbari.core.security import utcnow
from ticketbari.db.session import Database
from ticketbari.models.ticket import Ticket
from ticketbari.models.user import User

logger = logging.getLogger(__name__)

SAMPLE_TICKETS = [
    {
        "title": "Dhaka to Cox's Bazar Relax Transport",
        "from_location": "Dhaka",
        "to_location": "Cox's Bazar",
        "transport_type": "bus",
        "price": 1200,
        "ticket_quantity": 40,
        "perks": ["AC", "WiFi", "Water", "Blanket"],
        "vendor_name": "Relax Transport",
        "is_advertised": True,
    },
    {
        "title": "Dhaka to Sylhet Green Line",
        "from_location": "Dhaka",
        "to_location": "Sylhet",
        "transport_type": "bus",
        "price": 850,
        "ticket_quantity": 35,
        "perks": ["AC", "Snacks", "Charging Port"],
        "vendor_name": "Green Line",
        "is_advertised": True,
    },
    {
        "title": "Chittagong to Dhaka Saudia",
        "from_location": "Chittagong",
        "to_location": "Dhaka",
        "transport_type": "bus",
        "price": 650,
        "ticket_quantity": 45,
        "perks": ["Non-AC", "Comfortable Seats"],
        "vendor_name": "Saudia",
        "is_advertised": False,
    },
    {
        "title": "Dhaka to Chittagong Subarna Express",
        "from_location": "Dhaka",
        "to_location": "Chittagong",
        "transport_type": "train",
        "price": 750,
        "ticket_quantity": 120,
        "perks": ["AC Chair", "Food Service"],
        "vendor_name": "Bangladesh Railway",
        "is_advertised": False,
    },
    {
        "title": "Dhaka to Barishal MV Sundarban",
        "from_location": "Dhaka",
        "to_location": "Barishal",
        "transport_type": "launch",
        "price": 1500,
        "ticket_quantity": 30,
        "perks": ["Cabin", "Dinner"],
        "vendor_name": "Sundarban Navigation",
        "is_advertised": False,
    },
]


def _ensure_user(db, email: str, name: str, role: str) -> User:
    user = db.query(User).filter(User.email == email).first()
    if not user:
        user = User(email=email, name=name, role=role, is_fraud=False, created_at=utcnow())
        db.add(user)
        db.commit()
        db.refresh(user)
        logger.info("Seeded %s %s", role, email)
    return user


def seed_demo_data(database: Database, settings: Settings) -> None:
    db = database.SessionLocal()
    try:
        admin_email = (settings.seed_admin_email or "admin@ticketbari.com").lower()
        vendor_email = (settings.seed_vendor_email or "vendor@ticketbari.com").lower()
        _ensure_user(db, admin_email, "Admin", "admin")
        _ensure_user(db, vendor_email, "Demo Vendor", "vendor")

        if db.query(Ticket).count() == 0:
            now = utcnow()
            for day, sample in enumerate(SAMPLE_TICKETS, start=1):
                db.add(Ticket(
                    **sample,
                    vendor_email=vendor_email,
                    departure_date_time=now + timedelta(days=day * 3, hours=8),
                    verification_status="approved",
                    verified_at=now,
                    is_hidden=False,
                    created_at=now,
                ))
            db.commit()
            logger.info("Seeded %d sample tickets", len(SAMPLE_TICKETS))
    finally:
        db.close()


if __name__ == "__main__":
    from ticketbari.core.logging_config import configure_logging

    settings = get_settings()
    configure_logging(settings.log_level)
    database = Database(settings.database_url)
    database.create_tables()
    seed_demo_data(database, settings)
    database.dispose()
