from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from ticketbari.api.deps import get_payment_gateway
from ticketbari.core.config import Settings
from ticketbari.core.security import create_access_token, utcnow
from ticketbari.main import create_app
from ticketbari.models.ticket import Ticket
from ticketbari.models.user import User

VENDOR = "vendor@example.com"
ADMIN = "admin@example.com"
USER = "user1@example.com"


class FakeGateway:
    def __init__(self):
        self.amounts = []

    def create_payment_intent(self, amount: float) -> str:
        self.amounts.append(amount)
        return f"pi_test_secret_{len(self.amounts)}"


@pytest.fixture
def settings():
    return Settings(
        ENV="test",
        DATABASE_URL="sqlite://",
        SECRET_KEY="test-secret",
        MAX_ADVERTISED_TICKETS=6,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def app(settings, gateway):
    app = create_app(settings)
    app.state.database.create_tables()
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield app
    app.state.database.drop_tables()
    app.state.database.dispose()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def session_factory(app):
    return app.state.database.SessionLocal


@pytest.fixture
def auth(settings):
    def _auth(email: str) -> dict:
        return {"Authorization": f"Bearer {create_access_token(settings, email)}"}
    return _auth


@pytest.fixture
def make_user(session_factory):
    def _make(email: str, role: str = "user", is_fraud: bool = False, name: str | None = None) -> int:
        db = session_factory()
        u = db.query(User).filter(User.email == email).first()
        if not u:
            u = User(email=email, name=name or email.split("@")[0], role=role, is_fraud=is_fraud)
            db.add(u)
            db.commit()
            db.refresh(u)
        user_id = u.id
        db.close()
        return user_id
    return _make


@pytest.fixture
def make_ticket(session_factory):
    def _make(
        vendor_email: str = VENDOR,
        title: str = "Dhaka to Sylhet Green Line",
        from_location: str = "Dhaka",
        to_location: str = "Sylhet",
        transport_type: str = "bus",
        price: float = 100.0,
        quantity: int = 40,
        status: str = "approved",
        departure=None,
        is_hidden: bool = False,
        is_advertised: bool = False,
        created_at=None,
    ) -> int:
        db = session_factory()
        t = Ticket(
            title=title,
            vendor_email=vendor_email,
            from_location=from_location,
            to_location=to_location,
            transport_type=transport_type,
            price=price,
            ticket_quantity=quantity,
            departure_date_time=departure or utcnow() + timedelta(days=7),
            perks=["AC"],
            verification_status=status,
            is_hidden=is_hidden,
            is_advertised=is_advertised,
            created_at=created_at or utcnow(),
        )
        db.add(t)
        db.commit()
        db.refresh(t)
        ticket_id = t.id
        db.close()
        return ticket_id
    return _make


@pytest.fixture
def fetch(session_factory):
    """Read a fresh row (or None) straight from the database."""
    def _fetch(model, pk):
        db = session_factory()
        try:
            obj = db.get(model, pk)
            if obj is not None:
                db.expunge(obj)
            return obj
        finally:
            db.close()
    return _fetch


@pytest.fixture
def count_rows(session_factory):
    def _count(model, *criteria) -> int:
        db = session_factory()
        try:
            return db.query(model).filter(*criteria).count()
        finally:
            db.close()
    return _count


@pytest.fixture
def marketplace(make_user):
    """A vendor, an admin and a regular user."""
    make_user(VENDOR, role="vendor", name="Green Line")
    make_user(ADMIN, role="admin")
    make_user(USER)


@pytest.fixture
def accepted_booking(client, auth, marketplace, make_ticket):
    """Ticket with 40 seats and an accepted booking for 5 of them. Returns (ticket_id, booking_id)."""
    ticket_id = make_ticket(quantity=40, price=100.0)
    r = client.post("/bookings", json={"ticket_id": ticket_id, "booking_quantity": 5}, headers=auth(USER))
    assert r.status_code == 200, r.text
    booking_id = r.json()["id"]
    r = client.patch(f"/bookings/accept/{booking_id}", headers=auth(VENDOR))
    assert r.status_code == 200, r.text
    return ticket_id, booking_id
