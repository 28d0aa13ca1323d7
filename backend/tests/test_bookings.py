from datetime import timedelta

import pytest

from conftest import ADMIN, USER, VENDOR
from ticketbari.core.security import utcnow
from ticketbari.models.booking import Booking
from ticketbari.services.bookings import BookingStatus, can_transition


def book(client, auth, ticket_id, quantity, email=USER):
    return client.post("/bookings", json={"ticket_id": ticket_id, "booking_quantity": quantity}, headers=auth(email))


def test_create_booking_is_pending_with_snapshot(client, auth, marketplace, make_ticket):
    ticket_id = make_ticket(quantity=40, price=120.0)
    r = book(client, auth, ticket_id, 5)
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["status"] == "pending"
    assert data["user_email"] == USER
    assert data["vendor_email"] == VENDOR
    assert data["booking_quantity"] == 5
    assert data["unit_price"] == 120.0
    assert data["total_price"] == 600.0
    assert data["ticket_title"] == "Dhaka to Sylhet Green Line"


def test_booking_requires_auth(client, marketplace, make_ticket):
    ticket_id = make_ticket()
    assert client.post("/bookings", json={"ticket_id": ticket_id, "booking_quantity": 1}).status_code == 401


def test_booking_missing_ticket_is_404(client, auth, marketplace):
    assert book(client, auth, 9999, 1).status_code == 404


def test_booking_more_than_available_fails_without_write(client, auth, marketplace, make_ticket, count_rows):
    ticket_id = make_ticket(quantity=3)
    r = book(client, auth, ticket_id, 4)
    assert r.status_code == 400
    assert r.json()["detail"] == "Not enough tickets available"
    assert count_rows(Booking) == 0


def test_booking_exactly_remaining_quantity_succeeds(client, auth, marketplace, make_ticket):
    ticket_id = make_ticket(quantity=3)
    assert book(client, auth, ticket_id, 3).status_code == 200


def test_booking_after_departure_fails(client, auth, marketplace, make_ticket, count_rows):
    ticket_id = make_ticket(departure=utcnow() - timedelta(minutes=5))
    r = book(client, auth, ticket_id, 1)
    assert r.status_code == 400
    assert "departure" in r.json()["detail"]
    assert count_rows(Booking) == 0


@pytest.mark.parametrize("overrides", [{"status": "pending"}, {"status": "rejected"}, {"is_hidden": True}])
def test_booking_ticket_hidden_from_public_fails(client, auth, marketplace, make_ticket, count_rows, overrides):
    ticket_id = make_ticket(**overrides)
    r = book(client, auth, ticket_id, 1)
    assert r.status_code == 400
    assert r.json()["detail"] == "Ticket is not available for booking"
    assert count_rows(Booking) == 0


def test_booking_quantity_must_be_positive(client, auth, marketplace, make_ticket):
    assert book(client, auth, make_ticket(), 0).status_code == 422


def test_vendor_accepts_pending_booking(client, auth, marketplace, make_ticket):
    booking_id = book(client, auth, make_ticket(), 2).json()["id"]
    r = client.patch(f"/bookings/accept/{booking_id}", headers=auth(VENDOR))
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "accepted"
    assert r.json()["accepted_at"] is not None


def test_vendor_rejects_pending_booking(client, auth, marketplace, make_ticket):
    booking_id = book(client, auth, make_ticket(), 2).json()["id"]
    r = client.patch(f"/bookings/reject/{booking_id}", headers=auth(VENDOR))
    assert r.status_code == 200
    assert r.json()["status"] == "rejected"
    assert r.json()["rejected_at"] is not None


def test_accept_and_reject_only_from_pending(client, auth, accepted_booking):
    _, booking_id = accepted_booking
    assert client.patch(f"/bookings/reject/{booking_id}", headers=auth(VENDOR)).status_code == 400
    assert client.patch(f"/bookings/accept/{booking_id}", headers=auth(VENDOR)).status_code == 400


def test_only_owning_vendor_decides(client, auth, marketplace, make_user, make_ticket, fetch):
    make_user("other@example.com", role="vendor")
    booking_id = book(client, auth, make_ticket(), 1).json()["id"]
    assert client.patch(f"/bookings/accept/{booking_id}", headers=auth("other@example.com")).status_code == 403
    assert client.patch(f"/bookings/accept/{booking_id}", headers=auth(USER)).status_code == 403
    assert fetch(Booking, booking_id).status == "pending"
    assert client.patch("/bookings/accept/9999", headers=auth(VENDOR)).status_code == 404


def test_user_cancels_pending_booking(client, auth, marketplace, make_ticket):
    booking_id = book(client, auth, make_ticket(), 1).json()["id"]
    r = client.patch(f"/bookings/cancel/{booking_id}", headers=auth(USER))
    assert r.status_code == 200, r.text
    assert r.json()["status"] == "cancelled"
    assert r.json()["cancelled_at"] is not None


@pytest.mark.parametrize("action", ["accept", "reject", "cancel"])
def test_cancel_fails_once_not_pending(client, auth, marketplace, make_ticket, action):
    booking_id = book(client, auth, make_ticket(), 1).json()["id"]
    actor = USER if action == "cancel" else VENDOR
    assert client.patch(f"/bookings/{action}/{booking_id}", headers=auth(actor)).status_code == 200
    r = client.patch(f"/bookings/cancel/{booking_id}", headers=auth(USER))
    assert r.status_code == 400
    assert r.json()["detail"] == "Can only cancel pending bookings"


def test_cancel_paid_booking_fails(client, auth, accepted_booking):
    _, booking_id = accepted_booking
    assert client.post("/payments", json={"booking_id": booking_id, "transaction_id": "pi_1"}, headers=auth(USER)).status_code == 200
    assert client.patch(f"/bookings/cancel/{booking_id}", headers=auth(USER)).status_code == 400


def test_cannot_cancel_someone_elses_booking(client, auth, marketplace, make_user, make_ticket):
    make_user("user2@example.com")
    booking_id = book(client, auth, make_ticket(), 1).json()["id"]
    assert client.patch(f"/bookings/cancel/{booking_id}", headers=auth("user2@example.com")).status_code == 403


def test_user_booking_list_is_private_and_newest_first(client, auth, marketplace, make_ticket):
    ticket_id = make_ticket()
    first = book(client, auth, ticket_id, 1).json()["id"]
    second = book(client, auth, ticket_id, 2).json()["id"]
    r = client.get(f"/bookings/user/{USER}", headers=auth(USER))
    assert [b["id"] for b in r.json()] == [second, first]
    assert client.get(f"/bookings/user/{USER}", headers=auth(ADMIN)).status_code == 403


def test_vendor_booking_requests(client, auth, marketplace, make_user, make_ticket):
    make_user("other@example.com", role="vendor")
    mine = book(client, auth, make_ticket(vendor_email=VENDOR), 1).json()["id"]
    book(client, auth, make_ticket(vendor_email="other@example.com"), 1)
    r = client.get(f"/bookings/vendor/{VENDOR}", headers=auth(VENDOR))
    assert [b["id"] for b in r.json()] == [mine]
    assert client.get(f"/bookings/vendor/{VENDOR}", headers=auth(USER)).status_code == 403


def test_transition_table():
    assert can_transition("pending", BookingStatus.ACCEPTED)
    assert can_transition("pending", BookingStatus.CANCELLED)
    assert can_transition("accepted", BookingStatus.PAID)
    assert not can_transition("pending", BookingStatus.PAID)
    assert not can_transition("accepted", BookingStatus.CANCELLED)
    assert not can_transition("paid", BookingStatus.ACCEPTED)
    assert not can_transition("bogus", BookingStatus.ACCEPTED)
