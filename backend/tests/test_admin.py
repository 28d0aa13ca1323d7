from conftest import ADMIN, USER, VENDOR
from ticketbari.models.booking import Booking
from ticketbari.models.payment import Payment
from ticketbari.models.ticket import Ticket


def test_admin_sets_verification_status(client, auth, marketplace, make_ticket):
    ticket_id = make_ticket(status="pending")
    r = client.patch(f"/admin/tickets/{ticket_id}", json={"verification_status": "approved"}, headers=auth(ADMIN))
    assert r.status_code == 200, r.text
    assert r.json()["verification_status"] == "approved"
    assert r.json()["verified_at"] is not None
    assert client.get("/tickets").json()["total"] == 1


def test_verification_status_is_validated(client, auth, marketplace, make_ticket):
    ticket_id = make_ticket(status="pending")
    r = client.patch(f"/admin/tickets/{ticket_id}", json={"verification_status": "maybe"}, headers=auth(ADMIN))
    assert r.status_code == 422


def test_verification_is_admin_only(client, auth, marketplace, make_ticket):
    ticket_id = make_ticket(status="pending")
    r = client.patch(f"/admin/tickets/{ticket_id}", json={"verification_status": "approved"}, headers=auth(VENDOR))
    assert r.status_code == 403
    assert client.patch("/admin/tickets/9999", json={"verification_status": "approved"}, headers=auth(ADMIN)).status_code == 404


def test_advertise_cap_allows_sixth_refuses_seventh(client, auth, marketplace, make_ticket, count_rows):
    ids = [make_ticket() for _ in range(7)]
    for ticket_id in ids[:6]:
        r = client.patch(f"/admin/tickets/advertise/{ticket_id}", json={"is_advertised": True}, headers=auth(ADMIN))
        assert r.status_code == 200, r.text
        assert r.json()["is_advertised"] is True
    r = client.patch(f"/admin/tickets/advertise/{ids[6]}", json={"is_advertised": True}, headers=auth(ADMIN))
    assert r.status_code == 400
    assert "6" in r.json()["detail"]
    assert count_rows(Ticket, Ticket.is_advertised.is_(True)) == 6


def test_unadvertise_frees_a_slot(client, auth, marketplace, make_ticket):
    ids = [make_ticket(is_advertised=True) for _ in range(6)]
    extra = make_ticket()
    r = client.patch(f"/admin/tickets/advertise/{ids[0]}", json={"is_advertised": False}, headers=auth(ADMIN))
    assert r.json()["is_advertised"] is False
    r = client.patch(f"/admin/tickets/advertise/{extra}", json={"is_advertised": True}, headers=auth(ADMIN))
    assert r.status_code == 200, r.text


def test_readvertising_at_cap_is_a_noop(client, auth, marketplace, make_ticket):
    ids = [make_ticket(is_advertised=True) for _ in range(6)]
    r = client.patch(f"/admin/tickets/advertise/{ids[3]}", json={"is_advertised": True}, headers=auth(ADMIN))
    assert r.status_code == 200
    assert r.json()["is_advertised"] is True


def test_admin_delete_cascades_to_bookings(client, auth, accepted_booking, make_ticket, fetch, count_rows):
    ticket_id, booking_id = accepted_booking
    other_ticket = make_ticket()
    r = client.post("/bookings", json={"ticket_id": other_ticket, "booking_quantity": 1}, headers=auth(USER))
    assert r.status_code == 200
    r = client.delete(f"/admin/tickets/{ticket_id}", headers=auth(ADMIN))
    assert r.status_code == 200, r.text
    assert r.json()["bookings_removed"] == 1
    assert fetch(Ticket, ticket_id) is None
    assert fetch(Booking, booking_id) is None
    assert count_rows(Booking, Booking.ticket_id == other_ticket) == 1


def test_admin_can_delete_rejected_ticket(client, auth, marketplace, make_ticket, fetch):
    ticket_id = make_ticket(status="rejected")
    assert client.delete(f"/admin/tickets/{ticket_id}", headers=auth(ADMIN)).status_code == 200
    assert fetch(Ticket, ticket_id) is None


def test_ticket_delete_keeps_payment_without_dangling_references(client, auth, accepted_booking, make_ticket, session_factory):
    ticket_id, booking_id = accepted_booking
    r = client.post("/payments", json={"booking_id": booking_id, "transaction_id": "pi_kept"}, headers=auth(USER))
    assert r.status_code == 200, r.text
    payment_id = r.json()["id"]

    assert client.delete(f"/admin/tickets/{ticket_id}", headers=auth(ADMIN)).status_code == 200
    replacement = make_ticket(title="Dhaka to Rajshahi National")

    db = session_factory()
    payment = db.get(Payment, payment_id)
    assert payment is not None
    assert payment.ticket_id is None
    assert payment.booking_id is None
    assert payment.ticket_title == "Dhaka to Sylhet Green Line"
    assert float(payment.amount) == 500.0
    assert db.query(Payment).filter(Payment.ticket_id == replacement).count() == 0
    db.close()


def test_rejecting_advertised_ticket_frees_its_slot(client, auth, marketplace, make_ticket, fetch):
    ids = [make_ticket(is_advertised=True) for _ in range(6)]
    extra = make_ticket()
    r = client.patch(f"/admin/tickets/{ids[0]}", json={"verification_status": "rejected"}, headers=auth(ADMIN))
    assert r.status_code == 200, r.text
    assert r.json()["is_advertised"] is False
    assert fetch(Ticket, ids[0]).is_advertised is False
    r = client.patch(f"/admin/tickets/advertise/{extra}", json={"is_advertised": True}, headers=auth(ADMIN))
    assert r.status_code == 200, r.text


def test_approving_keeps_advertised_flag(client, auth, marketplace, make_ticket):
    ticket_id = make_ticket(is_advertised=True, status="pending")
    r = client.patch(f"/admin/tickets/{ticket_id}", json={"verification_status": "approved"}, headers=auth(ADMIN))
    assert r.json()["is_advertised"] is True
