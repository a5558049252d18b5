import itertools

import pytest

from venue_booking.core.exceptions import InvalidTransition
from venue_booking.db.session import SessionLocal
from venue_booking.models.booking import Booking
from venue_booking.models.enums import BookingEvent, BookingStatus
from venue_booking.services import payments
from venue_booking.services.booking_service import create_booking, transition
from venue_booking.utils import razorpay_client

from tests.conftest import EVENT_DAY, client, headers_for

GOOD_SIGNATURE = "good-signature"


@pytest.fixture(autouse=True)
def fake_gateway(monkeypatch):
    """Stand in for Razorpay: sequential order ids, one accepted signature"""
    counter = itertools.count(1)
    orders = []

    def create_order(amount, receipt):
        order = {"id": f"order_test_{next(counter)}", "amount": amount * 100, "receipt": receipt}
        orders.append(order)
        return order

    def verify_signature(order_id, payment_id, signature):
        return signature == GOOD_SIGNATURE

    monkeypatch.setattr(razorpay_client, "create_order", create_order)
    monkeypatch.setattr(razorpay_client, "verify_signature", verify_signature)
    return orders


@pytest.fixture
def accepted(test_db, planner, owner, hall):
    booking = create_booking(test_db, planner, hall.id, EVENT_DAY)
    return transition(test_db, booking.id, BookingEvent.ACCEPT, actor=owner)


def open_order(user, booking_id):
    return client.post(f"/bookings/{booking_id}/payments/order", headers=headers_for(user))


def verify(user, booking_id, order_id, payment_id, signature=GOOD_SIGNATURE):
    return client.post(
        f"/bookings/{booking_id}/payments/verify",
        json={
            "razorpay_order_id": order_id,
            "razorpay_payment_id": payment_id,
            "razorpay_signature": signature,
        },
        headers=headers_for(user),
    )


def test_deposit_then_balance(planner, accepted, fake_gateway):
    response = open_order(planner, accepted.id)
    assert response.status_code == 200
    order = response.json()
    assert order["amount"] == 200000
    assert order["currency"] == "NGN"
    assert fake_gateway[0]["amount"] == 20000000

    response = verify(planner, accepted.id, order["razorpay_order_id"], "pay_1")
    assert response.status_code == 200
    assert response.json()["status"] == "paid"
    assert response.json()["deposit_paid"] is True

    order = open_order(planner, accepted.id).json()
    assert order["amount"] == 600000

    response = verify(planner, accepted.id, order["razorpay_order_id"], "pay_2")
    assert response.json()["status"] == "confirmed"
    assert response.json()["balance_paid"] is True

    response = open_order(planner, accepted.id)
    assert response.status_code == 409


def test_repeated_verification_is_idempotent(test_db, planner, owner, accepted):
    order = open_order(planner, accepted.id).json()

    first = verify(planner, accepted.id, order["razorpay_order_id"], "pay_1")
    second = verify(planner, accepted.id, order["razorpay_order_id"], "pay_1")

    assert first.json()["status"] == second.json()["status"] == "paid"

    notes = client.get("/notifications/", headers=headers_for(owner)).json()
    assert len([n for n in notes if n["title"] == "Payment Received"]) == 1


def test_bad_signature_marks_payment_failed(planner, accepted):
    order = open_order(planner, accepted.id).json()

    response = verify(planner, accepted.id, order["razorpay_order_id"], "pay_1", signature="forged")
    assert response.status_code == 422
    assert "razorpay_signature" in response.json()["fields"]

    booking = client.get(f"/bookings/{accepted.id}", headers=headers_for(planner)).json()
    assert booking["status"] == "accepted"
    assert booking["payment_status"] == "failed"

    response = verify(planner, accepted.id, order["razorpay_order_id"], "pay_2")
    assert response.json()["payment_status"] == "completed"


def test_unknown_order_is_rejected(planner, accepted):
    open_order(planner, accepted.id)

    response = verify(planner, accepted.id, "order_someone_else", "pay_1")
    assert response.status_code == 422
    assert "razorpay_order_id" in response.json()["fields"]


def test_only_the_planner_pays(other_planner, owner, accepted):
    assert open_order(other_planner, accepted.id).status_code == 403
    assert open_order(owner, accepted.id).status_code == 403


def test_nothing_payable_before_acceptance(test_db, planner, hall):
    booking = create_booking(test_db, planner, hall.id, EVENT_DAY)

    response = open_order(planner, booking.id)
    assert response.status_code == 409
    assert response.json()["kind"] == "invalid_transition"


def test_payment_reference_is_stored_with_the_settlement(test_db, planner, accepted):
    order = open_order(planner, accepted.id).json()
    test_db.expire_all()

    booking = payments.verify_payment(
        test_db, accepted.id, planner, order["razorpay_order_id"], "pay_1", GOOD_SIGNATURE
    )
    assert booking.status == BookingStatus.PAID
    assert not test_db.dirty

    fresh = SessionLocal()
    try:
        stored = fresh.get(Booking, accepted.id)
        assert stored.razorpay_payment_id == "pay_1"
        assert stored.status == BookingStatus.PAID
    finally:
        fresh.close()


def test_rejected_verification_leaves_no_pending_changes(test_db, planner, accepted):
    order = open_order(planner, accepted.id).json()
    test_db.expire_all()
    transition(test_db, accepted.id, BookingEvent.EXPIRE, actor=None)

    with pytest.raises(InvalidTransition):
        payments.verify_payment(
            test_db, accepted.id, planner, order["razorpay_order_id"], "pay_late", GOOD_SIGNATURE
        )

    assert not test_db.dirty
    test_db.expire_all()
    booking = test_db.get(Booking, accepted.id)
    assert booking.razorpay_payment_id is None
    assert booking.status == BookingStatus.CANCELLED
