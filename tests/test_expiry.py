from datetime import datetime, timedelta

from venue_booking.models.booking import Booking
from venue_booking.models.enums import BookingEvent, BookingStatus, NotificationType
from venue_booking.models.hall_blocked_date import HallBlockedDate
from venue_booking.models.notification import Notification
from venue_booking.services.booking_service import PAYMENT_WINDOW_EXPIRED, create_booking, transition
from venue_booking.services.expiry import run_expiry_scan

from tests.conftest import EVENT_DAY, client, headers_for

ACCEPTED_AT = datetime.utcnow().replace(microsecond=0)


def expiry_notices(db, booking_id):
    return db.query(Notification).filter(
        Notification.booking_id == booking_id,
        Notification.type == NotificationType.BOOKING_EXPIRY,
    ).all()


def accepted_booking(db, planner, owner, hall):
    booking = create_booking(db, planner, hall.id, EVENT_DAY)
    return transition(db, booking.id, BookingEvent.ACCEPT, actor=owner, now=ACCEPTED_AT)


def test_nothing_to_do_inside_window(test_db, planner, owner, full_deposit_hall):
    booking = accepted_booking(test_db, planner, owner, full_deposit_hall)

    result = run_expiry_scan(test_db, now=ACCEPTED_AT + timedelta(hours=2))

    assert result.as_dict() == {"scanned": 1, "warned": [], "expired": []}
    assert test_db.get(Booking, booking.id).status == BookingStatus.ACCEPTED


def test_warning_is_sent_once(test_db, planner, owner, full_deposit_hall):
    booking = accepted_booking(test_db, planner, owner, full_deposit_hall)
    near_deadline = ACCEPTED_AT + timedelta(hours=20)

    first = run_expiry_scan(test_db, now=near_deadline)
    second = run_expiry_scan(test_db, now=near_deadline + timedelta(hours=1))

    assert first.warned == [booking.id]
    assert second.warned == []

    notices = expiry_notices(test_db, booking.id)
    assert sorted(n.user_id for n in notices) == sorted([planner.id, owner.id])
    assert test_db.get(Booking, booking.id).expiry_notification_sent


def test_expires_after_deadline(test_db, planner, owner, full_deposit_hall):
    booking = accepted_booking(test_db, planner, owner, full_deposit_hall)
    past_deadline = ACCEPTED_AT + timedelta(hours=25)

    result = run_expiry_scan(test_db, now=past_deadline)

    assert result.expired == [booking.id]
    expired = test_db.get(Booking, booking.id)
    assert expired.status == BookingStatus.CANCELLED
    assert expired.cancellation_reason == PAYMENT_WINDOW_EXPIRED
    assert test_db.query(HallBlockedDate).count() == 0

    # a second sweep finds nothing left to expire
    again = run_expiry_scan(test_db, now=past_deadline + timedelta(hours=1))
    assert again.as_dict() == {"scanned": 0, "warned": [], "expired": []}


def test_paid_bookings_are_left_alone(test_db, planner, owner, full_deposit_hall):
    booking = accepted_booking(test_db, planner, owner, full_deposit_hall)
    transition(test_db, booking.id, BookingEvent.SETTLE_DEPOSIT, actor=None)

    result = run_expiry_scan(test_db, now=ACCEPTED_AT + timedelta(days=3))

    assert result.scanned == 0
    assert test_db.get(Booking, booking.id).status == BookingStatus.CONFIRMED


def test_partial_deposit_due_before_event(test_db, planner, owner, hall):
    booking = accepted_booking(test_db, planner, owner, hall)

    # past the 24 hour window but well before balance_due_days ahead of the event
    result = run_expiry_scan(test_db, now=ACCEPTED_AT + timedelta(days=3))
    assert result.expired == []

    balance_due = datetime.combine(EVENT_DAY - timedelta(days=hall.balance_due_days), datetime.min.time())
    warned = run_expiry_scan(test_db, now=balance_due - timedelta(hours=3))
    assert warned.warned == [booking.id]

    expired = run_expiry_scan(test_db, now=balance_due)
    assert expired.expired == [booking.id]


def test_expiry_scan_endpoint_requires_admin(planner, admin):
    denied = client.post("/bookings/expiry-scan", headers=headers_for(planner))
    assert denied.status_code == 403
    assert denied.json()["kind"] == "unauthorized"

    allowed = client.post("/bookings/expiry-scan", headers=headers_for(admin))
    assert allowed.status_code == 200
    assert allowed.json() == {"scanned": 0, "warned": [], "expired": []}
