"""
Sweep for accepted bookings whose first payment has not arrived.

The sweep is passive: an external scheduler (cron, ``scripts/run_expiry_scan.py``)
or an admin calls ``run_expiry_scan``. Each booking is handled in its own
transaction, and ``expiry_notification_sent`` is flipped with a conditional
update, so re-running the sweep, or restarting it after a crash, never warns
the same booking twice.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from venue_booking.core.config import EXPIRY_LOOKAHEAD_HOURS, PAYMENT_WINDOW_HOURS
from venue_booking.core.exceptions import BookingError
from venue_booking.core.logging_config import get_logger
from venue_booking.models.booking import Booking
from venue_booking.models.enums import BookingEvent, BookingStatus, NotificationType
from venue_booking.services.booking_service import PAYMENT_WINDOW_EXPIRED, transition
from venue_booking.services.notifications import dispatch, enqueue_notification
from venue_booking.utils import clock
from venue_booking.utils.pricing import payment_due_at

logger = get_logger().bind(log_type="expiry")


@dataclass
class ExpiryScanResult:
    scanned: int = 0
    warned: list = field(default_factory=list)
    expired: list = field(default_factory=list)

    def as_dict(self) -> dict:
        return {"scanned": self.scanned, "warned": self.warned, "expired": self.expired}


def _send_warning(db, booking, due_at: datetime) -> bool:
    claimed = db.query(Booking).filter(
        Booking.id == booking.id,
        Booking.status == BookingStatus.ACCEPTED,
        Booking.expiry_notification_sent == False,  # noqa: E712
    ).update({Booking.expiry_notification_sent: True}, synchronize_session=False)

    if claimed != 1:
        db.rollback()
        return False

    due_str = due_at.strftime("%B %d, %Y at %H:%M")
    event_str = booking.start_date.strftime("%B %d, %Y")
    notifications = [
        enqueue_notification(
            db,
            booking.planner_user_id,
            NotificationType.BOOKING_EXPIRY,
            "Payment Due Soon",
            f"Your booking for {booking.hall.name} at {booking.venue.title} on {event_str} "
            f"expires on {due_str} unless {booking.deposit_amount} is paid.",
            link_url="/bookings",
            booking_id=booking.id,
        ),
        enqueue_notification(
            db,
            booking.venue.owner_user_id,
            NotificationType.BOOKING_EXPIRY,
            "Booking Payment Pending",
            f"The booking for {booking.hall.name} on {event_str} expires on {due_str} "
            f"if the planner does not pay.",
            link_url="/owner/bookings",
            booking_id=booking.id,
        ),
    ]
    db.commit()

    logger.info(f"Expiry warning sent for booking {booking.id} (due {due_str})")
    dispatch(notifications)
    return True


def run_expiry_scan(db, now: datetime | None = None, lookahead_hours: int | None = None,
                    payment_window_hours: int | None = None) -> ExpiryScanResult:
    now = now or clock.utcnow()
    lookahead = timedelta(hours=EXPIRY_LOOKAHEAD_HOURS if lookahead_hours is None else lookahead_hours)
    window_hours = PAYMENT_WINDOW_HOURS if payment_window_hours is None else payment_window_hours

    logger.info("Running booking expiry check...")
    result = ExpiryScanResult()

    pending = db.query(Booking).filter(
        Booking.status == BookingStatus.ACCEPTED,
        Booking.deposit_paid == False,  # noqa: E712
        Booking.accepted_at.isnot(None),
    ).order_by(Booking.id).all()
    result.scanned = len(pending)

    for booking in pending:
        booking_id = booking.id
        due_at = payment_due_at(booking, booking.hall, window_hours)

        if now >= due_at:
            try:
                transition(db, booking_id, BookingEvent.EXPIRE, actor=None,
                           reason=PAYMENT_WINDOW_EXPIRED, now=now)
            except BookingError as e:
                # paid or changed since the query ran
                logger.warning(f"Booking {booking_id} not expired: {e.message}")
                continue
            result.expired.append(booking_id)
            logger.info(f"Booking {booking_id} expired - payment not received by {due_at}")
            continue

        if not booking.expiry_notification_sent and due_at - now <= lookahead:
            if _send_warning(db, booking, due_at):
                result.warned.append(booking_id)

    logger.info(
        f"Booking expiry check complete | scanned={result.scanned} "
        f"| warned={len(result.warned)} | expired={len(result.expired)}"
    )
    return result
