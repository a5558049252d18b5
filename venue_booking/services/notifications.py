"""
Outbound notices to users: in-app notifications and booking thread messages.

Rows are added to the caller's session so they commit atomically with the
change that caused them. Delivery happens after the commit.
"""
from venue_booking.core.logging_config import get_logger
from venue_booking.models.message import Message
from venue_booking.models.notification import Notification

logger = get_logger()


def enqueue_notification(db, user_id, type, title, body, link_url=None, booking_id=None):
    if user_id is None:
        return None

    notification = Notification(
        user_id=user_id,
        booking_id=booking_id,
        type=type,
        title=title,
        body=body,
        link_url=link_url,
    )
    db.add(notification)
    return notification


def post_message(db, booking_id, from_user_id, to_user_id, body):
    if from_user_id is None or to_user_id is None or from_user_id == to_user_id:
        return None

    message = Message(
        booking_id=booking_id,
        from_user_id=from_user_id,
        to_user_id=to_user_id,
        body=body,
    )
    db.add(message)
    return message


def _deliver(notification: Notification):
    logger.bind(log_type="booking").info(
        f"Notification | User={notification.user_id} | Type={notification.type.value} "
        f"| Title={notification.title}"
    )


def dispatch(notifications):
    """Deliver committed notifications; a delivery failure is logged, never raised."""
    for notification in notifications:
        if notification is None:
            continue
        try:
            _deliver(notification)
        except Exception as e:
            logger.error(f"Notification delivery failed | Id={notification.id} -> {e}")
