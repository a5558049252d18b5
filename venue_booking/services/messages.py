from venue_booking.core.exceptions import Unauthorized, ValidationError
from venue_booking.core.logging_config import get_logger
from venue_booking.models.enums import NotificationType, UserRole
from venue_booking.models.message import Message
from venue_booking.services.booking_service import can_view, load_booking
from venue_booking.services.notifications import dispatch, enqueue_notification, post_message

logger = get_logger()


def list_thread(db, booking_id: int, actor):
    booking = load_booking(db, booking_id)
    if not can_view(actor, booking):
        raise Unauthorized("Not authorized to view this conversation")

    return db.query(Message).filter(
        Message.booking_id == booking.id
    ).order_by(Message.created_at, Message.id).all()


def send_message(db, booking_id: int, actor, body: str) -> Message:
    booking = load_booking(db, booking_id)
    if not can_view(actor, booking):
        raise Unauthorized("Not authorized to post in this conversation")

    body = (body or "").strip()
    if not body:
        raise ValidationError("Message cannot be empty", fields={"body": "required"})

    owner_id = booking.venue.owner_user_id
    if actor.id == booking.planner_user_id:
        to_user_id = owner_id
    elif actor.id == owner_id or actor.role == UserRole.ADMIN:
        to_user_id = booking.planner_user_id
    else:
        raise Unauthorized("Not authorized to post in this conversation")

    message = post_message(db, booking.id, actor.id, to_user_id, body)
    if message is None:
        raise ValidationError("This booking has no one to message", fields={"body": "no recipient"})

    notification = enqueue_notification(
        db,
        to_user_id,
        NotificationType.NEW_MESSAGE,
        f"New message from {actor.name}",
        body[:140],
        link_url="/messages",
        booking_id=booking.id,
    )
    db.commit()
    db.refresh(message)

    logger.info(f"Message Sent | Booking={booking.id} | From={actor.id} | To={to_user_id}")
    dispatch([notification])
    return message
