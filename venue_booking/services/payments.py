from venue_booking.core.config import RAZORPAY_KEY_ID, PAYMENT_CURRENCY
from venue_booking.core.exceptions import InvalidTransition, Unauthorized, ValidationError
from venue_booking.core.logging_config import get_logger
from venue_booking.models.enums import BookingEvent, BookingStatus, PaymentStatus, UserRole
from venue_booking.services.booking_service import load_booking, transition
from venue_booking.utils import razorpay_client
from venue_booking.utils.pricing import amount_due

logger = get_logger().bind(log_type="payment")

# Statuses in which the gateway may take money, and the event a payment drives
PAYABLE = {
    BookingStatus.ACCEPTED: BookingEvent.SETTLE_DEPOSIT,
    BookingStatus.PAID: BookingEvent.SETTLE_BALANCE,
}


def _ensure_payer(actor, booking):
    if actor.role != UserRole.ADMIN and actor.id != booking.planner_user_id:
        raise Unauthorized("Only the planner who made this booking can pay for it")


def open_order(db, booking_id: int, actor) -> dict:
    booking = load_booking(db, booking_id)
    _ensure_payer(actor, booking)

    if booking.status not in PAYABLE:
        raise InvalidTransition(
            booking.status.value, PAYABLE.get(booking.status, BookingEvent.SETTLE_DEPOSIT).value,
            "Nothing is payable on this booking right now",
        )

    amount = amount_due(booking)
    order = razorpay_client.create_order(amount, receipt=f"booking_{booking.id}")

    booking.razorpay_order_id = order["id"]
    db.commit()

    logger.info(f"Order Opened | Booking={booking.id} | Order={order['id']} | Amount={amount}")

    return {
        "booking_id": booking.id,
        "amount": amount,
        "currency": PAYMENT_CURRENCY,
        "razorpay_order_id": order["id"],
        "razorpay_key_id": RAZORPAY_KEY_ID,
    }


def record_payment_failure(db, booking, reason: str):
    booking.payment_status = PaymentStatus.FAILED
    db.commit()
    logger.warning(f"Payment Failed | Booking={booking.id} | {reason}")


def verify_payment(db, booking_id: int, actor, order_id: str, payment_id: str, signature: str):
    booking = load_booking(db, booking_id)
    _ensure_payer(actor, booking)

    # ✅ IDEMPOTENCY CHECK
    if booking.razorpay_payment_id == payment_id:
        return booking

    if booking.razorpay_order_id != order_id:
        raise ValidationError(
            "Order does not belong to this booking",
            fields={"razorpay_order_id": "unknown order"},
        )

    if not razorpay_client.verify_signature(order_id, payment_id, signature):
        record_payment_failure(db, booking, "invalid signature")
        raise ValidationError(
            "Invalid payment signature",
            fields={"razorpay_signature": "verification failed"},
        )

    event = PAYABLE.get(booking.status)
    if event is None:
        raise InvalidTransition(booking.status.value, BookingEvent.SETTLE_DEPOSIT.value,
                                "Nothing is payable on this booking right now")

    return transition(db, booking.id, event, actor=None, payment_id=payment_id)
