from enum import Enum

from sqlalchemy import Enum as SAEnum


class UserRole(str, Enum):
    ADMIN = "admin"
    VENUE_HOLDER = "venue_holder"
    PLANNER = "planner"


class BookingStatus(str, Enum):
    REQUESTED = "requested"
    ACCEPTED = "accepted"
    PAID = "paid"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    CANCELLATION_REQUESTED = "cancellation_requested"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class BookingEvent(str, Enum):
    ACCEPT = "accept"
    DECLINE = "decline"
    WITHDRAW = "withdraw"
    SETTLE_DEPOSIT = "settle_deposit"
    SETTLE_BALANCE = "settle_balance"
    COMPLETE = "complete"
    REQUEST_CANCELLATION = "request_cancellation"
    APPROVE_CANCELLATION = "approve_cancellation"
    DECLINE_CANCELLATION = "decline_cancellation"
    # raised by the expiry sweep only
    EXPIRE = "expire"


class NotificationType(str, Enum):
    BOOKING_REQUEST = "booking_request"
    BOOKING_ACCEPTED = "booking_accepted"
    BOOKING_CANCELLED = "booking_cancelled"
    BOOKING_COMPLETED = "booking_completed"
    BOOKING_EXPIRY = "booking_expiry"
    NEW_MESSAGE = "new_message"
    NEW_REVIEW = "new_review"
    REVIEW_RESPONSE = "review_response"
    VENUE_VERIFIED = "venue_verified"
    ACCOUNT_APPROVED = "account_approved"
    SYSTEM = "system"


def db_enum(enum_cls, name: str):
    """Column type storing the enum's values (not member names)."""
    return SAEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
    )


# Shared by every column holding a booking status so the type is declared once
BOOKING_STATUS_TYPE = db_enum(BookingStatus, "booking_status")
