"""
Booking status machine.

Legality lives in a single table keyed by ``(current status, event)``; any
pair missing from the table is an invalid transition. Each event also names
the side of the booking allowed to raise it: the venue owner, the planner
who requested it, or the system (payment gateway, expiry sweep). Admins may
raise any event on any booking.
"""
from venue_booking.core.exceptions import InvalidTransition, Unauthorized
from venue_booking.models.enums import BookingEvent, BookingStatus, UserRole

OWNER = "owner"
PLANNER = "planner"
SYSTEM = "system"

# Target marker for "return to the status held before the cancellation request"
PRIOR_STATUS = "prior_status"

TRANSITIONS = {
    (BookingStatus.REQUESTED, BookingEvent.ACCEPT): BookingStatus.ACCEPTED,
    (BookingStatus.REQUESTED, BookingEvent.DECLINE): BookingStatus.CANCELLED,
    (BookingStatus.REQUESTED, BookingEvent.WITHDRAW): BookingStatus.CANCELLED,
    (BookingStatus.ACCEPTED, BookingEvent.SETTLE_DEPOSIT): BookingStatus.PAID,
    (BookingStatus.ACCEPTED, BookingEvent.EXPIRE): BookingStatus.CANCELLED,
    (BookingStatus.PAID, BookingEvent.SETTLE_BALANCE): BookingStatus.CONFIRMED,
    (BookingStatus.CONFIRMED, BookingEvent.COMPLETE): BookingStatus.COMPLETED,
    (BookingStatus.PAID, BookingEvent.REQUEST_CANCELLATION): BookingStatus.CANCELLATION_REQUESTED,
    (BookingStatus.CONFIRMED, BookingEvent.REQUEST_CANCELLATION): BookingStatus.CANCELLATION_REQUESTED,
    (BookingStatus.CANCELLATION_REQUESTED, BookingEvent.APPROVE_CANCELLATION): BookingStatus.CANCELLED,
    (BookingStatus.CANCELLATION_REQUESTED, BookingEvent.DECLINE_CANCELLATION): PRIOR_STATUS,
}

EVENT_SIDES = {
    BookingEvent.ACCEPT: {OWNER},
    BookingEvent.DECLINE: {OWNER},
    BookingEvent.WITHDRAW: {PLANNER},
    # owners record payments taken at the venue; the gateway settles online ones
    BookingEvent.SETTLE_DEPOSIT: {OWNER, SYSTEM},
    BookingEvent.SETTLE_BALANCE: {OWNER, SYSTEM},
    BookingEvent.COMPLETE: {OWNER},
    BookingEvent.REQUEST_CANCELLATION: {PLANNER},
    BookingEvent.APPROVE_CANCELLATION: {OWNER},
    BookingEvent.DECLINE_CANCELLATION: {OWNER},
    BookingEvent.EXPIRE: {SYSTEM},
}

TERMINAL_STATUSES = {BookingStatus.COMPLETED, BookingStatus.CANCELLED}

SETTLEMENT_EVENTS = {BookingEvent.SETTLE_DEPOSIT, BookingEvent.SETTLE_BALANCE}


def next_status(current: BookingStatus, event: BookingEvent, prior: BookingStatus | None = None) -> BookingStatus:
    target = TRANSITIONS.get((current, event))
    if target is None:
        raise InvalidTransition(current.value, event.value)

    if target == PRIOR_STATUS:
        if prior not in (BookingStatus.PAID, BookingStatus.CONFIRMED):
            raise InvalidTransition(
                current.value, event.value, "No prior status recorded to return to"
            )
        return prior

    return target


def actor_sides(actor, booking) -> set:
    if actor is None:
        return {SYSTEM}

    sides = set()
    if actor.id == booking.planner_user_id:
        sides.add(PLANNER)
    if booking.venue is not None and booking.venue.owner_user_id == actor.id:
        sides.add(OWNER)
    return sides


def authorize(actor, booking, event: BookingEvent) -> bool:
    """
    Check the actor may raise ``event`` on ``booking``.

    Returns True when the call goes through the admin override path.
    Raises Unauthorized otherwise.
    """
    if actor is not None and actor.role == UserRole.ADMIN:
        return True

    if not actor_sides(actor, booking) & EVENT_SIDES[event]:
        raise Unauthorized("You are not allowed to perform this action on this booking")

    return False


def already_settled(booking, event: BookingEvent) -> bool:
    """True when a settlement event would be a repeat of one already applied."""
    if event == BookingEvent.SETTLE_DEPOSIT:
        return bool(booking.deposit_paid)
    if event == BookingEvent.SETTLE_BALANCE:
        return bool(booking.balance_paid)
    return False
