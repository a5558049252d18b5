from datetime import date, datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from venue_booking.core.exceptions import (
    BookingError,
    CapacityExceeded,
    DateUnavailable,
    InvalidTransition,
    NotFound,
    Unauthorized,
    ValidationError,
)
from venue_booking.core.logging_config import get_logger
from venue_booking.models.booking import Booking
from venue_booking.models.enums import (
    BookingEvent,
    BookingStatus,
    NotificationType,
    PaymentStatus,
    UserRole,
)
from venue_booking.models.hall import Hall
from venue_booking.models.venue import VENUE_ACTIVE, Venue
from venue_booking.services.availability import (
    block_dates_for_booking,
    find_blocked,
    invalidate_hall_calendar,
    release_dates_for_booking,
)
from venue_booking.services.booking_lifecycle import (
    already_settled,
    authorize,
    next_status,
)
from venue_booking.services.notifications import dispatch, enqueue_notification, post_message
from venue_booking.utils import clock
from venue_booking.utils.pricing import booking_total, date_span, split_amount

logger = get_logger()

PAYMENT_WINDOW_EXPIRED = "payment window expired"


def _event_date(booking) -> str:
    return booking.start_date.strftime("%B %d, %Y")


def _owner_id(booking):
    return booking.venue.owner_user_id if booking.venue else None


def _actor_label(actor) -> str:
    if actor is None:
        return "system"
    return f"{actor.role.value}:{actor.id}"


def load_booking(db, booking_id: int) -> Booking:
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        raise NotFound("Booking not found")
    return booking


def can_view(actor, booking) -> bool:
    if actor.role == UserRole.ADMIN:
        return True
    return actor.id in (booking.planner_user_id, _owner_id(booking))


# ---------------------------------------------------------------------
# CREATE BOOKING
# ---------------------------------------------------------------------
def create_booking(db, planner, hall_id: int, start_date: date, end_date: date | None = None,
                   guests: int | None = None, today: date | None = None) -> Booking:
    today = today or clock.utcnow().date()

    if planner.role != UserRole.PLANNER:
        raise Unauthorized("Only planners can request bookings")

    hall = db.query(Hall).filter(
        Hall.id == hall_id,
        Hall.deleted == False  # noqa: E712
    ).first()
    if not hall:
        raise NotFound("Hall not found")

    if hall.venue.status != VENUE_ACTIVE:
        raise ValidationError(
            "This venue is not accepting bookings",
            fields={"hall_id": "venue suspended"},
        )

    # ---- DATE VALIDATIONS ----
    if start_date <= today:
        raise ValidationError(
            "Start date must be in the future",
            fields={"start_date": "must be after today"},
        )

    if end_date is not None and end_date < start_date:
        raise ValidationError(
            "End date cannot be before start date",
            fields={"end_date": "must not be before start_date"},
        )

    # ---- CAPACITY ----
    if guests is not None:
        if guests < 1:
            raise ValidationError("Guest count must be at least 1", fields={"guests": "must be >= 1"})
        if guests > hall.capacity:
            raise CapacityExceeded(
                f"{hall.name} holds at most {hall.capacity} guests",
                fields={"guests": f"must be <= {hall.capacity}"},
            )

    # ---- AVAILABILITY ----
    taken = find_blocked(db, hall.id, date_span(start_date, end_date))
    if taken:
        raise DateUnavailable(
            "Hall is not available on " + ", ".join(d.isoformat() for d in taken),
            fields={"start_date": "date unavailable"},
        )

    # ---- AMOUNTS ----
    total_amount = booking_total(hall)
    deposit_amount, balance_amount = split_amount(total_amount, hall.deposit_percentage)

    booking = Booking(
        venue_id=hall.venue_id,
        hall_id=hall.id,
        planner_user_id=planner.id,
        status=BookingStatus.REQUESTED,
        start_date=start_date,
        end_date=end_date,
        guests=guests,
        total_amount=total_amount,
        deposit_amount=deposit_amount,
        balance_amount=balance_amount,
        payment_status=PaymentStatus.PENDING,
    )

    try:
        db.add(booking)
        db.flush()

        owner_id = hall.venue.owner_user_id
        guest_info = f" for {guests} guests" if guests else ""
        notifications = [
            enqueue_notification(
                db,
                owner_id,
                NotificationType.BOOKING_REQUEST,
                "New Booking Request",
                f"{planner.name} wants to book {hall.name} at {hall.venue.title} on {_event_date(booking)}",
                link_url="/owner/bookings",
                booking_id=booking.id,
            )
        ]
        post_message(
            db, booking.id, planner.id, owner_id,
            f"New booking request! {planner.name} has requested to book {hall.name} at "
            f"{hall.venue.title} on {_event_date(booking)}{guest_info}. "
            f"Please review and approve or decline this booking.",
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(booking)
    invalidate_hall_calendar(hall.id)

    logger.bind(log_type="booking").info(
        f"Booking Created | Id={booking.id} | Planner={planner.email} | Hall={hall.id} "
        f"| Total={total_amount} | Deposit={deposit_amount} | Balance={balance_amount}"
    )
    dispatch(notifications)
    return booking


# ---------------------------------------------------------------------
# TRANSITION HANDLERS
# Each applies one event to the booking inside the open transaction and
# returns the notifications it queued.
# ---------------------------------------------------------------------
def _accept(db, booking, target, actor, reason, now, override):
    taken = find_blocked(db, booking.hall_id, date_span(booking.start_date, booking.end_date))
    if taken:
        raise DateUnavailable(
            "Hall is already booked or blocked on " + ", ".join(d.isoformat() for d in taken),
            fields={"start_date": "date unavailable"},
        )

    booking.status = target
    booking.accepted_at = now
    block_dates_for_booking(db, booking)

    post_message(
        db, booking.id, actor.id if actor else None, booking.planner_user_id,
        f"Great news! Your booking for {booking.hall.name} at {booking.venue.title} on "
        f"{_event_date(booking)} has been approved. Please pay the deposit of "
        f"{booking.deposit_amount} to secure your reservation.",
    )
    return [
        enqueue_notification(
            db,
            booking.planner_user_id,
            NotificationType.BOOKING_ACCEPTED,
            "Booking Approved!",
            f"Your booking for {booking.hall.name} at {booking.venue.title} on "
            f"{_event_date(booking)} has been approved. Pay the deposit to confirm.",
            link_url="/bookings",
            booking_id=booking.id,
        )
    ]


def _cancel(db, booking, target, actor, reason, now, override, event):
    previous = booking.status

    if event in (BookingEvent.DECLINE, BookingEvent.WITHDRAW, BookingEvent.EXPIRE) and booking.deposit_paid:
        raise InvalidTransition(previous.value, event.value, "A payment has already been made on this booking")

    booking.status = target
    booking.status_before_cancellation = None
    if event == BookingEvent.EXPIRE:
        booking.cancellation_reason = PAYMENT_WINDOW_EXPIRED
    elif reason:
        booking.cancellation_reason = reason

    if previous != BookingStatus.REQUESTED:
        release_dates_for_booking(db, booking)

    if booking.deposit_paid:
        booking.payment_status = PaymentStatus.REFUNDED
        logger.bind(log_type="payment").info(
            f"Refund Triggered | Booking={booking.id} | Deposit={booking.deposit_amount} "
            f"| BalancePaid={booking.balance_paid}"
        )

    body = (
        f"Booking for {booking.hall.name} at {booking.venue.title} on {_event_date(booking)} "
        f"has been cancelled."
    )
    if booking.cancellation_reason:
        body += f" Reason: {booking.cancellation_reason}"

    if event == BookingEvent.WITHDRAW:
        recipients = [(_owner_id(booking), "/owner/bookings")]
    elif event == BookingEvent.EXPIRE:
        recipients = [(booking.planner_user_id, "/bookings"), (_owner_id(booking), "/owner/bookings")]
    else:
        recipients = [(booking.planner_user_id, "/bookings")]

    return [
        enqueue_notification(
            db, user_id, NotificationType.BOOKING_CANCELLED, "Booking Cancelled", body,
            link_url=link, booking_id=booking.id,
        )
        for user_id, link in recipients
    ]


def _settle_deposit(db, booking, target, actor, reason, now, override):
    booking.deposit_paid = True
    booking.payment_status = PaymentStatus.COMPLETED
    booking.status = target

    # full deposit: the same settlement also covers the balance
    if booking.balance_amount == 0:
        booking.balance_paid = True
        booking.status = next_status(target, BookingEvent.SETTLE_BALANCE)

    logger.bind(log_type="payment").info(
        f"Deposit Settled | Booking={booking.id} | Amount={booking.deposit_amount} "
        f"| By={_actor_label(actor)}"
    )

    confirmed = booking.status == BookingStatus.CONFIRMED
    notifications = [
        enqueue_notification(
            db,
            _owner_id(booking),
            NotificationType.BOOKING_ACCEPTED,
            "Payment Received",
            f"Deposit of {booking.deposit_amount} received for {booking.hall.name} on {_event_date(booking)}.",
            link_url="/owner/bookings",
            booking_id=booking.id,
        ),
        enqueue_notification(
            db,
            booking.planner_user_id,
            NotificationType.BOOKING_ACCEPTED,
            "Booking Confirmed!" if confirmed else "Payment Successful",
            f"Your payment for {booking.hall.name} at {booking.venue.title} on {_event_date(booking)} "
            + ("was received. Your booking is now confirmed!" if confirmed
               else f"was received. The balance of {booking.balance_amount} is still due."),
            link_url="/bookings",
            booking_id=booking.id,
        ),
    ]
    return notifications


def _settle_balance(db, booking, target, actor, reason, now, override):
    if not booking.deposit_paid:
        raise InvalidTransition(booking.status.value, BookingEvent.SETTLE_BALANCE.value,
                                "The deposit must be settled before the balance")

    booking.balance_paid = True
    booking.payment_status = PaymentStatus.COMPLETED
    booking.status = target

    logger.bind(log_type="payment").info(
        f"Balance Settled | Booking={booking.id} | Amount={booking.balance_amount} "
        f"| By={_actor_label(actor)}"
    )

    post_message(
        db, booking.id, _owner_id(booking), booking.planner_user_id,
        f"Your booking for {booking.hall.name} at {booking.venue.title} on {_event_date(booking)} "
        f"is now confirmed! Everything is set for your event.",
    )
    return [
        enqueue_notification(
            db,
            booking.planner_user_id,
            NotificationType.BOOKING_ACCEPTED,
            "Booking Confirmed!",
            f"Your booking for {booking.hall.name} at {booking.venue.title} on "
            f"{_event_date(booking)} is now confirmed!",
            link_url="/bookings",
            booking_id=booking.id,
        )
    ]


def _complete(db, booking, target, actor, reason, now, override):
    if not override and booking.start_date > now.date():
        raise InvalidTransition(
            booking.status.value, BookingEvent.COMPLETE.value,
            "A booking can only be completed once its event date has arrived",
        )

    booking.status = target
    return [
        enqueue_notification(
            db,
            booking.planner_user_id,
            NotificationType.BOOKING_COMPLETED,
            "Event Completed",
            f"Your event at {booking.hall.name} ({booking.venue.title}) has been marked as completed.",
            link_url=f"/venue/{booking.venue_id}",
            booking_id=booking.id,
        )
    ]


def _request_cancellation(db, booking, target, actor, reason, now, override):
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError(
            "A reason is required to request a cancellation",
            fields={"reason": "required"},
        )

    booking.status_before_cancellation = booking.status
    booking.cancellation_reason = reason
    booking.status = target

    requester = actor.name if actor else "The planner"
    post_message(
        db, booking.id, actor.id if actor else None, _owner_id(booking),
        f"{requester} has requested to cancel their booking for {booking.hall.name} at "
        f"{booking.venue.title} on {_event_date(booking)}. Reason: {reason} "
        f"Please review and approve or decline the cancellation.",
    )
    return [
        enqueue_notification(
            db,
            _owner_id(booking),
            NotificationType.BOOKING_CANCELLED,
            "Cancellation Requested",
            f"{requester} has requested to cancel their booking for {booking.hall.name} "
            f"on {_event_date(booking)}.",
            link_url="/owner/bookings",
            booking_id=booking.id,
        )
    ]


def _decline_cancellation(db, booking, target, actor, reason, now, override):
    booking.status = target
    booking.status_before_cancellation = None
    booking.cancellation_reason = None

    return [
        enqueue_notification(
            db,
            booking.planner_user_id,
            NotificationType.BOOKING_ACCEPTED,
            "Cancellation Declined",
            f"Your cancellation request for {booking.hall.name} on {_event_date(booking)} was "
            f"declined. Your booking remains {target.value}.",
            link_url="/bookings",
            booking_id=booking.id,
        )
    ]


def _cancel_handler(event):
    def handler(db, booking, target, actor, reason, now, override):
        return _cancel(db, booking, target, actor, reason, now, override, event)
    return handler


_HANDLERS = {
    BookingEvent.ACCEPT: _accept,
    BookingEvent.DECLINE: _cancel_handler(BookingEvent.DECLINE),
    BookingEvent.WITHDRAW: _cancel_handler(BookingEvent.WITHDRAW),
    BookingEvent.SETTLE_DEPOSIT: _settle_deposit,
    BookingEvent.SETTLE_BALANCE: _settle_balance,
    BookingEvent.COMPLETE: _complete,
    BookingEvent.REQUEST_CANCELLATION: _request_cancellation,
    BookingEvent.APPROVE_CANCELLATION: _cancel_handler(BookingEvent.APPROVE_CANCELLATION),
    BookingEvent.DECLINE_CANCELLATION: _decline_cancellation,
    BookingEvent.EXPIRE: _cancel_handler(BookingEvent.EXPIRE),
}


# ---------------------------------------------------------------------
# TRANSITION
# ---------------------------------------------------------------------
def transition(db, booking_id: int, event: BookingEvent, actor=None, reason: str | None = None,
               now: datetime | None = None, payment_id: str | None = None) -> Booking:
    """
    Apply ``event`` to a booking on behalf of ``actor`` (None for the system).

    The status change, blocked-date writes, notifications and messages commit
    as one unit. On any failure the booking is left as it was.
    ``payment_id`` is the gateway reference of the payment that raised a
    settlement; it is stored in the same unit.
    """
    now = now or clock.utcnow()
    event = BookingEvent(event)

    booking = load_booking(db, booking_id)
    override = authorize(actor, booking, event)

    # ✅ IDEMPOTENCY CHECK
    if already_settled(booking, event):
        logger.bind(log_type="payment").info(
            f"Settlement Repeated | Booking={booking.id} | Event={event.value} | ignored"
        )
        return booking

    previous = booking.status
    target = next_status(previous, event, booking.status_before_cancellation)

    try:
        if payment_id is not None:
            booking.razorpay_payment_id = payment_id
        notifications = _HANDLERS[event](db, booking, target, actor, reason, now, override)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DateUnavailable(
            "Hall was booked for this date by another request",
            fields={"start_date": "date unavailable"},
        )
    except StaleDataError:
        db.rollback()
        raise InvalidTransition(
            previous.value, event.value,
            "Booking was changed by another request; reload it and retry",
        )
    except BookingError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Transition failed | Booking={booking_id} | Event={event.value} -> {e}")
        raise

    db.refresh(booking)
    invalidate_hall_calendar(booking.hall_id)

    logger.bind(log_type="booking").info(
        f"Booking Transition | Id={booking.id} | {previous.value} -> {booking.status.value} "
        f"| Event={event.value} | By={_actor_label(actor)}"
    )
    if override:
        logger.bind(log_type="admin").info(
            f"Admin Override | Admin={actor.email} | Booking={booking.id} | Event={event.value} "
            f"| {previous.value} -> {booking.status.value}"
        )

    dispatch(notifications)
    return booking


# ---------------------------------------------------------------------
# QUERIES
# ---------------------------------------------------------------------
def get_booking(db, booking_id: int, actor) -> Booking:
    booking = load_booking(db, booking_id)
    if not can_view(actor, booking):
        raise Unauthorized("Not authorized to view this booking")
    return booking


def _apply_filters(query, status=None, date_from=None, date_to=None):
    if status is not None:
        query = query.filter(Booking.status == status)
    if date_from is not None:
        query = query.filter(Booking.start_date >= date_from)
    if date_to is not None:
        query = query.filter(Booking.start_date <= date_to)
    return query


def list_bookings_for_user(db, user, status: BookingStatus | None = None):
    query = db.query(Booking).filter(Booking.planner_user_id == user.id)
    return _apply_filters(query, status).order_by(Booking.created_at.desc(), Booking.id.desc()).all()


def list_bookings_for_owner(db, owner, status: BookingStatus | None = None):
    query = db.query(Booking).join(Venue, Booking.venue_id == Venue.id).filter(
        Venue.owner_user_id == owner.id
    )
    return _apply_filters(query, status).order_by(Booking.created_at.desc(), Booking.id.desc()).all()


def list_bookings_for_venue(db, venue_id: int, actor, status: BookingStatus | None = None,
                            date_from: date | None = None, date_to: date | None = None):
    venue = db.query(Venue).filter(Venue.id == venue_id).first()
    if not venue:
        raise NotFound("Venue not found")

    if actor.role != UserRole.ADMIN and venue.owner_user_id != actor.id:
        raise Unauthorized("You do not own this venue")

    query = db.query(Booking).filter(Booking.venue_id == venue_id)
    return _apply_filters(query, status, date_from, date_to).order_by(
        Booking.start_date.asc(), Booking.id.asc()
    ).all()


def list_all_bookings(db, status: BookingStatus | None = None):
    query = _apply_filters(db.query(Booking), status)
    return query.order_by(Booking.created_at.desc(), Booking.id.desc()).all()


def collected_amount(booking) -> int:
    if booking.payment_status == PaymentStatus.REFUNDED:
        return 0
    return (booking.deposit_amount if booking.deposit_paid else 0) + \
        (booking.balance_amount if booking.balance_paid else 0)


def owner_revenue(db, owner, venue_id: int | None = None, hall_id: int | None = None,
                  date_from: date | None = None, date_to: date | None = None) -> dict:
    """
    Money collected across the owner's venues, by hall and by event month.

    Only settled amounts count; refunded bookings contribute nothing.
    """
    if venue_id is not None:
        venue = db.query(Venue).filter(Venue.id == venue_id).first()
        if not venue:
            raise NotFound("Venue not found")
        if venue.owner_user_id != owner.id:
            raise Unauthorized("You do not own this venue")

    query = db.query(Booking).join(Venue, Booking.venue_id == Venue.id).filter(
        Venue.owner_user_id == owner.id,
        Booking.deposit_paid == True,  # noqa: E712
    )
    if venue_id is not None:
        query = query.filter(Booking.venue_id == venue_id)
    if hall_id is not None:
        query = query.filter(Booking.hall_id == hall_id)
    query = _apply_filters(query, date_from=date_from, date_to=date_to)

    total = 0
    count = 0
    by_hall = {}
    by_month = {}
    for booking in query.order_by(Booking.start_date, Booking.id).all():
        amount = collected_amount(booking)
        if not amount:
            continue
        total += amount
        count += 1

        hall_row = by_hall.setdefault(booking.hall_id, {
            "hall_id": booking.hall_id,
            "hall_name": booking.hall.name,
            "venue_title": booking.venue.title,
            "revenue": 0,
            "booking_count": 0,
        })
        hall_row["revenue"] += amount
        hall_row["booking_count"] += 1

        month_row = by_month.setdefault(booking.start_date.strftime("%Y-%m"), {"revenue": 0, "booking_count": 0})
        month_row["revenue"] += amount
        month_row["booking_count"] += 1

    return {
        "total_revenue": total,
        "booking_count": count,
        "revenue_by_hall": sorted(by_hall.values(), key=lambda row: (-row["revenue"], row["hall_id"])),
        "revenue_by_month": [{"month": month, **row} for month, row in sorted(by_month.items())],
    }
