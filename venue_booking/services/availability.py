from sqlalchemy.exc import IntegrityError

from venue_booking.core.config import BOOKED_DATES_CACHE_TTL
from venue_booking.core.exceptions import DateUnavailable, NotFound, ValidationError
from venue_booking.core.logging_config import get_logger
from venue_booking.core.redis import get_cache, set_cache, delete_cache
from venue_booking.models.booking import Booking
from venue_booking.models.enums import BookingStatus
from venue_booking.models.hall_blocked_date import HallBlockedDate
from venue_booking.utils.pricing import date_span

logger = get_logger()

# Statuses whose dates show as taken on a hall calendar
ACTIVE_STATUSES = (
    BookingStatus.REQUESTED,
    BookingStatus.ACCEPTED,
    BookingStatus.PAID,
    BookingStatus.CONFIRMED,
    BookingStatus.CANCELLATION_REQUESTED,
)


def booked_dates_cache_key(hall_id: int) -> str:
    return f"hall:{hall_id}:booked-dates"


def invalidate_hall_calendar(hall_id: int):
    delete_cache(booked_dates_cache_key(hall_id))


def find_blocked(db, hall_id, days):
    """Dates among ``days`` already in the hall's blocked-dates set."""
    rows = db.query(HallBlockedDate.date).filter(
        HallBlockedDate.hall_id == hall_id,
        HallBlockedDate.date.in_(days),
    ).all()
    return sorted(row.date for row in rows)


def block_dates_for_booking(db, booking):
    for day in date_span(booking.start_date, booking.end_date):
        db.add(HallBlockedDate(
            hall_id=booking.hall_id,
            date=day,
            reason=f"Booking #{booking.id}",
            booking_id=booking.id,
        ))
    # the unique (hall_id, date) index rejects a concurrent acceptance here
    db.flush()


def release_dates_for_booking(db, booking):
    db.query(HallBlockedDate).filter(
        HallBlockedDate.booking_id == booking.id
    ).delete(synchronize_session=False)


def get_booked_dates(db, hall_id: int) -> dict:
    key = booked_dates_cache_key(hall_id)
    cached = get_cache(key)
    if cached is not None:
        return cached

    blocked = db.query(HallBlockedDate).filter(
        HallBlockedDate.hall_id == hall_id
    ).order_by(HallBlockedDate.date).all()

    bookings = db.query(Booking).filter(
        Booking.hall_id == hall_id,
        Booking.status.in_(ACTIVE_STATUSES),
    ).all()

    booked = set()
    for b in bookings:
        booked.update(date_span(b.start_date, b.end_date))

    result = {
        "hall_id": hall_id,
        "blocked_dates": [bd.date.isoformat() for bd in blocked],
        "booked_dates": sorted(d.isoformat() for d in booked),
    }
    set_cache(key, result, ttl=BOOKED_DATES_CACHE_TTL)
    return result


def list_blocked_dates(db, hall_id: int):
    return db.query(HallBlockedDate).filter(
        HallBlockedDate.hall_id == hall_id
    ).order_by(HallBlockedDate.date).all()


def add_blocked_date(db, hall, day, reason=None) -> HallBlockedDate:
    if find_blocked(db, hall.id, [day]):
        raise DateUnavailable(
            f"{day.isoformat()} is already blocked for this hall",
            fields={"date": "already blocked"},
        )

    blocked = HallBlockedDate(hall_id=hall.id, date=day, reason=reason)
    db.add(blocked)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DateUnavailable(
            f"{day.isoformat()} is already blocked for this hall",
            fields={"date": "already blocked"},
        )

    db.refresh(blocked)
    invalidate_hall_calendar(hall.id)
    logger.bind(log_type="booking").info(f"Date Blocked | Hall={hall.id} | Date={day}")
    return blocked


def get_blocked_date(db, blocked_id: int) -> HallBlockedDate:
    blocked = db.query(HallBlockedDate).filter(HallBlockedDate.id == blocked_id).first()
    if not blocked:
        raise NotFound("Blocked date not found")
    return blocked


def remove_blocked_date(db, blocked: HallBlockedDate):
    if blocked.booking_id is not None:
        raise ValidationError(
            "This date is held by an accepted booking; cancel the booking to release it",
            fields={"id": "held by booking"},
        )

    hall_id = blocked.hall_id
    db.delete(blocked)
    db.commit()
    invalidate_hall_calendar(hall_id)
    logger.bind(log_type="booking").info(f"Date Unblocked | Hall={hall_id} | Date={blocked.date}")
