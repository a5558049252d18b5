"""
Planner reviews of completed bookings and the venue owner's public reply.
"""
from sqlalchemy import func

from venue_booking.core.exceptions import NotFound, Unauthorized, ValidationError
from venue_booking.core.logging_config import get_logger
from venue_booking.models.enums import BookingStatus, NotificationType, UserRole
from venue_booking.models.review import Review
from venue_booking.services.booking_service import load_booking
from venue_booking.services.notifications import dispatch, enqueue_notification
from venue_booking.services.venue_service import get_venue
from venue_booking.utils import clock

logger = get_logger()


def list_reviews_for_venue(db, venue_id: int):
    venue = get_venue(db, venue_id)
    return db.query(Review).filter(
        Review.venue_id == venue.id
    ).order_by(Review.created_at.desc(), Review.id.desc()).all()


def venue_rating(db, venue_id: int):
    """Average rating rounded to one decimal, and the number of reviews."""
    avg, count = db.query(func.avg(Review.rating), func.count(Review.id)).filter(
        Review.venue_id == venue_id
    ).one()
    return (round(float(avg), 1) if count else 0.0), count


def create_review(db, planner, booking_id: int, rating: int, comment: str | None = None) -> Review:
    booking = load_booking(db, booking_id)

    if booking.planner_user_id != planner.id:
        raise Unauthorized("You can only review your own bookings")

    if booking.status != BookingStatus.COMPLETED:
        raise ValidationError(
            "You can only review a booking after the event is completed",
            fields={"booking_id": "booking not completed"},
        )

    if not 1 <= rating <= 5:
        raise ValidationError("Rating must be between 1 and 5", fields={"rating": "must be between 1 and 5"})

    if db.query(Review).filter(Review.booking_id == booking.id).first():
        raise ValidationError(
            "You have already reviewed this booking",
            fields={"booking_id": "already reviewed"},
        )

    review = Review(
        venue_id=booking.venue_id,
        booking_id=booking.id,
        planner_user_id=planner.id,
        rating=rating,
        comment=(comment or "").strip() or None,
    )
    db.add(review)
    notification = enqueue_notification(
        db,
        booking.venue.owner_user_id,
        NotificationType.NEW_REVIEW,
        "New Review",
        f"{planner.name} left a {rating}-star review for {booking.venue.title}.",
        link_url=f"/venue/{booking.venue_id}",
        booking_id=booking.id,
    )
    db.commit()
    db.refresh(review)

    logger.info(f"Review Created | Id={review.id} | Booking={booking.id} | Rating={rating}")
    dispatch([notification])
    return review


def get_review(db, review_id: int) -> Review:
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise NotFound("Review not found")
    return review


def respond_to_review(db, owner, review_id: int, response: str) -> Review:
    review = get_review(db, review_id)

    if owner.role != UserRole.ADMIN and review.venue.owner_user_id != owner.id:
        raise Unauthorized("You can only respond to reviews of your own venues")

    response = (response or "").strip()
    if not response:
        raise ValidationError("Response text is required", fields={"response": "required"})

    review.owner_response = response
    review.owner_response_date = clock.utcnow()
    notification = enqueue_notification(
        db,
        review.planner_user_id,
        NotificationType.REVIEW_RESPONSE,
        "Owner Responded",
        f"The owner of {review.venue.title} responded to your review.",
        link_url=f"/venue/{review.venue_id}",
        booking_id=review.booking_id,
    )
    db.commit()
    db.refresh(review)

    logger.info(f"Review Response | Review={review.id} | By={owner.email}")
    dispatch([notification])
    return review


def list_all_reviews(db):
    return db.query(Review).order_by(Review.created_at.desc(), Review.id.desc()).all()


def delete_review(db, admin, review_id: int):
    review = get_review(db, review_id)
    db.delete(review)
    db.commit()
    logger.bind(log_type="admin").info(f"Review Deleted | Admin={admin.email} | Review={review_id}")
