from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from venue_booking.db.session import get_db
from venue_booking.core.dependencies import require_role
from venue_booking.models.enums import UserRole
from venue_booking.models.user import User
from venue_booking.schemas.review import ReviewCreate, ReviewOut, ReviewResponseIn, VenueRatingOut
from venue_booking.services import reviews

router = APIRouter(tags=["Reviews"])


# =====================================================================
# PUBLIC: REVIEWS OF A VENUE
# =====================================================================
@router.get("/venues/{venue_id}/reviews", response_model=VenueRatingOut)
def venue_reviews(venue_id: int, db: Session = Depends(get_db)):
    items = reviews.list_reviews_for_venue(db, venue_id)
    rating, count = reviews.venue_rating(db, venue_id)
    return {"venue_id": venue_id, "rating": rating, "review_count": count, "reviews": items}


# =====================================================================
# PLANNER: REVIEW A COMPLETED BOOKING
# =====================================================================
@router.post("/reviews/", response_model=ReviewOut, status_code=status.HTTP_201_CREATED)
def create_review(data: ReviewCreate, user: User = Depends(require_role(UserRole.PLANNER)),
                  db: Session = Depends(get_db)):
    return reviews.create_review(db, user, data.booking_id, data.rating, data.comment)


# =====================================================================
# OWNER: RESPOND TO A REVIEW
# =====================================================================
@router.post("/reviews/{review_id}/response", response_model=ReviewOut)
def respond_to_review(review_id: int, data: ReviewResponseIn,
                      user: User = Depends(require_role(UserRole.VENUE_HOLDER, UserRole.ADMIN)),
                      db: Session = Depends(get_db)):
    return reviews.respond_to_review(db, user, review_id, data.response)
