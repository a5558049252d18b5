from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from venue_booking.db.session import get_db
from venue_booking.core.dependencies import require_role
from venue_booking.core.exceptions import NotFound
from venue_booking.core.logging_config import get_logger
from venue_booking.models.enums import BookingStatus, NotificationType, UserRole
from venue_booking.models.user import User
from venue_booking.schemas.booking import BookingOut
from venue_booking.schemas.review import ReviewOut
from venue_booking.schemas.user import UserAdminUpdate, UserOut
from venue_booking.schemas.venue import VenueAdminUpdate, VenueOut
from venue_booking.services import booking_service, reviews, venue_service
from venue_booking.services.notifications import dispatch, enqueue_notification

router = APIRouter(prefix="/admin-panel", tags=["Admin Panel"])
logger = get_logger()

admin_only = require_role(UserRole.ADMIN)


# ==================================================
# GET ALL USERS (ADMIN)
# ==================================================
@router.get("/users", response_model=list[UserOut])
def get_all_users(admin: User = Depends(admin_only), db: Session = Depends(get_db)):
    return db.query(User).order_by(User.id).all()


# ==================================================
# SUSPEND / APPROVE USER
# ==================================================
@router.patch("/users/{user_id}", response_model=UserOut)
def update_user(user_id: int, data: UserAdminUpdate, admin: User = Depends(admin_only),
                db: Session = Depends(get_db)):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")

    changes = data.model_dump(exclude_unset=True)
    newly_approved = changes.get("approved") and not user.approved
    for field, value in changes.items():
        setattr(user, field, value)

    notification = None
    if newly_approved:
        notification = enqueue_notification(
            db,
            user.id,
            NotificationType.ACCOUNT_APPROVED,
            "Account Approved",
            "Your account has been approved. You can now list venues.",
            link_url="/owner/venues",
        )
    db.commit()
    db.refresh(user)

    logger.bind(log_type="admin").info(f"User Updated | Admin={admin.email} | User={user.id} | {changes}")
    dispatch([notification])
    return user


# ==================================================
# ALL BOOKINGS (MODERATION)
# ==================================================
@router.get("/bookings", response_model=list[BookingOut])
def get_all_bookings(status: Optional[BookingStatus] = None, admin: User = Depends(admin_only),
                     db: Session = Depends(get_db)):
    return booking_service.list_all_bookings(db, status=status)


# ==================================================
# VENUE MODERATION
# ==================================================
@router.get("/venues", response_model=list[VenueOut])
def get_all_venues(admin: User = Depends(admin_only), db: Session = Depends(get_db)):
    return venue_service.list_all_venues(db)


@router.patch("/venues/{venue_id}", response_model=VenueOut)
def moderate_venue(venue_id: int, data: VenueAdminUpdate, admin: User = Depends(admin_only),
                   db: Session = Depends(get_db)):
    return venue_service.moderate_venue(db, admin, venue_id, data.model_dump(exclude_unset=True))


# ==================================================
# REVIEW MODERATION
# ==================================================
@router.get("/reviews", response_model=list[ReviewOut])
def get_all_reviews(admin: User = Depends(admin_only), db: Session = Depends(get_db)):
    return reviews.list_all_reviews(db)


@router.delete("/reviews/{review_id}")
def delete_review(review_id: int, admin: User = Depends(admin_only), db: Session = Depends(get_db)):
    reviews.delete_review(db, admin, review_id)
    return {"message": "Review deleted"}
