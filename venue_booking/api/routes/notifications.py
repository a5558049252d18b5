from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from venue_booking.db.session import get_db
from venue_booking.core.dependencies import get_current_principal
from venue_booking.core.exceptions import NotFound
from venue_booking.models.notification import Notification
from venue_booking.models.user import User
from venue_booking.schemas.notification import NotificationOut

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("/", response_model=list[NotificationOut])
def my_notifications(user: User = Depends(get_current_principal), db: Session = Depends(get_db)):
    return db.query(Notification).filter(
        Notification.user_id == user.id
    ).order_by(Notification.created_at.desc(), Notification.id.desc()).all()


@router.get("/unread-count")
def unread_count(user: User = Depends(get_current_principal), db: Session = Depends(get_db)):
    count = db.query(Notification).filter(
        Notification.user_id == user.id,
        Notification.read == False  # noqa: E712
    ).count()
    return {"unread": count}


@router.post("/read-all")
def mark_all_read(user: User = Depends(get_current_principal), db: Session = Depends(get_db)):
    db.query(Notification).filter(
        Notification.user_id == user.id,
        Notification.read == False  # noqa: E712
    ).update({Notification.read: True}, synchronize_session=False)
    db.commit()
    return {"message": "All notifications marked as read"}


@router.post("/{notification_id}/read", response_model=NotificationOut)
def mark_read(notification_id: int, user: User = Depends(get_current_principal),
              db: Session = Depends(get_db)):
    notification = db.query(Notification).filter(
        Notification.id == notification_id,
        Notification.user_id == user.id
    ).first()
    if not notification:
        raise NotFound("Notification not found")

    notification.read = True
    db.commit()
    db.refresh(notification)
    return notification
