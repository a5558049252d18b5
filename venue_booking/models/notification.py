from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey

from venue_booking.db.session import Base
from venue_booking.models.enums import NotificationType, db_enum


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=True)

    type = Column(db_enum(NotificationType, "notification_type"), nullable=False)
    title = Column(String, nullable=False)
    body = Column(String, nullable=False)
    link_url = Column(String, nullable=True)
    read = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
