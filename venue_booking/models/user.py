from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship

from venue_booking.db.session import Base
from venue_booking.models.enums import UserRole, db_enum


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    phone = Column(String, nullable=True)
    password_hash = Column(String, nullable=False)

    role = Column(db_enum(UserRole, "user_role"), nullable=False, default=UserRole.PLANNER)
    suspended = Column(Boolean, default=False, nullable=False)
    approved = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Venue holder → venues they own
    venues = relationship("Venue", back_populates="owner")
