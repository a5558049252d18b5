from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from venue_booking.db.session import Base

VENUE_ACTIVE = "active"
VENUE_SUSPENDED = "suspended"


class Venue(Base):
    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, index=True)

    # Ownership
    owner_user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    created_by_admin = Column(Boolean, default=False, nullable=False)

    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    address = Column(String, nullable=True)
    city = Column(String, nullable=False)
    state = Column(String, nullable=False)
    type = Column(String, nullable=False, default="Wedding")
    # Suspended venues drop out of listings and stop taking requests
    status = Column(String, nullable=False, default=VENUE_ACTIVE)
    verified = Column(Boolean, default=False, nullable=False)
    featured = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    owner = relationship("User", back_populates="venues")
    halls = relationship("Hall", back_populates="venue", cascade="all, delete")
