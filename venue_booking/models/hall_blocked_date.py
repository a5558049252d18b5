from datetime import datetime

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from venue_booking.db.session import Base


class HallBlockedDate(Base):
    __tablename__ = "hall_blocked_dates"

    id = Column(Integer, primary_key=True, index=True)
    hall_id = Column(Integer, ForeignKey("halls.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    reason = Column(String, nullable=True)

    # Set when the block was created by accepting a booking; NULL for manual blocks
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=True, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # One block per hall per day: concurrent acceptances for the same date collide here
    __table_args__ = (UniqueConstraint("hall_id", "date", name="uq_hall_blocked_date"),)

    hall = relationship("Hall", back_populates="blocked_dates")
