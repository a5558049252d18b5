from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from venue_booking.db.session import Base


class Hall(Base):
    __tablename__ = "halls"

    id = Column(Integer, primary_key=True, index=True)
    venue_id = Column(Integer, ForeignKey("venues.id"), nullable=False, index=True)

    name = Column(String, nullable=False)
    description = Column(String)
    capacity = Column(Integer, nullable=False)

    # Pricing terms (integer currency units)
    price = Column(Integer, nullable=False)
    deposit_percentage = Column(Integer, nullable=False, default=100)
    balance_due_days = Column(Integer, nullable=False, default=7)

    deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "deposit_percentage >= 1 AND deposit_percentage <= 100",
            name="ck_halls_deposit_percentage",
        ),
    )

    # RELATIONSHIPS -------------------------------------
    venue = relationship("Venue", back_populates="halls")
    bookings = relationship("Booking", back_populates="hall")
    blocked_dates = relationship(
        "HallBlockedDate",
        back_populates="hall",
        cascade="all, delete",
        order_by="HallBlockedDate.date",
    )
