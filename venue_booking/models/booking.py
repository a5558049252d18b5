from datetime import datetime

from sqlalchemy import Column, Integer, String, Date, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from venue_booking.db.session import Base
from venue_booking.models.enums import BOOKING_STATUS_TYPE, BookingStatus, PaymentStatus, db_enum


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    venue_id = Column(Integer, ForeignKey("venues.id"), nullable=False, index=True)
    hall_id = Column(Integer, ForeignKey("halls.id"), nullable=False, index=True)
    planner_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    status = Column(
        BOOKING_STATUS_TYPE,
        nullable=False,
        default=BookingStatus.REQUESTED,
        index=True,
    )
    # Where a declined cancellation request returns to (paid or confirmed)
    status_before_cancellation = Column(BOOKING_STATUS_TYPE, nullable=True)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    guests = Column(Integer, nullable=True)

    # AMOUNTS (integer currency units)
    total_amount = Column(Integer, nullable=False)
    deposit_amount = Column(Integer, nullable=False)
    balance_amount = Column(Integer, nullable=False)

    # PAYMENT FIELDS
    deposit_paid = Column(Boolean, default=False, nullable=False)
    balance_paid = Column(Boolean, default=False, nullable=False)
    payment_status = Column(
        db_enum(PaymentStatus, "payment_status"),
        nullable=False,
        default=PaymentStatus.PENDING,
    )
    razorpay_order_id = Column(String, nullable=True)
    razorpay_payment_id = Column(String, nullable=True)

    cancellation_reason = Column(String, nullable=True)
    accepted_at = Column(DateTime, nullable=True)
    expiry_notification_sent = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Optimistic lock: a concurrent writer on the same row fails at flush
    version = Column(Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version}

    venue = relationship("Venue")
    hall = relationship("Hall", back_populates="bookings")
    planner = relationship("User")

    @property
    def last_date(self):
        return self.end_date or self.start_date
