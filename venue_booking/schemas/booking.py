from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from venue_booking.models.enums import BookingEvent, BookingStatus, PaymentStatus


class BookingBase(BaseModel):
    hall_id: int
    start_date: date
    end_date: Optional[date] = None
    guests: Optional[int] = Field(default=None, ge=1)


class BookingCreate(BookingBase):
    pass


class BookingOut(BookingBase):
    id: int
    venue_id: int
    planner_user_id: int
    status: BookingStatus

    total_amount: int
    deposit_amount: int
    balance_amount: int
    deposit_paid: bool
    balance_paid: bool
    payment_status: PaymentStatus

    cancellation_reason: Optional[str]
    accepted_at: Optional[datetime]
    expiry_notification_sent: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class BookingTransitionIn(BaseModel):
    event: BookingEvent
    reason: Optional[str] = None


class PaymentOrderOut(BaseModel):
    booking_id: int
    amount: int
    currency: str
    razorpay_order_id: str
    razorpay_key_id: str


class PaymentVerifyIn(BaseModel):
    razorpay_order_id: str
    razorpay_payment_id: str
    razorpay_signature: str


class ExpiryScanOut(BaseModel):
    scanned: int
    warned: List[int]
    expired: List[int]


class HallRevenueOut(BaseModel):
    hall_id: int
    hall_name: str
    venue_title: str
    revenue: int
    booking_count: int


class MonthRevenueOut(BaseModel):
    month: str
    revenue: int
    booking_count: int


class OwnerRevenueOut(BaseModel):
    total_revenue: int
    booking_count: int
    revenue_by_hall: List[HallRevenueOut]
    revenue_by_month: List[MonthRevenueOut]
