from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from venue_booking.db.session import get_db
from venue_booking.core.dependencies import get_current_principal, require_role
from venue_booking.models.enums import BookingStatus, UserRole
from venue_booking.models.user import User
from venue_booking.schemas.booking import (
    BookingCreate,
    BookingOut,
    BookingTransitionIn,
    ExpiryScanOut,
    OwnerRevenueOut,
    PaymentOrderOut,
    PaymentVerifyIn,
)
from venue_booking.schemas.message import MessageCreate, MessageOut
from venue_booking.services import booking_service, messages, payments
from venue_booking.services.expiry import run_expiry_scan

router = APIRouter(prefix="/bookings", tags=["Bookings"])


# ---------------------------------------------------------------------
# CREATE BOOKING
# ---------------------------------------------------------------------
@router.post("/", response_model=BookingOut, status_code=status.HTTP_201_CREATED)
def create_booking(
    data: BookingCreate,
    user: User = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return booking_service.create_booking(
        db,
        user,
        hall_id=data.hall_id,
        start_date=data.start_date,
        end_date=data.end_date,
        guests=data.guests,
    )


# ---------------------------------------------------------------------
# PLANNER: MY BOOKINGS
# ---------------------------------------------------------------------
@router.get("/my", response_model=list[BookingOut])
def my_bookings(
    status: Optional[BookingStatus] = None,
    user: User = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return booking_service.list_bookings_for_user(db, user, status=status)


# ---------------------------------------------------------------------
# OWNER: BOOKINGS ACROSS OWN VENUES
# ---------------------------------------------------------------------
@router.get("/owner", response_model=list[BookingOut])
def owner_bookings(
    status: Optional[BookingStatus] = None,
    user: User = Depends(require_role(UserRole.VENUE_HOLDER, UserRole.ADMIN)),
    db: Session = Depends(get_db),
):
    return booking_service.list_bookings_for_owner(db, user, status=status)


# ---------------------------------------------------------------------
# OWNER: REVENUE
# ---------------------------------------------------------------------
@router.get("/owner/revenue", response_model=OwnerRevenueOut)
def owner_revenue(
    venue_id: Optional[int] = None,
    hall_id: Optional[int] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    user: User = Depends(require_role(UserRole.VENUE_HOLDER)),
    db: Session = Depends(get_db),
):
    return booking_service.owner_revenue(
        db, user, venue_id=venue_id, hall_id=hall_id, date_from=date_from, date_to=date_to
    )



# ---------------------------------------------------------------------
# OWNER / ADMIN: BOOKINGS OF ONE VENUE
# ---------------------------------------------------------------------
@router.get("/venue/{venue_id}", response_model=list[BookingOut])
def venue_bookings(
    venue_id: int,
    status: Optional[BookingStatus] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    user: User = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return booking_service.list_bookings_for_venue(
        db, venue_id, user, status=status, date_from=date_from, date_to=date_to
    )


# ---------------------------------------------------------------------
# ADMIN: EXPIRY SWEEP
# ---------------------------------------------------------------------
@router.post("/expiry-scan", response_model=ExpiryScanOut)
def expiry_scan(
    user: User = Depends(require_role(UserRole.ADMIN)),
    db: Session = Depends(get_db),
):
    return run_expiry_scan(db).as_dict()


# ---------------------------------------------------------------------
# SINGLE BOOKING
# ---------------------------------------------------------------------
@router.get("/{booking_id}", response_model=BookingOut)
def get_booking(
    booking_id: int,
    user: User = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return booking_service.get_booking(db, booking_id, user)


# ---------------------------------------------------------------------
# STATUS TRANSITION
# ---------------------------------------------------------------------
@router.post("/{booking_id}/transitions", response_model=BookingOut)
def transition_booking(
    booking_id: int,
    data: BookingTransitionIn,
    user: User = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return booking_service.transition(db, booking_id, data.event, actor=user, reason=data.reason)


# ---------------------------------------------------------------------
# ONLINE PAYMENT
# ---------------------------------------------------------------------
@router.post("/{booking_id}/payments/order", response_model=PaymentOrderOut)
def open_payment_order(
    booking_id: int,
    user: User = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return payments.open_order(db, booking_id, user)


@router.post("/{booking_id}/payments/verify", response_model=BookingOut)
def verify_payment(
    booking_id: int,
    data: PaymentVerifyIn,
    user: User = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return payments.verify_payment(
        db,
        booking_id,
        user,
        order_id=data.razorpay_order_id,
        payment_id=data.razorpay_payment_id,
        signature=data.razorpay_signature,
    )


# ---------------------------------------------------------------------
# BOOKING MESSAGES
# ---------------------------------------------------------------------
@router.get("/{booking_id}/messages", response_model=list[MessageOut])
def booking_messages(
    booking_id: int,
    user: User = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return messages.list_thread(db, booking_id, user)


@router.post("/{booking_id}/messages", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
def post_booking_message(
    booking_id: int,
    data: MessageCreate,
    user: User = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    return messages.send_message(db, booking_id, user, data.body)
