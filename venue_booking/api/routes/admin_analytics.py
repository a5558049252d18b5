from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import case, func

from venue_booking.db.session import get_db
from venue_booking.core.dependencies import require_role
from venue_booking.core.logging_config import get_logger
from venue_booking.models.booking import Booking
from venue_booking.models.enums import BookingStatus, PaymentStatus, UserRole
from venue_booking.models.user import User

router = APIRouter(prefix="/admin-analytics", tags=["Admin Analytics"])
logger = get_logger()

admin_only = require_role(UserRole.ADMIN)


# =====================================================================
# 1. BOOKINGS BY STATUS
# =====================================================================
@router.get("/bookings-by-status")
def bookings_by_status(admin: User = Depends(admin_only), db: Session = Depends(get_db)):
    rows = (
        db.query(Booking.status, func.count(Booking.id))
        .group_by(Booking.status)
        .all()
    )
    counts = {s.value: 0 for s in BookingStatus}
    for booking_status, count in rows:
        counts[booking_status.value] = count

    return {"bookings_by_status": counts}


# =====================================================================
# 2. TOTAL REVENUE (ALL TIME)
# =====================================================================
@router.get("/revenue/total")
def total_revenue(admin: User = Depends(admin_only), db: Session = Depends(get_db)):
    collected = (
        case((Booking.deposit_paid == True, Booking.deposit_amount), else_=0)  # noqa: E712
        + case((Booking.balance_paid == True, Booking.balance_amount), else_=0)  # noqa: E712
    )

    total = db.query(func.sum(collected)).filter(
        Booking.payment_status != PaymentStatus.REFUNDED
    ).scalar()

    total = int(total or 0)

    logger.bind(log_type="admin").info(f"Admin checked total revenue → {total}")

    return {"total_revenue": total}
