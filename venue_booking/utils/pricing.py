from datetime import date, datetime, time, timedelta

from venue_booking.core.exceptions import ValidationError


def split_amount(total_amount: int, deposit_percentage: int):
    """
    Split a booking total into (deposit, balance).

    Integer currency units only; the deposit is rounded half up so that
    deposit + balance always equals the total.
    """
    if deposit_percentage is None or not 1 <= deposit_percentage <= 100:
        raise ValidationError(
            "Deposit percentage must be between 1 and 100",
            fields={"deposit_percentage": "must be between 1 and 100"},
        )
    if total_amount < 0:
        raise ValidationError(
            "Total amount cannot be negative",
            fields={"total_amount": "must be >= 0"},
        )

    deposit = (total_amount * deposit_percentage + 50) // 100
    return deposit, total_amount - deposit


def booking_total(hall) -> int:
    # Flat price per booking, independent of how many days are requested
    return hall.price


def amount_due(booking) -> int:
    """Amount the planner owes next: the deposit, then the balance."""
    if not booking.deposit_paid:
        return booking.deposit_amount
    if not booking.balance_paid:
        return booking.balance_amount
    return 0


def payment_due_at(booking, hall, payment_window_hours: int) -> datetime:
    """
    Deadline for the first payment on an accepted booking.

    A full-deposit hall is due straight away, so only the payment window
    after acceptance applies. Otherwise payment is due balance_due_days
    before the event, but never sooner than the payment window.
    """
    window_end = booking.accepted_at + timedelta(hours=payment_window_hours)
    if booking.balance_amount == 0:
        return window_end

    balance_due = datetime.combine(
        booking.start_date - timedelta(days=hall.balance_due_days), time.min
    )
    return max(balance_due, window_end)


def date_span(start: date, end: date | None):
    """Every calendar date from start to end inclusive."""
    last = end or start
    days = []
    d = start
    while d <= last:
        days.append(d)
        d += timedelta(days=1)
    return days
