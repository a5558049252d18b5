from datetime import date, datetime, timedelta
from types import SimpleNamespace

import pytest

from venue_booking.core.exceptions import ValidationError
from venue_booking.utils.pricing import amount_due, date_span, payment_due_at, split_amount


@pytest.mark.parametrize(
    "total, pct, deposit, balance",
    [
        (800000, 25, 200000, 600000),
        (500000, 100, 500000, 0),
        (1001, 50, 501, 500),   # half rounds up
        (999, 33, 330, 669),    # 329.67
        (0, 10, 0, 0),
    ],
)
def test_split_amount(total, pct, deposit, balance):
    assert split_amount(total, pct) == (deposit, balance)


@pytest.mark.parametrize("pct", [0, 101, -5, None])
def test_split_amount_rejects_bad_percentage(pct):
    with pytest.raises(ValidationError) as exc:
        split_amount(1000, pct)
    assert "deposit_percentage" in exc.value.fields


def test_split_amount_rejects_negative_total():
    with pytest.raises(ValidationError):
        split_amount(-1, 50)


def test_amount_due_follows_payments():
    booking = SimpleNamespace(deposit_amount=200, balance_amount=600, deposit_paid=False, balance_paid=False)
    assert amount_due(booking) == 200

    booking.deposit_paid = True
    assert amount_due(booking) == 600

    booking.balance_paid = True
    assert amount_due(booking) == 0


def test_payment_due_at_full_deposit_uses_window():
    accepted = datetime(2030, 1, 1, 12, 0)
    booking = SimpleNamespace(accepted_at=accepted, balance_amount=0, start_date=date(2030, 3, 1))
    hall = SimpleNamespace(balance_due_days=7)

    assert payment_due_at(booking, hall, 24) == accepted + timedelta(hours=24)


def test_payment_due_at_partial_deposit_uses_balance_due_date():
    booking = SimpleNamespace(
        accepted_at=datetime(2030, 1, 1, 12, 0), balance_amount=600, start_date=date(2030, 3, 1)
    )
    hall = SimpleNamespace(balance_due_days=7)

    assert payment_due_at(booking, hall, 24) == datetime(2030, 2, 22, 0, 0)


def test_payment_due_at_never_sooner_than_window():
    accepted = datetime(2030, 2, 28, 9, 0)
    booking = SimpleNamespace(accepted_at=accepted, balance_amount=600, start_date=date(2030, 3, 1))
    hall = SimpleNamespace(balance_due_days=7)

    assert payment_due_at(booking, hall, 24) == accepted + timedelta(hours=24)


def test_date_span():
    assert date_span(date(2030, 1, 30), None) == [date(2030, 1, 30)]
    assert date_span(date(2030, 1, 30), date(2030, 2, 1)) == [
        date(2030, 1, 30), date(2030, 1, 31), date(2030, 2, 1)
    ]
