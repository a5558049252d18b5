"""
Run one booking expiry sweep.

Invoke periodically from cron or any scheduler, e.g. every 15 minutes:

    */15 * * * * cd /srv/venue-booking && python scripts/run_expiry_scan.py
"""
import venue_booking.db.base  # noqa: F401
from venue_booking.db.session import SessionLocal
from venue_booking.services.expiry import run_expiry_scan


def main():
    db = SessionLocal()
    try:
        result = run_expiry_scan(db)
    finally:
        db.close()

    print(
        f"Scanned {result.scanned} accepted bookings: "
        f"{len(result.warned)} warned, {len(result.expired)} expired"
    )


if __name__ == "__main__":
    main()
