from datetime import datetime


def utcnow() -> datetime:
    """Naive UTC now; the one clock used for date checks, acceptance stamps and expiry."""
    return datetime.utcnow()
