"""
Typed failures raised by the booking services.

Every failure carries a stable machine-readable ``kind`` and a human-readable
message. The API layer renders them as ``{"kind", "detail", "fields"}``.
"""
from typing import Dict, Optional


class BookingError(Exception):
    kind = "booking_error"
    status_code = 400

    def __init__(self, message: str, fields: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.fields = fields or {}

    def to_dict(self) -> dict:
        return {"kind": self.kind, "detail": self.message, "fields": self.fields}


class ValidationError(BookingError):
    kind = "validation_error"
    status_code = 422


class CapacityExceeded(BookingError):
    kind = "capacity_exceeded"
    status_code = 422


class DateUnavailable(BookingError):
    kind = "date_unavailable"
    status_code = 409


class InvalidTransition(BookingError):
    kind = "invalid_transition"
    status_code = 409

    def __init__(self, current: str, event: str, message: Optional[str] = None):
        super().__init__(message or f"Event '{event}' is not allowed while booking is '{current}'")
        self.current = current
        self.event = event


class Unauthenticated(BookingError):
    kind = "unauthenticated"
    status_code = 401


class Unauthorized(BookingError):
    kind = "unauthorized"
    status_code = 403


class NotFound(BookingError):
    kind = "not_found"
    status_code = 404
