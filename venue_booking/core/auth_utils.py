from venue_booking.core.exceptions import Unauthenticated
from venue_booking.core.jwt import decode_access_token


def decode_token(token: str):
    payload = decode_access_token(token)

    if payload is None:
        raise Unauthenticated("Invalid or expired token")

    if "sub" not in payload or "role" not in payload:
        raise Unauthenticated("Invalid token payload")

    return payload
