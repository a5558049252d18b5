from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from venue_booking.db.session import get_db
from venue_booking.core.auth_utils import decode_token
from venue_booking.core.exceptions import Unauthenticated, Unauthorized
from venue_booking.models.enums import UserRole
from venue_booking.models.user import User

security = HTTPBearer()


def get_current_principal(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    payload = decode_token(credentials.credentials)

    user = db.query(User).filter(User.email == payload["sub"]).first()
    if not user:
        raise Unauthenticated("User not found")

    if user.role.value != payload["role"]:
        raise Unauthenticated("Token role does not match account")

    if user.suspended:
        raise Unauthenticated("Account suspended")

    return user


def require_role(*roles: UserRole):
    """Dependency factory restricting an endpoint to the given roles."""

    def checker(user: User = Depends(get_current_principal)) -> User:
        if user.role not in roles:
            raise Unauthorized("You are not allowed to perform this action")
        return user

    return checker
