from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from venue_booking.db.session import get_db
from venue_booking.schemas.user import UserCreate, UserLogin, UserOut, TokenOut
from venue_booking.models.enums import UserRole
from venue_booking.models.user import User
from venue_booking.core.security import hash_password, verify_password
from venue_booking.core.jwt import create_access_token
from venue_booking.core.dependencies import get_current_principal
from venue_booking.core.exceptions import Unauthenticated, Unauthorized, ValidationError
from venue_booking.core.logging_config import get_logger

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = get_logger()


# =====================================================================
#                           REGISTER
# =====================================================================
@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(data: UserCreate, db: Session = Depends(get_db)):
    if db.query(User).filter(User.email == data.email).first():
        raise ValidationError("Email already registered", fields={"email": "already registered"})

    role = UserRole(data.role)
    user = User(
        name=data.name,
        email=data.email,
        phone=data.phone,
        password_hash=hash_password(data.password),
        role=role,
        # venue holders list venues only once an admin approves them
        approved=role != UserRole.VENUE_HOLDER,
    )

    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info(f"User Registered | Email={user.email} | Role={user.role.value}")
    return user


# =====================================================================
#                           LOGIN
# =====================================================================
@router.post("/login", response_model=TokenOut)
def login(data: UserLogin, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == data.email).first()

    if not user or not verify_password(data.password, user.password_hash):
        raise Unauthenticated("Invalid credentials")

    if user.suspended:
        raise Unauthorized("Account suspended")

    token = create_access_token({"sub": user.email, "role": user.role.value})

    return {
        "access_token": token,
        "role": user.role,
        "token_type": "bearer"
    }


# =====================================================================
#                           CURRENT USER
# =====================================================================
@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_principal)):
    return user
