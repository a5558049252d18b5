from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field

from venue_booking.models.enums import UserRole


class UserBase(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    phone: Optional[str] = None

    model_config = {"from_attributes": True}


class UserCreate(UserBase):
    password: str = Field(min_length=6)
    # admin accounts are provisioned, never self-registered
    role: Literal["planner", "venue_holder"] = "planner"


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserOut(UserBase):
    id: int
    role: UserRole
    suspended: bool
    approved: bool
    created_at: datetime


class UserAdminUpdate(BaseModel):
    suspended: Optional[bool] = None
    approved: Optional[bool] = None


class TokenOut(BaseModel):
    access_token: str
    role: UserRole
    token_type: str = "bearer"
