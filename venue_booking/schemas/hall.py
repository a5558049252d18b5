import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, Field


class HallBase(BaseModel):
    name: str
    description: Optional[str] = None
    capacity: int = Field(ge=1)

    # Pricing terms
    price: int = Field(ge=0)
    deposit_percentage: int = Field(default=100, ge=1, le=100)
    balance_due_days: int = Field(default=7, ge=0)


class HallCreate(HallBase):
    pass


class HallUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    capacity: Optional[int] = Field(default=None, ge=1)
    price: Optional[int] = Field(default=None, ge=0)
    deposit_percentage: Optional[int] = Field(default=None, ge=1, le=100)
    balance_due_days: Optional[int] = Field(default=None, ge=0)


class HallOut(HallBase):
    id: int
    venue_id: int

    model_config = {"from_attributes": True}


class BlockedDateCreate(BaseModel):
    date: dt.date
    reason: Optional[str] = None


class BlockedDateOut(BaseModel):
    id: int
    hall_id: int
    date: dt.date
    reason: Optional[str]
    booking_id: Optional[int]
    created_at: dt.datetime

    model_config = {"from_attributes": True}


class HallCalendarOut(BaseModel):
    hall_id: int
    blocked_dates: List[str]
    booked_dates: List[str]
