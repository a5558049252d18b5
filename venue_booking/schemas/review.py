from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    booking_id: int
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = None


class ReviewResponseIn(BaseModel):
    response: str = Field(min_length=1)


class ReviewOut(BaseModel):
    id: int
    venue_id: int
    booking_id: int
    planner_user_id: int
    rating: int
    comment: Optional[str]
    owner_response: Optional[str]
    owner_response_date: Optional[datetime]
    created_at: datetime

    model_config = {"from_attributes": True}


class VenueRatingOut(BaseModel):
    venue_id: int
    rating: float
    review_count: int
    reviews: list[ReviewOut]
