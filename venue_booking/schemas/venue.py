from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel


class VenueBase(BaseModel):
    title: str
    description: str = ""
    address: Optional[str] = None
    city: str
    state: str
    type: str = "Wedding"


class VenueCreate(VenueBase):
    # required when an admin creates a venue for a venue holder
    owner_user_id: Optional[int] = None


class VenueOut(VenueBase):
    id: int
    owner_user_id: Optional[int]
    created_by_admin: bool
    status: str
    verified: bool
    featured: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class VenueAdminUpdate(BaseModel):
    verified: Optional[bool] = None
    featured: Optional[bool] = None
    status: Optional[Literal["active", "suspended"]] = None


class FavoriteOut(BaseModel):
    id: int
    venue_id: int
    created_at: datetime
    venue: VenueOut

    model_config = {"from_attributes": True}


class FavoriteToggleOut(BaseModel):
    venue_id: int
    favorited: bool
