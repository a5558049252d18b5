from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from venue_booking.models.enums import NotificationType


class NotificationOut(BaseModel):
    id: int
    booking_id: Optional[int]
    type: NotificationType
    title: str
    body: str
    link_url: Optional[str]
    read: bool
    created_at: datetime

    model_config = {"from_attributes": True}
