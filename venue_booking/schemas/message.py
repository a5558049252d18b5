from datetime import datetime

from pydantic import BaseModel, Field


class MessageCreate(BaseModel):
    body: str = Field(min_length=1)


class MessageOut(BaseModel):
    id: int
    booking_id: int
    from_user_id: int
    to_user_id: int
    body: str
    created_at: datetime

    model_config = {"from_attributes": True}
