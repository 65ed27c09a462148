"""Message schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MessageCreate(BaseModel):
    """Send a message about a rental."""

    model_config = ConfigDict(str_strip_whitespace=True)

    rental_id: int = Field(..., ge=1)
    user_id: int | None = Field(None, ge=1)  # must match the token's user when given
    message: str = Field(..., min_length=10, max_length=2000)


class MessageResponse(BaseModel):
    """Message response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    message: str
    rental_id: int
    rental_name: str
    user_id: int
    read: bool
    created_at: datetime
    updated_at: datetime


class MessageSentResponse(BaseModel):
    message: str = "Message sent with success!"


class UnreadCountResponse(BaseModel):
    count: int
