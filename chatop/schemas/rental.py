"""Rental schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class RentalResponse(BaseModel):
    """Rental response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    surface: float | None
    price: float
    picture: str | None
    description: str | None
    owner_id: int
    created_at: datetime
    updated_at: datetime
