"""Rejection body schema."""

from datetime import datetime

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Stable body returned by every rejection path."""

    message: str
    code: str
    timestamp: datetime
