"""Pydantic schemas for API requests and responses."""

from chatop.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from chatop.schemas.error import ErrorResponse
from chatop.schemas.message import (
    MessageCreate,
    MessageResponse,
    MessageSentResponse,
    UnreadCountResponse,
)
from chatop.schemas.rental import RentalResponse
from chatop.schemas.upload import ImageUploadResponse
from chatop.schemas.user import UserResponse

__all__ = [
    "RegisterRequest",
    "LoginRequest",
    "TokenResponse",
    "UserResponse",
    "ErrorResponse",
    "RentalResponse",
    "MessageCreate",
    "MessageResponse",
    "MessageSentResponse",
    "UnreadCountResponse",
    "ImageUploadResponse",
]
