"""Upload schemas."""

from pydantic import BaseModel


class ImageUploadResponse(BaseModel):
    """Reference to a stored image."""

    url: str
