"""Image upload endpoint."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from chatop.api.dependencies import authenticate_request, get_image_storage
from chatop.schemas.upload import ImageUploadResponse
from chatop.services.authorization import enforce, require_authenticated
from chatop.services.identity import Identity
from chatop.services.storage import ImageStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/upload", tags=["uploads"])


@router.post("/image", response_model=ImageUploadResponse)
async def upload_image(
    image: Annotated[UploadFile, File(description="Image (JPEG, PNG, GIF...)")],
    identity: Annotated[Identity, Depends(authenticate_request)],
    storage: Annotated[ImageStorage, Depends(get_image_storage)],
):
    """Store an image and return the URL it is served from."""
    enforce(require_authenticated(identity), identity, "upload", "image")
    url = await storage.save(image)
    logger.info("Image uploaded by %s: %s", identity.email, url)
    return ImageUploadResponse(url=url)
