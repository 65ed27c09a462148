"""Image storage on the local filesystem."""

import logging
import uuid
from pathlib import Path

from fastapi import UploadFile

from chatop.config import Settings
from chatop.errors import BadRequestError

logger = logging.getLogger(__name__)

# Stored files take their extension from the accepted content type, never from
# the client filename, so /images only ever serves these types.
ALLOWED_IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}

CHUNK_SIZE = 64 * 1024


class ImageStorage:
    """Stores image bytes and hands back the public URL they are served from."""

    def __init__(self, upload_dir: str | Path, base_url: str, max_bytes: int):
        self.upload_dir = Path(upload_dir)
        self.base_url = base_url.rstrip("/")
        self.max_bytes = max_bytes

    @classmethod
    def from_settings(cls, settings: Settings) -> "ImageStorage":
        return cls(settings.upload_dir, settings.images_base_url, settings.max_upload_bytes)

    @staticmethod
    def extension_for(content_type: str | None) -> str | None:
        """Stored extension for an allowed content type, ``None`` otherwise."""
        media_type = (content_type or "").split(";", 1)[0].strip().lower()
        return ALLOWED_IMAGE_TYPES.get(media_type)

    async def _read_limited(self, file: UploadFile) -> bytes:
        data = bytearray()
        while chunk := await file.read(CHUNK_SIZE):
            data.extend(chunk)
            if len(data) > self.max_bytes:
                raise BadRequestError(
                    f"Image exceeds the {self.max_bytes} byte limit", code="UPLOAD_400"
                )
        return bytes(data)

    async def save(self, file: UploadFile) -> str:
        """Validate and store an uploaded image, returning its URL."""
        extension = self.extension_for(file.content_type)
        if extension is None:
            raise BadRequestError(
                f"Only image files are allowed ({', '.join(ALLOWED_IMAGE_TYPES)})",
                code="UPLOAD_400",
            )

        data = await self._read_limited(file)
        if not data:
            raise BadRequestError("Image file is empty", code="UPLOAD_400")

        filename = f"{uuid.uuid4()}{extension}"
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        (self.upload_dir / filename).write_bytes(data)

        logger.info("Stored image %s (%d bytes)", filename, len(data))
        return f"{self.base_url}/{filename}"

    def delete(self, url: str) -> None:
        """Remove a file previously returned by ``save``; unknown URLs are ignored."""
        prefix = f"{self.base_url}/"
        if not url.startswith(prefix):
            return
        filename = url[len(prefix) :]
        if not filename or "/" in filename:
            return
        (self.upload_dir / filename).unlink(missing_ok=True)
        logger.info("Removed image %s", filename)
