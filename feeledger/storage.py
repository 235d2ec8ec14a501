"""Student profile images on Cloudinary."""
import io
import logging
from dataclasses import dataclass

import cloudinary
import cloudinary.uploader

from feeledger.config import settings
from feeledger.errors import ValidationError, PersistenceError

logger = logging.getLogger(__name__)

if settings.CLOUDINARY_CLOUD_NAME:
    cloudinary.config(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
        secure=True,
    )


@dataclass
class ImageUpload:
    data: bytes
    content_type: str
    filename: str = ""


@dataclass
class StoredImage:
    url: str
    public_id: str


def validate_image(image, max_bytes=None):
    """Images only, at most MAX_IMAGE_BYTES; checked before any upload."""
    max_bytes = max_bytes or settings.MAX_IMAGE_BYTES
    if not (image.content_type or "").startswith("image/"):
        raise ValidationError("Profile image must be an image file")
    if len(image.data) > max_bytes:
        raise ValidationError(f"Profile image must be at most {max_bytes // (1024 * 1024)} MB")
    if not image.data:
        raise ValidationError("Profile image is empty")
    return image


class CloudinaryImageStore:
    def __init__(self, folder=None):
        self.folder = folder or settings.CLOUDINARY_FOLDER

    def store(self, image) -> StoredImage:
        try:
            result = cloudinary.uploader.upload(
                io.BytesIO(image.data),
                folder=self.folder,
                resource_type="image",
            )
        except Exception as e:
            logger.error("Cloudinary upload error: %s", e)
            raise PersistenceError() from e
        return StoredImage(url=result.get("secure_url"), public_id=result.get("public_id"))

    def delete(self, public_id):
        try:
            cloudinary.uploader.destroy(public_id, resource_type="image")
        except Exception as e:
            logger.error("Cloudinary delete error for %s: %s", public_id, e)
            raise PersistenceError() from e


def get_image_store():
    return CloudinaryImageStore()
