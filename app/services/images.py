import io
import logging
from urllib.parse import urlsplit

from PIL import Image, UnidentifiedImageError

from app.core import config
from app.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

ABSOLUTE_URL_SCHEMES = ("http://", "https://")


def is_absolute_url(value: str) -> bool:
    """True for http(s) URLs that name a host"""
    if not value.lower().startswith(ABSOLUTE_URL_SCHEMES):
        return False
    return bool(urlsplit(value).netloc)


def resolve_image_url(image_url, base_url=None) -> str:
    """
    Turn a stored image reference into an absolute URL for clients.

    Externally hosted images are returned unchanged and an empty value
    stays empty.
    """
    if not image_url:
        return ""
    if image_url.lower().startswith(ABSOLUTE_URL_SCHEMES):
        return image_url

    base = (base_url if base_url is not None else config.BASE_URL).rstrip("/")
    if not image_url.startswith("/"):
        image_url = f"/{image_url}"
    return f"{base}{image_url}"


def validate_image_upload(content: bytes, content_type, max_bytes=None):
    """
    Reject uploads that are not usable images before anything is written.

    Raises:
        ValidationError: wrong content type, empty, too large or undecodable
    """
    if not content_type or not content_type.lower().startswith("image/"):
        raise ValidationError(
            f"Invalid file type '{content_type}'. Only image uploads are allowed"
        )

    if len(content) == 0:
        raise ValidationError("Empty file provided. Please select a valid image file")

    max_bytes = config.MAX_UPLOAD_BYTES if max_bytes is None else max_bytes
    if len(content) > max_bytes:
        raise ValidationError(
            f"File exceeds the maximum limit of {max_bytes / (1024 * 1024):.2f} MB"
        )

    try:
        with Image.open(io.BytesIO(content)) as image:
            image.verify()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, SyntaxError, ValueError) as e:
        logger.warning(f"Rejected undecodable image upload: {str(e)}")
        raise ValidationError("Uploaded file is not a valid image") from e
