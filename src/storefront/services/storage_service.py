"""Image storage for product photos uploaded from the admin dashboard."""

import logging
import uuid
from pathlib import Path
from typing import Iterable, Protocol

from storefront.core.config import settings
from storefront.core.exceptions import UploadError, ValidationError

logger = logging.getLogger(__name__)


class ImageStorage(Protocol):
    """Blob storage that returns a hosted URL for each stored file."""

    max_bytes: int

    def save(self, filename: str, content: bytes) -> str: ...


class LocalImageStorage:
    """Stores uploads on local disk, served by the app's static mount."""

    def __init__(
        self,
        directory: str | Path = settings.UPLOAD_DIR,
        url_prefix: str = settings.UPLOAD_URL_PREFIX,
        allowed_extensions: Iterable[str] = settings.ALLOWED_IMAGE_EXTENSIONS,
        max_bytes: int = settings.MAX_UPLOAD_BYTES,
    ):
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")
        self.allowed_extensions = {ext.lower() for ext in allowed_extensions}
        self.max_bytes = max_bytes

    def save(self, filename: str, content: bytes) -> str:
        """Store one file under a unique name.

        Returns:
            Public URL of the stored file

        Raises:
            ValidationError: Disallowed extension, empty or oversized file
            UploadError: The file could not be written
        """
        extension = Path(filename or "").suffix.lower()
        if extension not in self.allowed_extensions:
            raise ValidationError(
                f"File type not allowed. Allowed types: {', '.join(sorted(self.allowed_extensions))}"
            )
        if not content:
            raise ValidationError("Uploaded file is empty")
        if len(content) > self.max_bytes:
            raise ValidationError(f"File exceeds {self.max_bytes} bytes")

        stored_name = f"{uuid.uuid4().hex}{extension}"
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            (self.directory / stored_name).write_bytes(content)
        except OSError as e:
            logger.error(f"Failed to store upload {filename}: {e}")
            raise UploadError("Failed to upload images") from e

        logger.info(f"Stored upload {filename} as {stored_name}")
        return f"{self.url_prefix}/{stored_name}"
