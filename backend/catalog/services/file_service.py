"""
Catalog Backend — Product Image Storage Service
=================================================

What:  Validates uploaded product images and stores them on disk.
How:   Checks the declared content type against an allow-list, stores the
       bytes in a date-organized directory under a generated name, and
       returns metadata the client can later attach to a product.
Who:   Called by the /files routes.

Validation Rules:
    - Declared content type must be exactly image/jpeg.
    - No size cap is enforced. Whether one is wanted is an open product
      decision (see DESIGN.md).
    - The client's file name is never used on disk (UUID names only), so
      uploads cannot overwrite each other or escape the storage root.
"""

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

import aiofiles

from catalog.config import settings
from catalog.exceptions import FileStorageError, NotFoundError, ValidationError
from catalog.schemas.file import UploadedFileResponse

logger = logging.getLogger(__name__)

# ── Allowed File Types ────────────────────────────────────────────────────
# Declared MIME type → extension used for the stored file
ALLOWED_MIME_TYPES = {
    "image/jpeg": ".jpg",
}

# Prefix under which stored images are served (see routes/files.py)
PUBLIC_URL_PREFIX = "/files/product"


class FileService:
    """
    Manages upload validation, storage and lookup of product images.

    Directory Structure:
        storage/
        └── 2024/
            └── 01/
                └── 15/
                    ├── a1b2c3d4-....jpg
                    └── e5f6g7h8-....jpg
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
                         If None, uses settings.storage_root.
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with storage_root=%s", self.storage_root)

    def validate_content_type(self, content_type: Optional[str]) -> str:
        """
        Check the declared MIME type of an upload.

        Returns: Extension to store the file under.
        Raises:  ValidationError unless the type is in ALLOWED_MIME_TYPES.
        """
        extension = ALLOWED_MIME_TYPES.get(content_type or "")
        if extension is None:
            expected = ", ".join(sorted(ALLOWED_MIME_TYPES))
            raise ValidationError(
                message=f"Validation failed (expected type is {expected})",
                field="file",
                context={"content_type": content_type, "allowed": sorted(ALLOWED_MIME_TYPES)},
            )
        return extension

    def _generate_storage_path(self, extension: str) -> Tuple[Path, str]:
        """
        Creates a YYYY/MM/DD/<uuid><ext> path.

        Returns: Tuple of (absolute_path, relative_path_from_storage_root).
        """
        now = datetime.now(timezone.utc)
        date_dir = now.strftime("%Y/%m/%d")
        unique_name = f"{uuid.uuid4()}{extension}"

        relative_path = f"{date_dir}/{unique_name}"
        absolute_path = self.storage_root / relative_path

        return absolute_path, relative_path

    async def store_file(self, content: bytes, extension: str) -> Tuple[Path, str]:
        """
        Write validated file content to disk.

        Returns: Tuple of (absolute_path, relative_path).
        Raises:  FileStorageError if directory creation or file write fails.
        """
        absolute_path, relative_path = self._generate_storage_path(extension)

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)

            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)

            logger.info("File stored: %s (%d bytes)", relative_path, len(content))
            return absolute_path, relative_path

        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

    async def validate_and_store(
        self,
        filename: Optional[str],
        content: bytes,
        content_type: Optional[str],
    ) -> UploadedFileResponse:
        """
        Complete upload pipeline: content-type check, then write to disk.

        Args:
            filename: Client-supplied file name (echoed back, never used on disk)
            content: Raw file bytes
            content_type: MIME type declared in the multipart part

        Returns:
            UploadedFileResponse with the stored location and public URL.
        """
        extension = self.validate_content_type(content_type)
        absolute_path, relative_path = await self.store_file(content, extension)

        return UploadedFileResponse(
            original_name=filename or absolute_path.name,
            filename=absolute_path.name,
            mime_type=content_type,
            size=len(content),
            location=relative_path,
            url=f"{PUBLIC_URL_PREFIX}/{relative_path}",
        )

    def resolve_stored_path(self, relative_path: str) -> Path:
        """
        Map a relative path from a public URL back to a file on disk.

        Raises:
            ValidationError: Path resolves outside the storage root (../ tricks)
            NotFoundError:   No such stored file
        """
        full_path = (self.storage_root / relative_path).resolve()

        if not full_path.is_relative_to(self.storage_root):
            raise ValidationError(message="Invalid file path", field="path")

        if not full_path.is_file():
            raise NotFoundError(resource="image", resource_id=relative_path)

        return full_path


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()
