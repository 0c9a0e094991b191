"""
Catalog Backend — File Service Unit Tests
===========================================

What:  Tests for FileService upload validation, storage and path resolution.
How:   Tests use temporary directories (no HTTP layer involved).

Test Strategy:
    ✅ Only image/jpeg is accepted (declared content type)
    ✅ Stored files get generated names under a dated directory
    ✅ Returned metadata points at the serve route
    ✅ Path traversal outside the storage root is rejected
    ✅ Unknown stored paths raise NotFoundError
"""

import re
from pathlib import Path
from unittest.mock import patch

import pytest

from catalog.exceptions import FileStorageError, NotFoundError, ValidationError
from catalog.services.file_service import PUBLIC_URL_PREFIX, FileService


class TestContentTypeValidation:
    """Tests for FileService.validate_content_type."""

    def setup_method(self):
        self.service = FileService()

    def test_jpeg_accepted(self):
        assert self.service.validate_content_type("image/jpeg") == ".jpg"

    @pytest.mark.parametrize(
        "content_type",
        ["image/png", "image/gif", "application/pdf", "text/plain", "image/JPEG "],
    )
    def test_other_types_rejected(self, content_type):
        with pytest.raises(ValidationError, match="expected type is image/jpeg"):
            self.service.validate_content_type(content_type)

    def test_missing_content_type_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_content_type(None)
        assert exc_info.value.field == "file"


class TestFileStorage:
    """Tests for writing uploads to disk."""

    @pytest.mark.asyncio
    async def test_validate_and_store_writes_file(self, temp_storage, sample_image_bytes):
        service = FileService(storage_root=temp_storage)

        result = await service.validate_and_store(
            filename="chair.jpg",
            content=sample_image_bytes,
            content_type="image/jpeg",
        )

        stored = Path(temp_storage) / result.location
        assert stored.is_file()
        assert stored.read_bytes() == sample_image_bytes
        assert result.original_name == "chair.jpg"
        assert result.mime_type == "image/jpeg"
        assert result.size == len(sample_image_bytes)
        assert result.url == f"{PUBLIC_URL_PREFIX}/{result.location}"

    @pytest.mark.asyncio
    async def test_client_filename_not_used_on_disk(self, temp_storage, sample_image_bytes):
        service = FileService(storage_root=temp_storage)

        result = await service.validate_and_store(
            filename="../../evil.jpg",
            content=sample_image_bytes,
            content_type="image/jpeg",
        )

        assert re.fullmatch(r"\d{4}/\d{2}/\d{2}/[0-9a-f-]{36}\.jpg", result.location)
        assert result.filename != "evil.jpg"

    @pytest.mark.asyncio
    async def test_rejected_upload_writes_nothing(self, temp_storage):
        service = FileService(storage_root=temp_storage)

        with pytest.raises(ValidationError):
            await service.validate_and_store(
                filename="logo.png",
                content=b"\x89PNG\r\n\x1a\n",
                content_type="image/png",
            )

        assert not any(Path(temp_storage).rglob("*.*"))

    @pytest.mark.asyncio
    async def test_write_failure_raises_file_storage_error(self, temp_storage):
        service = FileService(storage_root=temp_storage)

        with patch("catalog.services.file_service.aiofiles.open", side_effect=OSError("disk full")):
            with pytest.raises(FileStorageError):
                await service.store_file(b"data", ".jpg")


class TestResolveStoredPath:
    """Tests for mapping public URLs back to files."""

    @pytest.mark.asyncio
    async def test_resolves_stored_file(self, temp_storage, sample_image_bytes):
        service = FileService(storage_root=temp_storage)
        _, relative_path = await service.store_file(sample_image_bytes, ".jpg")

        resolved = service.resolve_stored_path(relative_path)

        assert resolved.read_bytes() == sample_image_bytes

    def test_traversal_rejected(self, temp_storage):
        service = FileService(storage_root=temp_storage)

        with pytest.raises(ValidationError, match="Invalid file path"):
            service.resolve_stored_path("../../etc/passwd")

    def test_missing_file_not_found(self, temp_storage):
        service = FileService(storage_root=temp_storage)

        with pytest.raises(NotFoundError):
            service.resolve_stored_path("2024/01/15/missing.jpg")
