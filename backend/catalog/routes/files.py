"""
Catalog Backend — Product Image Upload Routes
===============================================

What:  POST /files/product (upload) and GET /files/product/{path} (serve).
How:   Reads the multipart `file` field, hands bytes and declared content
       type to FileService, returns the stored file's metadata.

Uploading does not attach the image to any product. The client takes the
returned `url` and sends it in a PATCH /products/{id} `images` list.
"""

import logging

from fastapi import APIRouter, File, UploadFile, status
from fastapi.responses import FileResponse

from catalog.schemas.common import ErrorResponse
from catalog.schemas.file import UploadedFileResponse
from catalog.services.file_service import file_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files", tags=["Files"])


@router.post(
    "/product",
    status_code=status.HTTP_201_CREATED,
    response_model=UploadedFileResponse,
    responses={
        400: {"description": "Content type is not image/jpeg", "model": ErrorResponse},
        500: {"description": "File could not be stored", "model": ErrorResponse},
    },
    summary="Upload a product image",
)
async def upload_product_image(
    file: UploadFile = File(..., description="JPEG image"),
) -> UploadedFileResponse:
    try:
        content = await file.read()
        logger.info(
            "Received upload: filename=%s, content_type=%s, size=%d bytes",
            file.filename or "unknown",
            file.content_type,
            len(content),
        )
        return await file_service.validate_and_store(
            filename=file.filename,
            content=content,
            content_type=file.content_type,
        )
    finally:
        await file.close()


@router.get(
    "/product/{file_path:path}",
    responses={
        200: {"description": "Image file"},
        400: {"description": "Path escapes the storage root", "model": ErrorResponse},
        404: {"description": "File not found", "model": ErrorResponse},
    },
    summary="Serve an uploaded product image",
)
async def get_product_image(file_path: str) -> FileResponse:
    full_path = file_service.resolve_stored_path(file_path)
    return FileResponse(
        path=str(full_path),
        media_type="image/jpeg",
        headers={"Cache-Control": "public, max-age=86400"},
    )
