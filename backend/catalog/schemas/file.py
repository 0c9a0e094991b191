"""
Catalog Backend — Upload Schemas
==================================

What:  Metadata echoed back after a successful product image upload.
"""

from pydantic import BaseModel, Field


class UploadedFileResponse(BaseModel):
    """
    Returned by POST /files/product with HTTP 201.

    `url` is what a client stores in a product's `images` list
    (via PATCH /products/{id}); the upload itself never touches products.
    """
    original_name: str = Field(description="File name as sent by the client")
    filename: str = Field(description="Generated name the file is stored under")
    mime_type: str = Field(description="Declared content type")
    size: int = Field(description="Size in bytes")
    location: str = Field(description="Path relative to the storage root")
    url: str = Field(description="Path the stored image is served from")
