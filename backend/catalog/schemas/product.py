"""
Catalog Backend — Product Request/Response Schemas
====================================================

What:  Pydantic models defining the product API contract.
How:   FastAPI validates request bodies against these models (422 on
       failure), serializes responses, and generates the OpenAPI docs.

Schemas are separate from the SQLAlchemy models: responses expose images as
plain URL strings and never the image rows' internal ids.
"""

import uuid
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

Gender = Literal["men", "women", "kid", "unisex"]

# PATCH fields that may be omitted but not cleared with an explicit null
NON_NULLABLE_UPDATE_FIELDS = ("title", "price", "slug", "stock", "sizes", "tags", "images")


def normalize_slug(value: str) -> str:
    """
    Lower-cases, turns spaces into underscores and drops apostrophes.

    >>> normalize_slug("Men's Chill Crew Neck")
    'mens_chill_crew_neck'
    """
    return value.lower().replace(" ", "_").replace("'", "")


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ProductCreate(BaseModel):
    """
    Body of POST /products.

    Only `title` is required. A missing slug is derived from the title by
    the service; a supplied one is normalised here.
    """
    title: str = Field(min_length=1, description="Product title (unique)")
    price: Optional[float] = Field(default=None, gt=0, description="Unit price")
    description: Optional[str] = Field(default=None)
    slug: Optional[str] = Field(default=None, min_length=1, description="URL key (unique)")
    stock: Optional[int] = Field(default=None, gt=0)
    sizes: List[str] = Field(default_factory=list)
    gender: Optional[Gender] = Field(default=None)
    tags: List[str] = Field(default_factory=list)
    images: List[str] = Field(
        default_factory=list,
        description="Image URLs, stored in the given order",
    )

    @field_validator("slug")
    @classmethod
    def _normalize_slug(cls, v: Optional[str]) -> Optional[str]:
        return normalize_slug(v) if v is not None else v


class ProductUpdate(BaseModel):
    """
    Body of PATCH /products/{id}. Every field is optional.

    Omitted fields keep their stored value. `images`, when present (even as
    an empty list), replaces the product's whole image set.
    """
    title: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, gt=0)
    description: Optional[str] = Field(default=None)
    slug: Optional[str] = Field(default=None, min_length=1)
    stock: Optional[int] = Field(default=None, gt=0)
    sizes: Optional[List[str]] = Field(default=None)
    gender: Optional[Gender] = Field(default=None)
    tags: Optional[List[str]] = Field(default=None)
    images: Optional[List[str]] = Field(default=None)

    @field_validator("slug")
    @classmethod
    def _normalize_slug(cls, v: Optional[str]) -> Optional[str]:
        return normalize_slug(v) if v is not None else v

    @model_validator(mode="after")
    def _reject_explicit_nulls(self) -> "ProductUpdate":
        for name in NON_NULLABLE_UPDATE_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"'{name}' cannot be null")
        return self


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ProductResponse(BaseModel):
    """
    Plain representation of a product: images are URL strings.

    Returned by every product endpoint that yields a product.
    """
    id: uuid.UUID
    title: str
    price: float
    description: Optional[str] = None
    slug: str
    stock: int
    sizes: List[str]
    gender: Optional[str] = None
    tags: List[str]
    images: List[str] = Field(description="Image URLs in insertion order")


class DeleteAllResponse(BaseModel):
    """Returned by DELETE /admin/products."""
    deleted: int = Field(description="Number of products removed")
