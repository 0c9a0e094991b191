"""
Catalog Backend — Product SQLAlchemy Model
============================================

What:  ORM model representing the `products` table.
How:   Inherits from the shared DeclarativeBase; Alembic mirrors it in
       migration 001.
Who:   Used by ProductService and the lookup resolver.

Table Design:
    - UUID primary key: lookups branch on "is this term a UUID?", so ids are
      always canonical UUIDs
    - title / slug: both unique; slug is the URL-facing key
    - sizes / tags: PostgreSQL text arrays (JSON on SQLite)
    - images: one-to-many to ProductImage, ordered by image id so URLs come
      back in the order they were written
"""

import uuid
from typing import List, Optional

from sqlalchemy import JSON, Float, Integer, Text, Uuid
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog.database import Base

# Text array on PostgreSQL, JSON document on SQLite (test database)
StringList = ARRAY(Text).with_variant(JSON(), "sqlite")


class Product(Base):
    """
    A catalog product.

    Lifecycle:
        1. Created with its images in one transaction (ProductService.create)
        2. Scalar fields patched and/or images bulk-replaced (ProductService.update)
        3. Deleted together with all its images (ProductService.remove)

    Query Patterns:
        - By id: primary key
        - By text: UPPER(title) = :title OR slug = :slug (both unique-indexed)
        - Listing: ORDER BY title LIMIT/OFFSET
    """

    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    price: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    # Always stored normalised (see catalog.schemas.product.normalize_slug)
    slug: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    sizes: Mapped[List[str]] = mapped_column(StringList, nullable=False, default=list)

    gender: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    tags: Mapped[List[str]] = mapped_column(StringList, nullable=False, default=list)

    # ── Images ────────────────────────────────────────────────────────────
    # lazy="raise": every query must ask for images explicitly
    # (selectinload / joinedload). Deletion is handled by the FK's
    # ON DELETE CASCADE, hence passive_deletes.
    images: Mapped[List["ProductImage"]] = relationship(  # noqa: F821
        back_populates="product",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ProductImage.id",
        lazy="raise",
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, slug='{self.slug}')>"
