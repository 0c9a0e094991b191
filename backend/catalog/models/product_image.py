"""
Catalog Backend — ProductImage SQLAlchemy Model
=================================================

What:  ORM model for the `product-images` table.
How:   Autoincrement integer id, one URL, foreign key to products.id with
       ON DELETE CASCADE.

Images are owned by their product: they are written and removed in bulk
(delete all for a product id, insert the new list), never updated one by one.
"""

import uuid

from sqlalchemy import ForeignKey, Index, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog.database import Base


class ProductImage(Base):
    __tablename__ = "product-images"
    __table_args__ = (
        # Named to match alembic revision 001
        Index("ix_product_images_product_id", "product_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    url: Mapped[str] = mapped_column(Text, nullable=False)

    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
    )

    product: Mapped["Product"] = relationship(back_populates="images")  # noqa: F821

    def __repr__(self) -> str:
        return f"<ProductImage(id={self.id}, url='{self.url}')>"
