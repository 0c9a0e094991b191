"""Create products and product-images tables

Revision ID: 001
Revises: None
Create Date: 2024-01-15 00:00:00.000000+00:00

What:  Creates `products` and its dependent `product-images` table.
How:   PostgreSQL-specific: UUID primary key with gen_random_uuid(), text
       arrays for sizes/tags, ON DELETE CASCADE from images to products.

Rollback: downgrade() drops both tables (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "products",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("price", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("slug", sa.Text(), nullable=False),
        sa.Column("stock", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column(
            "sizes",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'"),
        ),
        sa.Column("gender", sa.Text(), nullable=True),
        sa.Column(
            "tags",
            postgresql.ARRAY(sa.Text()),
            nullable=False,
            server_default=sa.text("'{}'"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("title", name="uq_products_title"),
        sa.UniqueConstraint("slug", name="uq_products_slug"),
    )

    op.create_table(
        "product-images",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("product_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(
            ["product_id"],
            ["products.id"],
            name="fk_product_images_product_id",
            ondelete="CASCADE",
        ),
    )

    # Image replacement deletes by product_id on every update with images
    op.create_index(
        "ix_product_images_product_id",
        "product-images",
        ["product_id"],
    )


def downgrade() -> None:
    """
    Drop both tables.

    WARNING: destructive, all catalog data will be permanently lost.
    """
    op.drop_index("ix_product_images_product_id", table_name="product-images")
    op.drop_table("product-images")
    op.drop_table("products")
