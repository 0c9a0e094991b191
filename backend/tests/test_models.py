"""
Catalog Backend — ORM Model Tests
===================================

What:  Checks that the ORM metadata matches the schema created by the
       Alembic migrations, so autogenerate reports no drift.

What we test:
    ✅ product-images index on product_id carries the migration's name
    ✅ The index exists in a database built from the metadata
"""

import pytest
from sqlalchemy import inspect

from catalog.models import ProductImage


class TestProductImageTable:

    def test_product_id_index_name(self):
        indexes = {index.name: [col.name for col in index.columns]
                   for index in ProductImage.__table__.indexes}

        assert indexes == {"ix_product_images_product_id": ["product_id"]}

    @pytest.mark.asyncio
    async def test_index_created_in_database(self, sqlite_engine):
        async with sqlite_engine.connect() as conn:
            indexes = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).get_indexes("product-images")
            )

        assert [index["name"] for index in indexes] == ["ix_product_images_product_id"]
