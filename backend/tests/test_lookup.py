"""
Catalog Backend — Lookup Resolver Tests
=========================================

What:  Tests for search-term classification and resolution.

What we test:
    ✅ Canonical UUIDs (any case, nil, max) are ById
    ✅ Everything else, including UUID look-alikes, is ByText
    ✅ resolve() matches title case-insensitively and slug after lower-casing
    ✅ resolve() raises NotFoundError for unmatched ids and text
"""

import uuid

import pytest

from catalog.exceptions import NotFoundError
from catalog.schemas.product import ProductCreate
from catalog.services.lookup import ById, ByText, classify_term, is_uuid, resolve


class TestClassifyTerm:

    def test_random_uuid_is_by_id(self):
        value = uuid.uuid4()
        assert classify_term(str(value)) == ById(value)

    def test_uppercase_uuid_is_by_id(self):
        value = uuid.uuid4()
        assert classify_term(str(value).upper()) == ById(value)

    @pytest.mark.parametrize(
        "term",
        [
            "00000000-0000-0000-0000-000000000000",
            "ffffffff-ffff-ffff-ffff-ffffffffffff",
        ],
    )
    def test_nil_and_max_are_by_id(self, term):
        assert isinstance(classify_term(term), ById)

    @pytest.mark.parametrize(
        "term",
        [
            "chair",
            "Men's Chill Crew Neck",
            "8c2f8f525b5e4c8e9a513f1a3c7c2d10",          # no hyphens
            "{8c2f8f52-5b5e-4c8e-9a51-3f1a3c7c2d10}",    # braces
            "8c2f8f52-5b5e-0c8e-9a51-3f1a3c7c2d10",      # version 0
            "8c2f8f52-5b5e-4c8e-7a51-3f1a3c7c2d10",      # non-RFC variant
            "8c2f8f52-5b5e-4c8e-9a51-3f1a3c7c2d1",       # too short
            "",
        ],
    )
    def test_non_canonical_terms_are_by_text(self, term):
        assert classify_term(term) == ByText(term)
        assert not is_uuid(term)


class TestResolve:
    """resolve() against a real (SQLite) database."""

    @pytest.mark.asyncio
    async def test_resolve_by_id_loads_images(self, product_service, sqlite_session_factory):
        created = await product_service.create(
            ProductCreate(title="Chair", images=["a.jpg", "b.jpg"])
        )

        async with sqlite_session_factory() as session:
            product = await resolve(session, str(created.id))

        assert product.title == "Chair"
        assert [image.url for image in product.images] == ["a.jpg", "b.jpg"]

    @pytest.mark.asyncio
    async def test_resolve_title_case_insensitive(self, product_service, sqlite_session_factory):
        created = await product_service.create(ProductCreate(title="Desk Lamp"))

        async with sqlite_session_factory() as session:
            product = await resolve(session, "DESK LAMP")

        assert product.id == created.id

    @pytest.mark.asyncio
    async def test_resolve_slug_lowercased(self, product_service, sqlite_session_factory):
        created = await product_service.create(ProductCreate(title="Desk Lamp"))

        async with sqlite_session_factory() as session:
            product = await resolve(session, "Desk_Lamp")

        assert product.id == created.id
        assert product.images == []

    @pytest.mark.asyncio
    async def test_unknown_uuid_not_found(self, sqlite_session_factory):
        missing = str(uuid.uuid4())

        async with sqlite_session_factory() as session:
            with pytest.raises(NotFoundError, match=missing):
                await resolve(session, missing)

    @pytest.mark.asyncio
    async def test_unknown_text_not_found(self, sqlite_session_factory):
        async with sqlite_session_factory() as session:
            with pytest.raises(NotFoundError, match="no-such-product"):
                await resolve(session, "no-such-product")
