"""
Catalog Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session:        AsyncMock standing in for AsyncSession
    ├── mock_session_factory:   callable yielding mock_db_session via `async with`
    ├── sqlite_engine:          in-memory SQLite (aiosqlite) with the schema created
    ├── sqlite_session_factory: async_sessionmaker bound to sqlite_engine
    ├── product_service:        ProductService over the SQLite database
    ├── temp_storage:           temporary directory for file operations
    ├── sample_image_bytes:     minimal JPEG bytes
    └── test_client:            HTTPX AsyncClient wired to the app, with
                                product_service injected
"""

import os
import tempfile

# Override settings for testing BEFORE any catalog imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="catalog_test_")
os.environ["ADMIN_TOKEN"] = "test-admin-token-0123456789"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event, func, select  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from catalog.database import Base  # noqa: E402
from catalog.models import ProductImage  # noqa: E402
from catalog.services.product_service import ProductService, get_product_service  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Mocked Session (unit tests)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession.

    `begin()` returns a MagicMock, which supports `async with` and does not
    swallow exceptions (its __aexit__ returns False).

    Usage:
        mock_db_session.get.return_value = product
        await service.update(product.id, patch)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.get = AsyncMock()
    session.add = MagicMock()
    session.begin = MagicMock()
    return session


@pytest.fixture
def mock_session_factory(mock_db_session):
    """`async with mock_session_factory() as session` yields mock_db_session."""
    factory = MagicMock()
    factory.return_value.__aenter__.return_value = mock_db_session
    return factory


# ══════════════════════════════════════════════════════════════════════════
# SQLite Database (integration tests)
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def sqlite_engine():
    """
    Fresh in-memory database per test.

    StaticPool keeps the single in-memory connection alive across sessions.
    SQLite ignores foreign keys (and so ON DELETE CASCADE) unless the pragma
    is set on every connection.
    """
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def sqlite_session_factory(sqlite_engine):
    return async_sessionmaker(sqlite_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def product_service(sqlite_session_factory):
    return ProductService(sqlite_session_factory, transaction_timeout=5)


@pytest.fixture
def count_images(sqlite_session_factory):
    """
    Returns an async helper counting image rows, optionally for one product.

    Usage:
        assert await count_images(product.id) == 2
    """
    async def _count(product_id=None, url=None):
        stmt = select(func.count()).select_from(ProductImage)
        if product_id is not None:
            stmt = stmt.where(ProductImage.product_id == product_id)
        if url is not None:
            stmt = stmt.where(ProductImage.url == url)
        async with sqlite_session_factory() as session:
            return (await session.execute(stmt)).scalar_one()

    return _count


# ══════════════════════════════════════════════════════════════════════════
# Files
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return str(storage_dir)


@pytest.fixture
def sample_image_bytes():
    """Minimal JPEG: SOI marker + JFIF header + EOI marker."""
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(product_service):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    Product routes use the SQLite-backed product_service via
    dependency_overrides.
    """
    from catalog.main import app

    app.dependency_overrides[get_product_service] = lambda: product_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
