"""
Catalog Backend — Product Service (Repository Facade)
=======================================================

What:  CRUD over `products` and `product-images`, plus the transactional
       product + images update.
How:   Each public method opens its own session from the injected session
       factory (`async with`), so the connection returns to the pool on
       every exit path. Writes run inside `session.begin()`, which commits
       on success and rolls back on any exception, including cancellation.
Who:   Called by the /products and /admin route handlers.

Write ordering (create and update):
    ┌──────────────────┐    ┌────────────────────┐    ┌────────────────────┐
    │ INSERT / UPDATE  │───▶│ DELETE images for  │───▶│ INSERT new images  │
    │ products row     │    │ product_id (update │    │ (bulk, in order)   │
    │                  │    │ with images only)  │    │                    │
    └──────────────────┘    └────────────────────┘    └────────────────────┘
            all three inside one transaction; readers see old or new set

Error Translation (_handle_db_exception):
    CatalogError (e.g. NotFoundError)      → propagated unchanged
    IntegrityError, unique violation       → ConflictError(db detail)
    anything else                          → logged, then InternalError
"""

import asyncio
import logging
from typing import Any, Dict, List, NoReturn, Optional
from uuid import UUID

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from catalog.config import settings
from catalog.database import async_session_factory
from catalog.exceptions import CatalogError, ConflictError, InternalError, NotFoundError
from catalog.models import Product, ProductImage
from catalog.schemas.product import (
    ProductCreate,
    ProductResponse,
    ProductUpdate,
    normalize_slug,
)
from catalog.services.lookup import resolve

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"


def unique_violation_detail(exc: IntegrityError) -> Optional[str]:
    """
    Return the database's detail text if `exc` is a unique-constraint
    violation, else None.

    asyncpg: SQLAlchemy's adapted error carries `sqlstate`; the asyncpg
    exception it was raised from (`__cause__`) carries `detail`, e.g.
    "Key (slug)=(chair) already exists."
    sqlite3: no SQLSTATE, only "UNIQUE constraint failed: products.slug".
    """
    orig = exc.orig
    chain = [err for err in (orig, getattr(orig, "__cause__", None)) if err is not None]

    codes = {getattr(err, "sqlstate", None) or getattr(err, "pgcode", None) for err in chain}
    if UNIQUE_VIOLATION in codes:
        for err in chain:
            detail = getattr(err, "detail", None)
            if detail:
                return detail
        return str(orig)

    if str(orig).startswith("UNIQUE constraint failed"):
        return str(orig)

    return None


class ProductService:
    """
    Repository facade for products and their images.

    Responsibilities:
        - create():          product row + image rows in one transaction
        - find_all():        paginated listing with images as URLs
        - find_one():        lookup by id / slug / title (ORM entity)
        - find_one_plain():  same, projected to ProductResponse
        - update():          scalar patch + optional image replacement, atomic
        - remove():          product and its images
        - delete_all():      every product (administrative)
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        transaction_timeout: Optional[float] = None,
    ):
        """
        Args:
            session_factory: Source of sessions; one session per operation.
            transaction_timeout: Seconds allowed for the update transaction.
                                 Defaults to settings.db_transaction_timeout.
        """
        self._session_factory = session_factory
        self._transaction_timeout = transaction_timeout or settings.db_transaction_timeout

    # ── Create ────────────────────────────────────────────────────────────

    async def create(self, payload: ProductCreate) -> ProductResponse:
        """
        Insert a product and its images.

        A missing slug is derived from the title. Omitted optional fields
        take the column defaults (price 0, stock 0, no sizes/tags).

        Raises:
            ConflictError: title or slug already used
            InternalError: any other database failure
        """
        fields = payload.model_dump(exclude={"images"}, exclude_none=True)
        fields.setdefault("slug", normalize_slug(payload.title))
        image_urls = list(payload.images)

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    product = Product(**fields)
                    session.add(product)
                    await session.flush()  # INSERT products; assigns id and defaults
                    await self._insert_images(session, product.id, image_urls)
        except Exception as e:
            self._handle_db_exception(e, operation="create")

        logger.info("Product created: %s (%d images)", product.id, len(image_urls))
        return self._to_plain(product, image_urls)

    # ── Read ──────────────────────────────────────────────────────────────

    async def find_all(self, limit: int = 10, offset: int = 0) -> List[ProductResponse]:
        """
        One page of products, ordered by title, images projected to URLs.

        Query plan:
            SELECT ... FROM products ORDER BY title LIMIT :limit OFFSET :offset
            SELECT ... FROM "product-images" WHERE product_id IN (...)
        """
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(Product)
                    .options(selectinload(Product.images))
                    .order_by(Product.title)
                    .limit(limit)
                    .offset(offset)
                )
                products = result.scalars().all()
        except Exception as e:
            self._handle_db_exception(e, operation="find_all")

        return [self._to_plain(product) for product in products]

    async def find_one(self, term: str) -> Product:
        """
        Resolve `term` (UUID, slug or title) to a Product with its images.

        Raises:
            NotFoundError: no product matches
        """
        try:
            async with self._session_factory() as session:
                return await resolve(session, term)
        except Exception as e:
            self._handle_db_exception(e, operation="find_one")

    async def find_one_plain(self, term: str) -> ProductResponse:
        """find_one() with images flattened to their URLs."""
        return self._to_plain(await self.find_one(term))

    # ── Update ────────────────────────────────────────────────────────────

    async def update(self, product_id: UUID, patch: ProductUpdate) -> ProductResponse:
        """
        Apply a partial update, replacing the image set if `images` is given.

        Steps:
            1. Lock the product row (SELECT ... FOR UPDATE) and merge the
               patched scalar fields (NotFoundError if it doesn't exist)
            2. Flush the products UPDATE
            3. If `images` was sent (even []): delete every image row for
               the product, then insert one row per URL
            4. Commit; any failure in 1-3 rolls the whole thing back
            5. Re-read and return the plain product

        Steps 1-4 are bounded by the transaction timeout; on expiry the
        work is cancelled, rolled back and reported as InternalError.

        Raises:
            NotFoundError: unknown product id
            ConflictError: new title/slug collides with another product
            InternalError: any other failure (logged)
        """
        changes = patch.model_dump(exclude_unset=True)
        image_urls = changes.pop("images", None)

        try:
            await asyncio.wait_for(
                self._apply_update(product_id, changes, image_urls),
                timeout=self._transaction_timeout,
            )
        except Exception as e:
            self._handle_db_exception(e, operation="update")

        logger.info(
            "Product updated: %s (fields=%s, images=%s)",
            product_id,
            sorted(changes),
            "replaced" if image_urls is not None else "unchanged",
        )
        return await self.find_one_plain(str(product_id))

    async def _apply_update(
        self,
        product_id: UUID,
        changes: Dict[str, Any],
        image_urls: Optional[List[str]],
    ) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                # Concurrent updates of one product queue here, including
                # images-only patches that never UPDATE products
                product = await session.get(Product, product_id, with_for_update=True)
                if product is None:
                    raise NotFoundError(resource="product", resource_id=str(product_id))

                for field, value in changes.items():
                    setattr(product, field, value)
                await session.flush()  # UPDATE products

                if image_urls is not None:
                    await session.execute(
                        delete(ProductImage).where(ProductImage.product_id == product_id)
                    )
                    await self._insert_images(session, product_id, image_urls)

    # ── Delete ────────────────────────────────────────────────────────────

    async def remove(self, product_id: UUID) -> None:
        """
        Delete a product and all of its images.

        The product is resolved through the lookup resolver first, so an
        unknown id is a NotFoundError rather than a silent no-op.
        """
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    product = await resolve(session, str(product_id))
                    await session.execute(
                        delete(ProductImage).where(ProductImage.product_id == product.id)
                    )
                    await session.execute(delete(Product).where(Product.id == product.id))
        except Exception as e:
            self._handle_db_exception(e, operation="remove")

        logger.info("Product removed: %s", product_id)

    async def delete_all(self) -> int:
        """
        Delete every product and image row. Returns the number of products.

        Administrative only: reachable through DELETE /admin/products.
        """
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await session.execute(delete(ProductImage))
                    result = await session.execute(delete(Product))
                    deleted = result.rowcount
        except Exception as e:
            self._handle_db_exception(e, operation="delete_all")

        logger.warning("All products deleted (%d rows)", deleted)
        return deleted

    # ── Helpers ───────────────────────────────────────────────────────────

    @staticmethod
    async def _insert_images(
        session: AsyncSession, product_id: UUID, image_urls: List[str]
    ) -> None:
        """Bulk INSERT one image row per URL, preserving list order."""
        if not image_urls:
            return
        await session.execute(
            insert(ProductImage),
            [{"product_id": product_id, "url": url} for url in image_urls],
        )

    @staticmethod
    def _to_plain(product: Product, image_urls: Optional[List[str]] = None) -> ProductResponse:
        """
        Project an ORM product to its plain representation.

        `image_urls` is used when the images were just written and the
        relationship was never loaded (create).
        """
        if image_urls is None:
            image_urls = [image.url for image in product.images]
        return ProductResponse(
            id=product.id,
            title=product.title,
            price=product.price,
            description=product.description,
            slug=product.slug,
            stock=product.stock,
            sizes=list(product.sizes or []),
            gender=product.gender,
            tags=list(product.tags or []),
            images=image_urls,
        )

    @staticmethod
    def _handle_db_exception(error: Exception, operation: str) -> NoReturn:
        if isinstance(error, CatalogError):
            raise error

        if isinstance(error, IntegrityError):
            detail = unique_violation_detail(error)
            if detail is not None:
                logger.info("Unique constraint violated during %s: %s", operation, detail)
                raise ConflictError(message=detail, context={"operation": operation}) from error

        logger.error(
            "Unexpected error during product %s: %s",
            operation,
            str(error) or type(error).__name__,
            exc_info=error,
        )
        raise InternalError(
            context={"operation": operation, "error_type": type(error).__name__},
        ) from error


# ── Application Instance ──────────────────────────────────────────────────
product_service = ProductService(async_session_factory)


def get_product_service() -> ProductService:
    """FastAPI dependency; tests override it with their own ProductService."""
    return product_service
