"""
Catalog Backend — Product Lookup Resolver
===========================================

What:  Turns an opaque search term (id, slug or title) into a Product.
How:   `classify_term()` is a pure function that tags the term as either
       ById or ByText; `resolve()` runs the matching query strategy.

Query strategies:
    ById    SELECT ... FROM products WHERE id = :id
            (+ SELECT ... FROM "product-images" WHERE product_id IN (...))
    ByText  SELECT ... FROM products
            LEFT OUTER JOIN "product-images" ON ...
            WHERE upper(title) = :TITLE OR slug = :slug

Both strategies load images. See DESIGN.md for why the id branch does too.
"""

import re
import uuid
from dataclasses import dataclass
from typing import Union

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from catalog.exceptions import NotFoundError
from catalog.models import Product

# Canonical 8-4-4-4-12 form, version 1-8, RFC 4122 variant, plus nil and max
_UUID_PATTERN = re.compile(
    r"^(?:[0-9a-f]{8}-[0-9a-f]{4}-[1-8][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}"
    r"|00000000-0000-0000-0000-000000000000"
    r"|ffffffff-ffff-ffff-ffff-ffffffffffff)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ById:
    product_id: uuid.UUID


@dataclass(frozen=True)
class ByText:
    text: str


LookupKey = Union[ById, ByText]


def is_uuid(term: str) -> bool:
    return bool(_UUID_PATTERN.match(term))


def classify_term(term: str) -> LookupKey:
    """
    Tag a search term.

    >>> classify_term("8c2f8f52-5b5e-4c8e-9a51-3f1a3c7c2d10")
    ById(product_id=UUID('8c2f8f52-5b5e-4c8e-9a51-3f1a3c7c2d10'))
    >>> classify_term("Chair")
    ByText(text='Chair')
    """
    if is_uuid(term):
        return ById(uuid.UUID(term))
    return ByText(term)


async def resolve(session: AsyncSession, term: str) -> Product:
    """
    Find exactly one product for `term`, images loaded.

    ById matches the primary key exactly. ByText compares the upper-cased
    term with the upper-cased title, or the lower-cased term with the slug;
    if both a title and a different product's slug match, the first row
    returned wins.

    Raises:
        NotFoundError: nothing matched
    """
    key = classify_term(term)

    if isinstance(key, ById):
        result = await session.execute(
            select(Product)
            .options(selectinload(Product.images))
            .where(Product.id == key.product_id)
        )
        product = result.scalar_one_or_none()
    else:
        result = await session.execute(
            select(Product)
            .options(joinedload(Product.images))
            .where(
                or_(
                    func.upper(Product.title) == key.text.upper(),
                    Product.slug == key.text.lower(),
                )
            )
        )
        # joinedload duplicates parent rows per image; unique() folds them back
        product = result.unique().scalars().first()

    if product is None:
        raise NotFoundError(resource="product", resource_id=term)

    return product
