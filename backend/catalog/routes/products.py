"""
Catalog Backend — Product Route Handlers
==========================================

What:  POST/GET/PATCH/DELETE under /products.
How:   Validates path/query/body, delegates to ProductService, returns JSON.

Routes are thin: every rule about slugs, images and transactions lives in
ProductService. PATCH and DELETE take a UUID path parameter, so malformed
ids are answered with FastAPI's 422 before reaching the service.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from catalog.config import settings
from catalog.schemas.common import ErrorResponse
from catalog.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from catalog.services.product_service import ProductService, get_product_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ProductResponse,
    responses={
        409: {"description": "Title or slug already exists", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a product with its images",
)
async def create_product(
    payload: ProductCreate,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    return await service.create(payload)


@router.get(
    "",
    response_model=List[ProductResponse],
    summary="List products",
    description="Paginated with limit/offset; each product's images are returned as URLs.",
)
async def list_products(
    limit: Optional[int] = Query(
        default=None,
        ge=1,
        le=settings.max_page_limit,
        description="Items per page (defaults to DEFAULT_PAGE_LIMIT)",
    ),
    offset: int = Query(default=0, ge=0, description="Items to skip"),
    service: ProductService = Depends(get_product_service),
) -> List[ProductResponse]:
    return await service.find_all(
        limit=limit if limit is not None else settings.default_page_limit,
        offset=offset,
    )


@router.get(
    "/{term}",
    response_model=ProductResponse,
    responses={
        404: {"description": "No product matches the term", "model": ErrorResponse},
    },
    summary="Get a product by id, slug or title",
    description=(
        "`term` may be the product UUID, its slug, or its title "
        "(title and slug comparison is case-insensitive)."
    ),
)
async def get_product(
    term: str,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    return await service.find_one_plain(term)


@router.patch(
    "/{product_id}",
    response_model=ProductResponse,
    responses={
        404: {"description": "Product not found", "model": ErrorResponse},
        409: {"description": "Title or slug already exists", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update a product",
    description=(
        "Partial update. If `images` is present (even empty) the product's "
        "image set is replaced atomically with the field update."
    ),
)
async def update_product(
    product_id: UUID,
    patch: ProductUpdate,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    return await service.update(product_id, patch)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"description": "Product not found", "model": ErrorResponse},
    },
    summary="Delete a product and its images",
)
async def delete_product(
    product_id: UUID,
    service: ProductService = Depends(get_product_service),
) -> Response:
    await service.remove(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
