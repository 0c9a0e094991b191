"""
Catalog Backend — Administrative Routes
=========================================

What:  Destructive maintenance operations (currently: delete every product).
How:   Every route depends on `require_admin`, which compares the
       X-Admin-Token header with settings.admin_token in constant time.
       With no token configured the routes always answer 403.
"""

import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header

from catalog.config import settings
from catalog.exceptions import PermissionDeniedError
from catalog.schemas.common import ErrorResponse
from catalog.schemas.product import DeleteAllResponse
from catalog.services.product_service import ProductService, get_product_service

logger = logging.getLogger(__name__)


async def require_admin(
    x_admin_token: Optional[str] = Header(default=None, alias="X-Admin-Token"),
) -> None:
    if not settings.admin_token:
        raise PermissionDeniedError(message="Administrative routes are disabled")
    if x_admin_token is None or not hmac.compare_digest(
        x_admin_token.encode(), settings.admin_token.encode()
    ):
        logger.warning("Rejected administrative request: bad or missing token")
        raise PermissionDeniedError()


router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
    responses={403: {"description": "Missing or invalid admin token", "model": ErrorResponse}},
)


@router.delete(
    "/products",
    response_model=DeleteAllResponse,
    summary="Delete every product and image",
)
async def delete_all_products(
    service: ProductService = Depends(get_product_service),
) -> DeleteAllResponse:
    deleted = await service.delete_all()
    return DeleteAllResponse(deleted=deleted)
