"""API v1 router combining all route modules."""

from typing import Any

from fastapi import APIRouter

from storefront.api.v1 import (
    admin,
    cart,
    contact,
    health,
    orders,
    products,
    stores,
    users,
)
from storefront.schemas.common import ErrorResponse

# Error body shared by the domain routes, for the OpenAPI docs
ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    code: {"model": ErrorResponse} for code in (400, 403, 404, 409)
}

api_router = APIRouter()

# Include health check routes (no prefix)
api_router.include_router(health.router)

# Public catalog; writes require seller or admin
api_router.include_router(
    products.router,
    prefix="/products",
    tags=["products"],
    responses=ERROR_RESPONSES,
)

# Orders (intake is public and rate limited)
api_router.include_router(
    orders.router,
    prefix="/orders",
    tags=["orders"],
    responses=ERROR_RESPONSES,
)

# Seller stores
api_router.include_router(
    stores.router,
    prefix="/stores",
    tags=["stores"],
    responses=ERROR_RESPONSES,
)

# Current user
api_router.include_router(
    users.router,
    prefix="/users",
    tags=["users"],
    responses=ERROR_RESPONSES,
)

# Store approval, user management and maintenance (admin only)
api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["admin"],
    responses=ERROR_RESPONSES,
)

# Contact form (no auth, rate limited)
api_router.include_router(
    contact.router,
    prefix="/contact",
    tags=["contact"],
    responses=ERROR_RESPONSES,
)

# Cart reducer (no auth, stateless)
api_router.include_router(
    cart.router,
    prefix="/cart",
    tags=["cart"],
)
