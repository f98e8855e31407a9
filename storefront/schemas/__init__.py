"""Pydantic schemas for request/response validation."""

from storefront.schemas.common import (
    ErrorResponse,
    HealthResponse,
    ListResponse,
    MessageResponse,
    PaginatedResponse,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ListResponse",
    "MessageResponse",
    "PaginatedResponse",
]
