"""Common Pydantic schemas used across the API."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict

CENT = Decimal("0.01")

# Amount rounded to cents; serialised as a decimal string such as "12.50"
Money = Annotated[Decimal, AfterValidator(lambda v: v.quantize(CENT, rounding=ROUND_HALF_UP))]


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class HealthResponse(BaseSchema):
    """Health check response schema."""

    status: str
    version: str
    environment: str
    storage_backend: str
    checks: dict[str, str]


class ErrorResponse(BaseSchema):
    """Error body returned for domain errors (400/403/404/409/502)."""

    error: str
    details: dict[str, Any] | None = None


class MessageResponse(BaseSchema):
    message: str


class ListResponse[T](BaseSchema):
    """Unpaginated list wrapper."""

    items: list[T]
    total: int


class PaginatedResponse[T](BaseSchema):
    """Paginated response wrapper."""

    items: list[T]
    total: int
    page: int
    page_size: int
    pages: int
