"""Pydantic schemas for catalog products."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field

from storefront.schemas.common import BaseSchema, Money

# Fields a new product must carry; checked by the catalog service so that
# missing fields come back as a 400 listing them rather than a 422.
REQUIRED_PRODUCT_FIELDS = ("store_id", "name", "description", "price", "image", "category", "stock")


class ProductCreate(BaseSchema):
    """Payload for creating a product."""

    store_id: str | None = None
    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    image: str | None = None
    category: str | None = Field(default=None, max_length=100)
    stock: int | None = Field(default=None, ge=0)


class ProductUpdate(BaseSchema):
    """Partial product update; only provided fields change."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    image: str | None = None
    category: str | None = Field(default=None, min_length=1, max_length=100)
    stock: int | None = Field(default=None, ge=0)


class ProductResponse(BaseSchema):
    """A product as stored by either backend."""

    id: str
    store_id: str
    name: str
    description: str
    price: Money
    image: str
    category: str
    stock: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CatalogRevisionResponse(BaseSchema):
    """Counter that increases on every catalog change, for polling clients."""

    revision: int
    changed_at: datetime | None = None
