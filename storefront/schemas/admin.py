"""Schemas for admin maintenance endpoints."""

from datetime import datetime
from typing import Any

from storefront.schemas.common import BaseSchema
from storefront.schemas.order import OrderResponse
from storefront.schemas.product import ProductResponse
from storefront.schemas.store import StoreResponse

EXPORT_FORMAT_VERSION = "3.0"


class CleanupResponse(BaseSchema):
    deleted: int


class DeleteUserResponse(BaseSchema):
    uid: str
    deleted_store_ids: list[str] = []
    deleted_products: int = 0


class DataExport(BaseSchema):
    """Backup snapshot of the catalog and orders."""

    products: list[ProductResponse]
    orders: list[OrderResponse]
    stores: list[StoreResponse]
    timestamp: datetime
    version: str = EXPORT_FORMAT_VERSION


class DataImport(BaseSchema):
    """Loose import payload; each product is validated individually."""

    products: list[dict[str, Any]] = []
    default_store_id: str | None = None


class ImportResult(BaseSchema):
    imported: int
    failed: int


class EmailConfigStatus(BaseSchema):
    has_api_key: bool
    from_address: str
    admin_email: str
    app_url: str


class EmailCheckResponse(BaseSchema):
    sent: bool
    email_id: str | None = None
    recipient: str
    config: EmailConfigStatus
