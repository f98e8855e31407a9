"""Pydantic schemas for seller stores."""

from datetime import datetime
from decimal import Decimal

from pydantic import EmailStr, Field

from storefront.core.currencies import DEFAULT_CURRENCY
from storefront.models.store import StoreStatus
from storefront.schemas.common import BaseSchema

HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class ApplicationDetails(BaseSchema):
    """What the seller told us when applying."""

    product_info: str = Field(default="", max_length=5000)
    social_media_links: str = Field(default="", max_length=2000)
    sample_images: list[str] = Field(default_factory=list)


class Branding(BaseSchema):
    """Store look and feel shown on the store page."""

    logo: str | None = None
    banner: str | None = None
    primary_color: str = Field(default="#3b82f6", pattern=HEX_COLOR)
    accent_color: str = Field(default="#8b5cf6", pattern=HEX_COLOR)
    description: str | None = Field(default=None, max_length=2000)
    tagline: str | None = Field(default=None, max_length=255)


class ShippingPolicy(BaseSchema):
    policy: str | None = Field(default=None, max_length=5000)
    flat_fee: Decimal | None = Field(default=None, ge=0)
    free_shipping_threshold: Decimal | None = Field(default=None, ge=0)


# === Store CRUD Schemas ===


class StoreApplication(BaseSchema):
    """Seller application; creates a store in the pending state."""

    store_name: str = Field(..., min_length=1, max_length=255)
    contact_email: EmailStr
    currency: str = Field(default=DEFAULT_CURRENCY, min_length=3, max_length=3)
    application_details: ApplicationDetails = Field(default_factory=ApplicationDetails)


class StoreUpdate(BaseSchema):
    """Owner/admin update of store profile, branding and shipping."""

    store_name: str | None = Field(default=None, min_length=1, max_length=255)
    contact_email: EmailStr | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    branding: Branding | None = None
    shipping_policy: ShippingPolicy | None = None


class StoreResponse(BaseSchema):
    """A store as stored by either backend."""

    id: str
    owner_uid: str
    store_name: str
    status: StoreStatus
    contact_email: str
    currency: str = DEFAULT_CURRENCY
    application_details: ApplicationDetails = Field(default_factory=ApplicationDetails)
    branding: Branding = Field(default_factory=Branding)
    shipping_policy: ShippingPolicy = Field(default_factory=ShippingPolicy)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class PublicStoreResponse(BaseSchema):
    """Store page data for shoppers; omits owner and application details."""

    id: str
    store_name: str
    currency: str
    branding: Branding
    shipping_policy: ShippingPolicy
