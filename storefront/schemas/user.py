"""Pydantic schemas for user records."""

from datetime import datetime

from pydantic import Field

from storefront.models.user import Role
from storefront.schemas.common import BaseSchema
from storefront.schemas.store import StoreResponse


class UserSync(BaseSchema):
    """Profile fields sent by the client after sign-in."""

    display_name: str | None = Field(default=None, max_length=255)


class UserResponse(BaseSchema):
    """A user record; ``id`` is the external auth uid."""

    id: str
    email: str
    display_name: str = ""
    role: Role = Role.USER
    store_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProfileResponse(BaseSchema):
    user: UserResponse
    store: StoreResponse | None = None
