"""Contact form schemas."""

from pydantic import Field

from storefront.schemas.common import BaseSchema


class ContactRequest(BaseSchema):
    """Contact form submission; all fields are required by the contact route."""

    name: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    subject: str | None = Field(default=None, max_length=255)
    message: str | None = Field(default=None, max_length=10000)
