"""Request/response schemas for the cart endpoint."""

from pydantic import Field

from storefront.schemas.common import BaseSchema
from storefront.services.cart.state import CartAction, CartState


class CartActionRequest(BaseSchema):
    """A cart held by the client plus the action to apply to it."""

    state: CartState = Field(default_factory=CartState)
    action: CartAction


class CartActionResponse(BaseSchema):
    state: CartState
    warnings: list[str] = []
