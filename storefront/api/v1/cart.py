"""Stateless cart endpoint running the server-side reducer."""

from fastapi import APIRouter

from storefront.schemas.cart import CartActionRequest, CartActionResponse
from storefront.services.cart.reducer import apply_action

router = APIRouter()


@router.post("/actions", response_model=CartActionResponse)
async def dispatch_cart_action(data: CartActionRequest) -> CartActionResponse:
    """Apply one action to the submitted cart and return the new cart.

    Nothing is stored; the client keeps the cart.
    """
    state, warnings = apply_action(data.state, data.action)
    return CartActionResponse(state=state, warnings=warnings)
