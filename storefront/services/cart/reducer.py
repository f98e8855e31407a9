"""Cart reducer enforcing one store per cart."""

import logging
from collections.abc import Callable
from decimal import Decimal
from typing import assert_never

from storefront.services.cart.state import (
    AddItem,
    CartAction,
    CartItem,
    CartProduct,
    CartState,
    ClearCart,
    RemoveItem,
    UpdateQuantity,
)

logger = logging.getLogger(__name__)

STORE_SWITCH_WARNING = (
    "Your cart had items from another store. It was cleared so you can "
    "shop from {store_id}."
)


def cart_total(items: list[CartItem]) -> Decimal:
    return sum((item.product.price * item.quantity for item in items), Decimal("0"))


def _with_items(items: list[CartItem]) -> CartState:
    return CartState(items=items, total=cart_total(items))


def switches_store(state: CartState, action: CartAction) -> bool:
    """True if dispatching ``action`` would discard items from another store."""
    if not isinstance(action, AddItem) or not state.items:
        return False
    if state.find(action.product.id) is not None:
        return False
    return state.store_id != action.product.store_id


def cart_reducer(state: CartState, action: CartAction) -> CartState:
    """Return the cart state after applying ``action``; ``state`` is not mutated."""
    if isinstance(action, AddItem):
        existing = state.find(action.product.id)
        if existing is not None:
            items = [
                item.model_copy(update={"quantity": item.quantity + 1})
                if item.product.id == action.product.id
                else item
                for item in state.items
            ]
            return _with_items(items)

        new_item = CartItem(product=action.product, quantity=1, currency=action.currency)
        if switches_store(state, action):
            return _with_items([new_item])
        return _with_items([*state.items, new_item])

    if isinstance(action, RemoveItem):
        return _with_items([item for item in state.items if item.product.id != action.product_id])

    if isinstance(action, UpdateQuantity):
        items = []
        for item in state.items:
            if item.product.id != action.product_id:
                items.append(item)
            elif action.quantity > 0:
                items.append(item.model_copy(update={"quantity": action.quantity}))
        return _with_items(items)

    if isinstance(action, ClearCart):
        return CartState()

    assert_never(action)


class Cart:
    """Holds a cart state and applies actions to it one at a time.

    ``on_store_switch`` is called before an ADD_ITEM that will clear items
    from a different store.
    """

    def __init__(
        self,
        state: CartState | None = None,
        on_store_switch: Callable[[CartState, CartProduct], None] | None = None,
    ) -> None:
        self.state = state or CartState()
        self.on_store_switch = on_store_switch

    def dispatch(self, action: CartAction) -> CartState:
        if (
            isinstance(action, AddItem)
            and self.on_store_switch is not None
            and switches_store(self.state, action)
        ):
            self.on_store_switch(self.state, action.product)
        self.state = cart_reducer(self.state, action)
        return self.state

    def add_item(self, product: CartProduct, currency: str = "USD") -> CartState:
        return self.dispatch(AddItem(product=product, currency=currency))

    def remove_item(self, product_id: str) -> CartState:
        return self.dispatch(RemoveItem(product_id=product_id))

    def update_quantity(self, product_id: str, quantity: int) -> CartState:
        return self.dispatch(UpdateQuantity(product_id=product_id, quantity=quantity))

    def clear(self) -> CartState:
        return self.dispatch(ClearCart())

    @property
    def total(self) -> Decimal:
        return self.state.total


def apply_action(state: CartState, action: CartAction) -> tuple[CartState, list[str]]:
    """Apply one action and collect user-facing warnings."""
    warnings: list[str] = []

    def _warn(_state: CartState, product: CartProduct) -> None:
        logger.info("Cart store switch: %s -> %s", _state.store_id, product.store_id)
        warnings.append(STORE_SWITCH_WARNING.format(store_id=product.store_id))

    cart = Cart(state, on_store_switch=_warn)
    return cart.dispatch(action), warnings
