"""Cart state and action types.

Actions form a closed tagged union on ``type``; the reducer handles each
variant exhaustively.
"""

from decimal import Decimal
from typing import Annotated, Literal

from pydantic import Field, model_validator

from storefront.core.currencies import DEFAULT_CURRENCY
from storefront.schemas.common import BaseSchema


class CartProduct(BaseSchema):
    """Snapshot of the product fields the cart needs."""

    id: str
    store_id: str
    name: str
    price: Decimal = Field(ge=0)
    image: str = ""


class CartItem(BaseSchema):
    product: CartProduct
    quantity: int = Field(ge=1)
    currency: str = DEFAULT_CURRENCY


class CartState(BaseSchema):
    """Cart contents.

    Attributes:
        items: Line items, all from the same store
        total: Sum of price x quantity over items (not currency-checked)
    """

    items: list[CartItem] = Field(default_factory=list)
    total: Decimal = Decimal("0")

    @model_validator(mode="after")
    def check_single_store(self) -> "CartState":
        store_ids = {item.product.store_id for item in self.items}
        if len(store_ids) > 1:
            raise ValueError(f"Cart items must come from one store, got {sorted(store_ids)}")
        product_ids = [item.product.id for item in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValueError("Cart lists the same product more than once")
        return self

    @property
    def store_id(self) -> str | None:
        return self.items[0].product.store_id if self.items else None

    def find(self, product_id: str) -> CartItem | None:
        return next((item for item in self.items if item.product.id == product_id), None)


class AddItem(BaseSchema):
    type: Literal["ADD_ITEM"] = "ADD_ITEM"
    product: CartProduct
    currency: str = DEFAULT_CURRENCY


class RemoveItem(BaseSchema):
    type: Literal["REMOVE_ITEM"] = "REMOVE_ITEM"
    product_id: str


class UpdateQuantity(BaseSchema):
    type: Literal["UPDATE_QUANTITY"] = "UPDATE_QUANTITY"
    product_id: str
    quantity: int


class ClearCart(BaseSchema):
    type: Literal["CLEAR_CART"] = "CLEAR_CART"


CartAction = Annotated[
    AddItem | RemoveItem | UpdateQuantity | ClearCart,
    Field(discriminator="type"),
]
