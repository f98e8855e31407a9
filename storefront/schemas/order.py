"""Pydantic schemas for order intake and management."""

from datetime import datetime
from decimal import Decimal

from pydantic import AliasChoices, Field, computed_field

from storefront.models.order import OrderStatus
from storefront.schemas.common import BaseSchema, Money


class CustomerInfo(BaseSchema):
    """Customer contact fields; presence is checked by the order service."""

    name: str | None = Field(default=None, max_length=255)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = None


class OrderItemIn(BaseSchema):
    product_id: str = Field(validation_alias=AliasChoices("product_id", "productId"))
    product_name: str = Field(
        max_length=255,
        validation_alias=AliasChoices("product_name", "productName", "name"),
    )
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    quantity: int
    store_id: str | None = Field(
        default=None, validation_alias=AliasChoices("store_id", "storeId")
    )


class OrderCreate(BaseSchema):
    """Checkout payload from the cart page."""

    customer: CustomerInfo = Field(default_factory=CustomerInfo)
    items: list[OrderItemIn] = Field(default_factory=list)
    total: Decimal | None = Field(default=None, max_digits=10, decimal_places=2)
    currency: str | None = Field(default=None, min_length=3, max_length=3)


class OrderItemResponse(BaseSchema):
    product_id: str
    store_id: str | None = None
    product_name: str
    price: Money
    quantity: int

    @computed_field  # type: ignore[prop-decorator]
    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class OrderResponse(BaseSchema):
    """An order as stored by either backend."""

    id: str
    customer_name: str
    customer_email: str
    customer_phone: str | None = None
    customer_address: str
    items: list[OrderItemResponse]
    total: Money
    currency: str = "USD"
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def store_ids(self) -> set[str]:
        return {item.store_id for item in self.items if item.store_id}


class OrderCreatedResponse(BaseSchema):
    success: bool = True
    message: str
    order_id: str
    order: OrderResponse


class OrderStatusUpdate(BaseSchema):
    status: OrderStatus
