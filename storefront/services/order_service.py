"""Order intake and seller/admin order management."""

import logging
from decimal import Decimal
from typing import Any, assert_never

from storefront.core.currencies import DEFAULT_CURRENCY, is_supported
from storefront.core.events import OrderPlaced
from storefront.core.exceptions import (
    InvalidTransition,
    NotFound,
    PermissionDenied,
    ValidationFailed,
)
from storefront.core.permissions import can_manage_store
from storefront.models.order import OrderStatus
from storefront.models.user import Role
from storefront.repositories import Repository
from storefront.schemas.order import OrderCreate, OrderResponse
from storefront.schemas.user import UserResponse

logger = logging.getLogger(__name__)

# Fulfilment only moves forward; cancelling is possible until the order ships
ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset(
        {
            OrderStatus.CONFIRMED,
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
        }
    ),
    OrderStatus.CONFIRMED: frozenset(
        {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED}
    ),
    OrderStatus.PROCESSING: frozenset(
        {OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.CANCELLED}
    ),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def validate_order(data: OrderCreate) -> Decimal:
    """Check the checkout payload before anything is stored.

    Returns the submitted total.

    Raises:
        ValidationFailed: With ``details`` naming each problem
    """
    missing = [
        f"customer.{field}"
        for field in ("name", "email", "address")
        if not (getattr(data.customer, field) or "").strip()
    ]
    if not data.items:
        missing.append("items")
    total = data.total
    if total is None:
        missing.append("total")
    if missing or total is None:
        raise ValidationFailed("Missing required fields", {"missing": missing})

    bad_quantities = [item.product_id for item in data.items if item.quantity < 1]
    if bad_quantities:
        raise ValidationFailed(
            "Every item needs a quantity of at least 1",
            {"invalid_quantity": bad_quantities},
        )

    if total <= 0:
        raise ValidationFailed("Order total must be positive", {"total": str(total)})

    if data.currency is not None and not is_supported(data.currency.upper()):
        raise ValidationFailed(
            f"Unsupported currency: {data.currency}", {"currency": data.currency}
        )
    return total


class OrderService:
    """Business logic for placing and managing orders."""

    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    async def place_order(self, data: OrderCreate) -> tuple[OrderResponse, OrderPlaced]:
        """Validate and store an order.

        Returns the order and the event that triggers the seller and
        customer emails; the caller publishes it after responding.
        """
        total = validate_order(data)

        computed = sum((item.price * item.quantity for item in data.items), Decimal("0"))
        if computed != total:
            logger.warning(
                "Order total %s does not match item sum %s; keeping submitted total",
                total,
                computed,
            )

        store_ids = list(dict.fromkeys(item.store_id for item in data.items if item.store_id))
        stores = [s for s in [await self.repo.get_store(sid) for sid in store_ids] if s]
        currency = (data.currency or (stores[0].currency if stores else DEFAULT_CURRENCY)).upper()

        fields: dict[str, Any] = {
            "customer_name": (data.customer.name or "").strip(),
            "customer_email": (data.customer.email or "").strip(),
            "customer_phone": (data.customer.phone or "").strip() or None,
            "customer_address": (data.customer.address or "").strip(),
            "total": total,
            "currency": currency,
            "status": OrderStatus.PENDING,
        }
        items = [
            {
                "product_id": item.product_id,
                "store_id": item.store_id,
                "product_name": item.product_name,
                "price": item.price,
                "quantity": item.quantity,
            }
            for item in data.items
        ]
        order = await self.repo.create_order(fields, items)
        logger.info(
            "Order %s placed: %d items, total %s %s", order.id, len(items), order.total, currency
        )

        event = OrderPlaced(
            order_id=order.id,
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            customer_phone=order.customer_phone,
            customer_address=order.customer_address,
            total=order.total,
            currency=order.currency,
            items=tuple(item.model_dump() for item in order.items),
            store_contacts=tuple(s.contact_email for s in stores if s.contact_email),
        )
        return order, event

    async def list_orders(self, account: UserResponse) -> list[OrderResponse]:
        """Admins see every order; sellers see orders containing their items."""
        match account.role:
            case Role.ADMIN:
                return await self.repo.list_orders()
            case Role.SELLER:
                if not account.store_id:
                    return []
                return await self.repo.list_orders(store_id=account.store_id)
            case Role.USER:
                raise PermissionDenied("Only sellers and admins can view orders")
            case _:
                assert_never(account.role)

    async def get_order(self, account: UserResponse, order_id: str) -> OrderResponse:
        order = await self.repo.get_order(order_id)
        if order is None:
            raise NotFound("Order not found", {"order_id": order_id})
        if account.role is not Role.ADMIN and not any(
            can_manage_store(account, store_id) for store_id in order.store_ids()
        ):
            raise PermissionDenied("You do not have access to this order", {"order_id": order_id})
        return order

    async def update_status(
        self, account: UserResponse, order_id: str, status: OrderStatus
    ) -> OrderResponse:
        order = await self.get_order(account, order_id)
        if order.status is status:
            return order
        if status not in ORDER_TRANSITIONS[order.status]:
            raise InvalidTransition(
                f"Cannot change order status from {order.status.value} to {status.value}",
                {"from": order.status.value, "to": status.value},
            )
        updated = await self.repo.update_order_status(order_id, status)
        if updated is None:
            raise NotFound("Order not found", {"order_id": order_id})
        logger.info("Order %s: %s -> %s", order_id, order.status.value, status.value)
        return updated
