"""SQLAlchemy models."""

from storefront.models.base import Base
from storefront.models.order import Order, OrderItem, OrderStatus
from storefront.models.product import Product
from storefront.models.store import Store, StoreStatus
from storefront.models.user import Role, User

__all__ = [
    # Base
    "Base",
    # Users & stores
    "User",
    "Role",
    "Store",
    "StoreStatus",
    # Catalog
    "Product",
    # Orders
    "Order",
    "OrderItem",
    "OrderStatus",
]
