"""Relational backend built on async SQLAlchemy."""

from collections.abc import Collection
from typing import Any

from sqlalchemy import delete, func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.models.order import Order, OrderItem, OrderStatus
from storefront.models.product import Product
from storefront.models.store import Store, StoreStatus
from storefront.models.user import User
from storefront.repositories.base import Repository
from storefront.schemas.order import OrderResponse
from storefront.schemas.product import ProductResponse
from storefront.schemas.store import StoreResponse
from storefront.schemas.user import UserResponse


class SqlRepository(Repository):
    """Repository over the ``users``, ``stores``, ``products``, ``orders`` and
    ``order_items`` tables. Each write commits immediately."""

    backend_name = "sql"

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # --- Users ---

    async def get_user(self, uid: str) -> UserResponse | None:
        user = await self.db.get(User, uid)
        return UserResponse.model_validate(user) if user else None

    async def list_users(self) -> list[UserResponse]:
        result = await self.db.execute(select(User).order_by(User.created_at.desc()))
        return [UserResponse.model_validate(u) for u in result.scalars().all()]

    async def upsert_user(self, uid: str, fields: dict[str, Any]) -> UserResponse:
        user = await self.db.get(User, uid)
        if user is None:
            user = User(id=uid, **fields)
            self.db.add(user)
        else:
            for field, value in fields.items():
                setattr(user, field, value)
        await self.db.commit()
        await self.db.refresh(user)
        return UserResponse.model_validate(user)

    async def delete_user(self, uid: str) -> bool:
        result = await self.db.execute(delete(User).where(User.id == uid))
        await self.db.commit()
        return (result.rowcount or 0) > 0  # type: ignore[attr-defined]

    # --- Stores ---

    async def create_store(self, fields: dict[str, Any]) -> StoreResponse:
        store = Store(**fields)
        self.db.add(store)
        await self.db.commit()
        await self.db.refresh(store)
        return StoreResponse.model_validate(store)

    async def get_store(self, store_id: str) -> StoreResponse | None:
        store = await self.db.get(Store, store_id)
        return StoreResponse.model_validate(store) if store else None

    async def get_store_by_owner(self, owner_uid: str) -> StoreResponse | None:
        query = (
            select(Store)
            .where(Store.owner_uid == owner_uid)
            .order_by(Store.created_at.asc())
            .limit(1)
        )
        result = await self.db.execute(query)
        store = result.scalar_one_or_none()
        return StoreResponse.model_validate(store) if store else None

    async def list_stores(self, status: StoreStatus | None = None) -> list[StoreResponse]:
        query = select(Store).order_by(Store.created_at.desc())
        if status is not None:
            query = query.where(Store.status == status)
        result = await self.db.execute(query)
        return [StoreResponse.model_validate(s) for s in result.scalars().all()]

    async def update_store(self, store_id: str, changes: dict[str, Any]) -> StoreResponse | None:
        store = await self.db.get(Store, store_id)
        if store is None:
            return None
        for field, value in changes.items():
            setattr(store, field, value)
        await self.db.commit()
        await self.db.refresh(store)
        return StoreResponse.model_validate(store)

    async def delete_store(self, store_id: str) -> bool:
        result = await self.db.execute(delete(Store).where(Store.id == store_id))
        await self.db.commit()
        return (result.rowcount or 0) > 0  # type: ignore[attr-defined]

    # --- Products ---

    async def create_product(self, fields: dict[str, Any]) -> ProductResponse:
        product = Product(**fields)
        self.db.add(product)
        await self.db.commit()
        await self.db.refresh(product)
        return ProductResponse.model_validate(product)

    async def get_product(self, product_id: str) -> ProductResponse | None:
        product = await self.db.get(Product, product_id)
        return ProductResponse.model_validate(product) if product else None

    async def list_products(
        self,
        store_ids: Collection[str] | None = None,
        category: str | None = None,
    ) -> list[ProductResponse]:
        query = select(Product).order_by(Product.created_at.desc())
        if store_ids is not None:
            if not store_ids:
                return []
            query = query.where(Product.store_id.in_(list(store_ids)))
        if category:
            query = query.where(func.lower(Product.category) == category.lower())
        result = await self.db.execute(query)
        return [ProductResponse.model_validate(p) for p in result.scalars().all()]

    async def update_product(
        self, product_id: str, changes: dict[str, Any]
    ) -> ProductResponse | None:
        product = await self.db.get(Product, product_id)
        if product is None:
            return None
        for field, value in changes.items():
            setattr(product, field, value)
        await self.db.commit()
        await self.db.refresh(product)
        return ProductResponse.model_validate(product)

    async def delete_product(self, product_id: str) -> bool:
        result = await self.db.execute(delete(Product).where(Product.id == product_id))
        await self.db.commit()
        return (result.rowcount or 0) > 0  # type: ignore[attr-defined]

    async def delete_products_for_store(self, store_id: str) -> int:
        result = await self.db.execute(delete(Product).where(Product.store_id == store_id))
        await self.db.commit()
        return result.rowcount or 0  # type: ignore[attr-defined]

    # --- Orders ---

    async def create_order(
        self, fields: dict[str, Any], items: list[dict[str, Any]]
    ) -> OrderResponse:
        order = Order(**fields)
        order.items = [
            OrderItem(position=position, **item) for position, item in enumerate(items)
        ]
        self.db.add(order)
        await self.db.commit()
        return OrderResponse.model_validate(order)

    async def get_order(self, order_id: str) -> OrderResponse | None:
        order = await self.db.get(Order, order_id)
        return OrderResponse.model_validate(order) if order else None

    async def list_orders(self, store_id: str | None = None) -> list[OrderResponse]:
        query = select(Order).order_by(Order.created_at.desc())
        if store_id is not None:
            query = query.where(
                Order.id.in_(select(OrderItem.order_id).where(OrderItem.store_id == store_id))
            )
        result = await self.db.execute(query)
        return [OrderResponse.model_validate(o) for o in result.scalars().all()]

    async def update_order_status(
        self, order_id: str, status: OrderStatus
    ) -> OrderResponse | None:
        order = await self.db.get(Order, order_id)
        if order is None:
            return None
        order.status = status
        await self.db.commit()
        await self.db.refresh(order, attribute_names=["status", "updated_at"])
        return OrderResponse.model_validate(order)

    # --- Health ---

    async def ping(self) -> None:
        await self.db.execute(text("SELECT 1"))
