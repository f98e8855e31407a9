"""Storage interface shared by the relational and JSON document backends."""

from abc import ABC, abstractmethod
from collections.abc import Collection
from typing import Any

from storefront.models.order import OrderStatus
from storefront.models.store import StoreStatus
from storefront.schemas.order import OrderResponse
from storefront.schemas.product import ProductResponse
from storefront.schemas.store import StoreResponse
from storefront.schemas.user import UserResponse


class Repository(ABC):
    """CRUD over users, stores, products and orders.

    Methods take plain field dicts (already validated by the services) and
    return the response schemas, so callers never see backend types.
    Lookups return ``None`` and deletes return ``False`` when the record is
    absent; neither backend raises for a missing record.
    """

    backend_name: str

    # --- Users ---

    @abstractmethod
    async def get_user(self, uid: str) -> UserResponse | None: ...

    @abstractmethod
    async def list_users(self) -> list[UserResponse]: ...

    @abstractmethod
    async def upsert_user(self, uid: str, fields: dict[str, Any]) -> UserResponse:
        """Create the user or merge ``fields`` into the existing record."""

    @abstractmethod
    async def delete_user(self, uid: str) -> bool: ...

    # --- Stores ---

    @abstractmethod
    async def create_store(self, fields: dict[str, Any]) -> StoreResponse: ...

    @abstractmethod
    async def get_store(self, store_id: str) -> StoreResponse | None: ...

    @abstractmethod
    async def get_store_by_owner(self, owner_uid: str) -> StoreResponse | None: ...

    @abstractmethod
    async def list_stores(self, status: StoreStatus | None = None) -> list[StoreResponse]:
        """List stores newest first, optionally filtered by status."""

    @abstractmethod
    async def update_store(
        self, store_id: str, changes: dict[str, Any]
    ) -> StoreResponse | None: ...

    @abstractmethod
    async def delete_store(self, store_id: str) -> bool:
        """Delete the store record only; products are removed by the caller."""

    # --- Products ---

    @abstractmethod
    async def create_product(self, fields: dict[str, Any]) -> ProductResponse: ...

    @abstractmethod
    async def get_product(self, product_id: str) -> ProductResponse | None: ...

    @abstractmethod
    async def list_products(
        self,
        store_ids: Collection[str] | None = None,
        category: str | None = None,
    ) -> list[ProductResponse]:
        """List products newest first; ``store_ids=None`` means all stores."""

    @abstractmethod
    async def update_product(
        self, product_id: str, changes: dict[str, Any]
    ) -> ProductResponse | None: ...

    @abstractmethod
    async def delete_product(self, product_id: str) -> bool: ...

    @abstractmethod
    async def delete_products_for_store(self, store_id: str) -> int:
        """Delete every product of a store and return how many were removed."""

    # --- Orders ---

    @abstractmethod
    async def create_order(
        self, fields: dict[str, Any], items: list[dict[str, Any]]
    ) -> OrderResponse: ...

    @abstractmethod
    async def get_order(self, order_id: str) -> OrderResponse | None: ...

    @abstractmethod
    async def list_orders(self, store_id: str | None = None) -> list[OrderResponse]:
        """List orders newest first; with ``store_id``, only orders containing its items."""

    @abstractmethod
    async def update_order_status(
        self, order_id: str, status: OrderStatus
    ) -> OrderResponse | None: ...

    # --- Health ---

    @abstractmethod
    async def ping(self) -> None:
        """Raise if the backend is unreachable."""
