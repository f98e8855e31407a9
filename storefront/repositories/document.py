"""JSON document backend.

Each collection is a single JSON array on disk (``users.json``,
``stores.json``, ``products.json``, ``orders.json``). Writes go through a
per-directory lock and are atomic: the new content is written to a temp
file that then replaces the original.
"""

import asyncio
import json
import logging
import os
from collections.abc import Collection
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from storefront.models.base import new_id
from storefront.models.order import OrderStatus
from storefront.models.store import StoreStatus
from storefront.repositories.base import Repository
from storefront.schemas.order import OrderResponse
from storefront.schemas.product import ProductResponse
from storefront.schemas.store import StoreResponse
from storefront.schemas.user import UserResponse

logger = logging.getLogger(__name__)

USERS = "users"
STORES = "stores"
PRODUCTS = "products"
ORDERS = "orders"

_locks: dict[Path, asyncio.Lock] = {}


def _lock_for(path: Path) -> asyncio.Lock:
    key = path.resolve()
    if key not in _locks:
        _locks[key] = asyncio.Lock()
    return _locks[key]


def _newest_first(docs: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return sorted(docs, key=lambda d: d.get("created_at") or "", reverse=True)


class DocumentRepository(Repository):
    """Repository over flat JSON files in ``data_dir``."""

    backend_name = "json"

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        self._lock = _lock_for(self.data_dir)

    # --- File access ---

    def _path(self, collection: str) -> Path:
        return self.data_dir / f"{collection}.json"

    def _read_sync(self, collection: str) -> list[dict[str, Any]]:
        path = self._path(collection)
        if not path.exists():
            return []
        raw = path.read_text(encoding="utf-8")
        if not raw.strip():
            return []
        docs = json.loads(raw)
        if not isinstance(docs, list):
            raise ValueError(f"{path} does not contain a JSON array")
        return docs

    def _write_sync(self, collection: str, docs: list[dict[str, Any]]) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        path = self._path(collection)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(docs, indent=2, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp, path)
        logger.debug("Wrote %d %s to %s", len(docs), collection, path)

    async def _read(self, collection: str) -> list[dict[str, Any]]:
        return await asyncio.to_thread(self._read_sync, collection)

    async def _write(self, collection: str, docs: list[dict[str, Any]]) -> None:
        await asyncio.to_thread(self._write_sync, collection, docs)

    @staticmethod
    def _dump(record: BaseModel) -> dict[str, Any]:
        return record.model_dump(mode="json")

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)

    async def _insert[T: BaseModel](self, collection: str, record: T) -> T:
        async with self._lock:
            docs = await self._read(collection)
            docs.append(self._dump(record))
            await self._write(collection, docs)
        return record

    async def _find(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        docs = await self._read(collection)
        return next((d for d in docs if d.get("id") == doc_id), None)

    async def _update(
        self, collection: str, doc_id: str, changes: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Merge ``changes`` into a document and bump ``updated_at``."""
        async with self._lock:
            docs = await self._read(collection)
            for doc in docs:
                if doc.get("id") == doc_id:
                    doc.update(changes)
                    doc["updated_at"] = self._now().isoformat()
                    await self._write(collection, docs)
                    return doc
        return None

    async def _delete_where(self, collection: str, predicate: Any) -> int:
        async with self._lock:
            docs = await self._read(collection)
            kept = [d for d in docs if not predicate(d)]
            removed = len(docs) - len(kept)
            if removed:
                await self._write(collection, kept)
        return removed

    def _serialise(self, changes: dict[str, Any]) -> dict[str, Any]:
        """Convert Decimals, enums and datetimes to their JSON form."""
        return json.loads(json.dumps(changes, default=_json_default))

    # --- Users ---

    async def get_user(self, uid: str) -> UserResponse | None:
        doc = await self._find(USERS, uid)
        return UserResponse.model_validate(doc) if doc else None

    async def list_users(self) -> list[UserResponse]:
        docs = await self._read(USERS)
        return [UserResponse.model_validate(d) for d in _newest_first(docs)]

    async def upsert_user(self, uid: str, fields: dict[str, Any]) -> UserResponse:
        changes = self._serialise(fields)
        async with self._lock:
            docs = await self._read(USERS)
            now = self._now()
            for doc in docs:
                if doc.get("id") == uid:
                    doc.update(changes)
                    doc["updated_at"] = now.isoformat()
                    user = UserResponse.model_validate(doc)
                    break
            else:
                user = UserResponse.model_validate(
                    {**changes, "id": uid, "created_at": now, "updated_at": now}
                )
                docs.append(self._dump(user))
            await self._write(USERS, docs)
        return user

    async def delete_user(self, uid: str) -> bool:
        return await self._delete_where(USERS, lambda d: d.get("id") == uid) > 0

    # --- Stores ---

    async def create_store(self, fields: dict[str, Any]) -> StoreResponse:
        now = self._now()
        store = StoreResponse.model_validate(
            {
                "status": StoreStatus.PENDING,
                **fields,
                "id": new_id(),
                "created_at": now,
                "updated_at": now,
            }
        )
        return await self._insert(STORES, store)

    async def get_store(self, store_id: str) -> StoreResponse | None:
        doc = await self._find(STORES, store_id)
        return StoreResponse.model_validate(doc) if doc else None

    async def get_store_by_owner(self, owner_uid: str) -> StoreResponse | None:
        docs = [d for d in await self._read(STORES) if d.get("owner_uid") == owner_uid]
        if not docs:
            return None
        oldest = min(docs, key=lambda d: d.get("created_at") or "")
        return StoreResponse.model_validate(oldest)

    async def list_stores(self, status: StoreStatus | None = None) -> list[StoreResponse]:
        docs = await self._read(STORES)
        if status is not None:
            docs = [d for d in docs if d.get("status") == status.value]
        return [StoreResponse.model_validate(d) for d in _newest_first(docs)]

    async def update_store(self, store_id: str, changes: dict[str, Any]) -> StoreResponse | None:
        doc = await self._update(STORES, store_id, self._serialise(changes))
        return StoreResponse.model_validate(doc) if doc else None

    async def delete_store(self, store_id: str) -> bool:
        return await self._delete_where(STORES, lambda d: d.get("id") == store_id) > 0

    # --- Products ---

    async def create_product(self, fields: dict[str, Any]) -> ProductResponse:
        now = self._now()
        product = ProductResponse.model_validate(
            {**fields, "id": new_id(), "created_at": now, "updated_at": now}
        )
        return await self._insert(PRODUCTS, product)

    async def get_product(self, product_id: str) -> ProductResponse | None:
        doc = await self._find(PRODUCTS, product_id)
        return ProductResponse.model_validate(doc) if doc else None

    async def list_products(
        self,
        store_ids: Collection[str] | None = None,
        category: str | None = None,
    ) -> list[ProductResponse]:
        docs = await self._read(PRODUCTS)
        if store_ids is not None:
            wanted = set(store_ids)
            docs = [d for d in docs if d.get("store_id") in wanted]
        if category:
            docs = [d for d in docs if str(d.get("category", "")).lower() == category.lower()]
        return [ProductResponse.model_validate(d) for d in _newest_first(docs)]

    async def update_product(
        self, product_id: str, changes: dict[str, Any]
    ) -> ProductResponse | None:
        doc = await self._update(PRODUCTS, product_id, self._serialise(changes))
        return ProductResponse.model_validate(doc) if doc else None

    async def delete_product(self, product_id: str) -> bool:
        return await self._delete_where(PRODUCTS, lambda d: d.get("id") == product_id) > 0

    async def delete_products_for_store(self, store_id: str) -> int:
        return await self._delete_where(PRODUCTS, lambda d: d.get("store_id") == store_id)

    # --- Orders ---

    async def create_order(
        self, fields: dict[str, Any], items: list[dict[str, Any]]
    ) -> OrderResponse:
        now = self._now()
        order = OrderResponse.model_validate(
            {
                "status": OrderStatus.PENDING,
                **fields,
                "items": items,
                "id": new_id(),
                "created_at": now,
                "updated_at": now,
            }
        )
        return await self._insert(ORDERS, order)

    async def get_order(self, order_id: str) -> OrderResponse | None:
        doc = await self._find(ORDERS, order_id)
        return OrderResponse.model_validate(doc) if doc else None

    async def list_orders(self, store_id: str | None = None) -> list[OrderResponse]:
        docs = await self._read(ORDERS)
        if store_id is not None:
            docs = [
                d for d in docs if any(i.get("store_id") == store_id for i in d.get("items", []))
            ]
        return [OrderResponse.model_validate(d) for d in _newest_first(docs)]

    async def update_order_status(
        self, order_id: str, status: OrderStatus
    ) -> OrderResponse | None:
        doc = await self._update(ORDERS, order_id, {"status": status.value})
        return OrderResponse.model_validate(doc) if doc else None

    # --- Health ---

    async def ping(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        if not os.access(self.data_dir, os.W_OK):
            raise PermissionError(f"Data directory {self.data_dir} is not writable")


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, datetime):
        return value.isoformat()
    if hasattr(value, "value"):  # Enum
        return value.value
    return str(value)  # Decimal and anything else with a faithful str()
