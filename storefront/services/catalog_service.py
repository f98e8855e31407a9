"""Product catalog: public listing, seller/admin CRUD, default seeding."""

import logging
from datetime import datetime
from decimal import Decimal

from storefront.core.events import EventBus, ProductsChanged, event_bus
from storefront.core.exceptions import NotFound, ValidationFailed
from storefront.core.permissions import require_role, require_store_manager
from storefront.models.store import StoreStatus
from storefront.models.user import Role
from storefront.repositories import Repository
from storefront.schemas.product import (
    REQUIRED_PRODUCT_FIELDS,
    CatalogRevisionResponse,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)
from storefront.schemas.user import UserResponse

logger = logging.getLogger(__name__)

DEFAULT_PRODUCTS: tuple[dict[str, object], ...] = (
    {
        "name": "Innovative Solar Charger",
        "description": (
            "A portable solar charger designed for rural communities. Provides "
            "reliable power for mobile devices and small appliances."
        ),
        "price": Decimal("299.99"),
        "image": "https://images.unsplash.com/photo-1509391366360-2e959784a276?w=400&h=400&fit=crop",
        "category": "Technology",
        "stock": 50,
    },
    {
        "name": "Organic Shea Butter Cream",
        "description": (
            "Handcrafted shea butter cream made from locally sourced ingredients. "
            "Perfect for skin care and hair treatment."
        ),
        "price": Decimal("24.99"),
        "image": "https://images.unsplash.com/photo-1556228720-195a672e8a03?w=400&h=400&fit=crop",
        "category": "Beauty",
        "stock": 100,
    },
    {
        "name": "Recycled Plastic Bags",
        "description": (
            "Eco-friendly bags made from recycled plastic materials. Durable and "
            "stylish for everyday use."
        ),
        "price": Decimal("15.99"),
        "image": "https://images.unsplash.com/photo-1597481499750-3e6b22637e12?w=400&h=400&fit=crop",
        "category": "Fashion",
        "stock": 75,
    },
    {
        "name": "Traditional Bead Jewelry",
        "description": (
            "Handmade traditional bead jewelry crafted by local artisans. Each "
            "piece tells a unique story."
        ),
        "price": Decimal("45.99"),
        "image": "https://images.unsplash.com/photo-1515562141207-7a88fb7ce338?w=400&h=400&fit=crop",
        "category": "Jewelry",
        "stock": 30,
    },
    {
        "name": "Local Honey",
        "description": (
            "Pure, natural honey harvested from local beekeepers. Rich in flavor "
            "and health benefits."
        ),
        "price": Decimal("12.99"),
        "image": "https://images.unsplash.com/photo-1587049352846-4a222e784d38?w=400&h=400&fit=crop",
        "category": "Food",
        "stock": 60,
    },
    {
        "name": "Bamboo Water Bottle",
        "description": (
            "Sustainable bamboo water bottle with natural antibacterial "
            "properties. Perfect for eco-conscious consumers."
        ),
        "price": Decimal("19.99"),
        "image": "https://images.unsplash.com/photo-1602143407151-7111542de6e8?w=400&h=400&fit=crop",
        "category": "Lifestyle",
        "stock": 40,
    },
)


class CatalogRevision:
    """Counter bumped on every ProductsChanged event.

    Polling clients compare revisions instead of refetching the catalog.
    The counter is per process and starts at zero on boot.
    """

    def __init__(self) -> None:
        self.revision = 0
        self.changed_at: datetime | None = None

    async def on_products_changed(self, event: ProductsChanged) -> None:
        self.revision += 1
        self.changed_at = event.occurred_at
        logger.debug(
            "Catalog revision %d (%s %s)", self.revision, event.action, event.store_id
        )

    def snapshot(self) -> CatalogRevisionResponse:
        return CatalogRevisionResponse(revision=self.revision, changed_at=self.changed_at)


catalog_revision = CatalogRevision()


class CatalogService:
    """Business logic for catalog products."""

    def __init__(self, repo: Repository, bus: EventBus = event_bus) -> None:
        self.repo = repo
        self.bus = bus

    async def list_public(
        self,
        store_id: str | None = None,
        category: str | None = None,
    ) -> list[ProductResponse]:
        """List products of verified stores, newest first."""
        verified = {s.id for s in await self.repo.list_stores(status=StoreStatus.VERIFIED)}
        if store_id is not None:
            if store_id not in verified:
                return []
            verified = {store_id}
        return await self.repo.list_products(store_ids=verified, category=category)

    async def get_product(self, product_id: str) -> ProductResponse:
        product = await self.repo.get_product(product_id)
        if product is None:
            raise NotFound("Product not found", {"product_id": product_id})
        return product

    async def get_public_product(self, product_id: str) -> ProductResponse:
        """Get a product shoppers may see; products of unverified stores look absent."""
        product = await self.repo.get_product(product_id)
        store = await self.repo.get_store(product.store_id) if product else None
        if product is None or store is None or store.status is not StoreStatus.VERIFIED:
            raise NotFound("Product not found", {"product_id": product_id})
        return product

    async def create(self, account: UserResponse, data: ProductCreate) -> ProductResponse:
        missing = [
            field for field in REQUIRED_PRODUCT_FIELDS if getattr(data, field) in (None, "")
        ]
        store_id = data.store_id
        if missing or store_id is None:
            raise ValidationFailed("Missing required fields", {"missing": missing})

        if await self.repo.get_store(store_id) is None:
            raise NotFound("Store not found", {"store_id": store_id})
        require_store_manager(account, store_id)

        product = await self.repo.create_product(data.model_dump())
        logger.info("Product %s created in store %s", product.id, product.store_id)
        await self.bus.publish(
            ProductsChanged(store_id=product.store_id, product_ids=(product.id,), action="created")
        )
        return product

    async def update(
        self, account: UserResponse, product_id: str, data: ProductUpdate
    ) -> ProductResponse:
        product = await self.get_product(product_id)
        require_store_manager(account, product.store_id)

        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        if not changes:
            return product

        updated = await self.repo.update_product(product_id, changes)
        if updated is None:
            raise NotFound("Product not found", {"product_id": product_id})
        await self.bus.publish(
            ProductsChanged(store_id=updated.store_id, product_ids=(updated.id,), action="updated")
        )
        return updated

    async def delete(self, account: UserResponse, product_id: str) -> None:
        product = await self.get_product(product_id)
        require_store_manager(account, product.store_id)

        if not await self.repo.delete_product(product_id):
            raise NotFound("Product not found", {"product_id": product_id})
        logger.info("Product %s deleted from store %s", product_id, product.store_id)
        await self.bus.publish(
            ProductsChanged(store_id=product.store_id, product_ids=(product_id,), action="deleted")
        )

    async def initialize(self, account: UserResponse, store_id: str) -> list[ProductResponse]:
        """Seed the default catalog into an empty store.

        Does nothing if the store already has products.
        """
        require_role(account, Role.ADMIN)
        if await self.repo.get_store(store_id) is None:
            raise NotFound("Store not found", {"store_id": store_id})

        if await self.repo.list_products(store_ids=[store_id]):
            logger.info("Store %s already has products, skipping seed", store_id)
            return []

        created = [
            await self.repo.create_product({**defaults, "store_id": store_id})
            for defaults in DEFAULT_PRODUCTS
        ]
        logger.info("Seeded %d default products into store %s", len(created), store_id)
        await self.bus.publish(
            ProductsChanged(
                store_id=store_id,
                product_ids=tuple(p.id for p in created),
                action="created",
            )
        )
        return created
