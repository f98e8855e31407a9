"""Seed script for local development.

Creates, in whichever storage backend is configured:
- 1 admin user
- 1 seller with a verified store
- the default product catalog in that store

Re-running is safe: existing records are reused and the catalog is only
seeded into an empty store.

Usage:
    uv run python -m scripts.seed_store
"""

import asyncio

from storefront.core.deps import get_repository
from storefront.models.store import StoreStatus
from storefront.models.user import Role
from storefront.repositories import Repository
from storefront.schemas.store import StoreApplication, StoreResponse
from storefront.schemas.user import UserResponse
from storefront.services.catalog_service import CatalogService
from storefront.services.store_service import StoreService

ADMIN_UID = "seed-admin"
ADMIN_EMAIL = "admin@example.com"
SELLER_UID = "seed-seller"
SELLER_EMAIL = "seller@example.com"
STORE_NAME = "Seed Market"


async def seed(repo: Repository) -> tuple[UserResponse, StoreResponse, int]:
    admin = await repo.upsert_user(
        ADMIN_UID, {"email": ADMIN_EMAIL, "display_name": "Seed Admin", "role": Role.ADMIN}
    )

    stores = StoreService(repo)
    store = await repo.get_store_by_owner(SELLER_UID)
    if store is None:
        seller = UserResponse(id=SELLER_UID, email=SELLER_EMAIL, display_name="Seed Seller")
        store = await stores.apply(
            seller,
            StoreApplication(store_name=STORE_NAME, contact_email=SELLER_EMAIL, currency="USD"),
        )
    if store.status is StoreStatus.PENDING:
        # No StoreVerified event: nobody needs an email for seed data
        store, _ = await stores.verify(store.id)

    created = await CatalogService(repo).initialize(admin, store.id)
    return admin, store, len(created)


async def main() -> None:
    async for repo in get_repository():
        admin, store, product_count = await seed(repo)

        print("=" * 60)
        print("  Storefront seed data created successfully!")
        print("=" * 60)
        print()
        print(f"  Backend:         {repo.backend_name}")
        print(f"  Admin uid:       {admin.id} ({admin.email})")
        print(f"  Seller uid:      {SELLER_UID} ({SELLER_EMAIL})")
        print(f"  Store ID:        {store.id} [{store.status.value}]")
        print(f"  Products added:  {product_count}")
        print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
