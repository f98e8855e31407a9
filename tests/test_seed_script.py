"""Tests for the development seed script."""

from typing import Any

from scripts.seed_store import ADMIN_UID, SELLER_UID, seed
from storefront.models.store import StoreStatus
from storefront.models.user import Role
from storefront.services.catalog_service import DEFAULT_PRODUCTS


class TestSeedStore:
    async def test_creates_admin_seller_and_catalog(self, repo: Any) -> None:
        admin, store, product_count = await seed(repo)

        assert admin.role == Role.ADMIN
        assert store.status == StoreStatus.VERIFIED
        assert product_count == len(DEFAULT_PRODUCTS)

        seller = await repo.get_user(SELLER_UID)
        assert seller.role == Role.SELLER
        assert seller.store_id == store.id

    async def test_rerun_reuses_existing_records(self, repo: Any) -> None:
        _, first_store, _ = await seed(repo)
        _, second_store, product_count = await seed(repo)

        assert second_store.id == first_store.id
        assert product_count == 0
        assert len(await repo.list_stores()) == 1
        assert len(await repo.list_products(store_ids=[first_store.id])) == len(DEFAULT_PRODUCTS)
        assert (await repo.get_user(ADMIN_UID)).role == Role.ADMIN
