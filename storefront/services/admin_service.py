"""Admin maintenance: cascading user deletion, orphan cleanup, backups."""

import logging
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from storefront.core.events import EventBus, event_bus
from storefront.core.exceptions import NotFound, StorefrontError
from storefront.repositories import Repository
from storefront.schemas.admin import (
    DataExport,
    DataImport,
    DeleteUserResponse,
    ImportResult,
)
from storefront.schemas.product import ProductCreate
from storefront.schemas.user import UserResponse
from storefront.services.catalog_service import CatalogService
from storefront.services.store_service import StoreService

logger = logging.getLogger(__name__)


class AdminService:
    """Cross-entity operations reserved for admins.

    None of these run in a transaction. A failure part way through leaves
    the work done so far in place and propagates to the caller; running the
    operation again finishes the job.
    """

    def __init__(self, repo: Repository, bus: EventBus = event_bus) -> None:
        self.repo = repo
        self.stores = StoreService(repo, bus)
        self.catalog = CatalogService(repo, bus)

    async def delete_user(self, uid: str) -> DeleteUserResponse:
        """Delete a user, their stores and every product of those stores.

        Stores go before the user record, so an interruption can leave a
        user without a store but never a store without its owner.
        """
        user = await self.repo.get_user(uid)
        if user is None:
            raise NotFound("User not found", {"uid": uid})

        owned = [s for s in await self.repo.list_stores() if s.owner_uid == uid]
        removed = 0
        for store in owned:
            removed += await self.stores.delete_store(store.id)

        await self.repo.delete_user(uid)
        logger.info(
            "Deleted user %s with %d stores and %d products", uid, len(owned), removed
        )
        return DeleteUserResponse(
            uid=uid,
            deleted_store_ids=[s.id for s in owned],
            deleted_products=removed,
        )

    async def cleanup_orphaned_stores(self) -> int:
        """Delete every store whose owner has no user record.

        Returns the number of stores deleted.
        """
        user_ids = {u.id for u in await self.repo.list_users()}
        orphans = [s for s in await self.repo.list_stores() if s.owner_uid not in user_ids]
        for store in orphans:
            logger.info("Removing orphaned store %s (owner %s)", store.id, store.owner_uid)
            await self.stores.delete_store(store.id)
        return len(orphans)

    async def export_data(self) -> DataExport:
        return DataExport(
            products=await self.repo.list_products(),
            orders=await self.repo.list_orders(),
            stores=await self.repo.list_stores(),
            timestamp=datetime.now(UTC),
        )

    async def import_products(self, account: UserResponse, payload: DataImport) -> ImportResult:
        """Re-create products from an export; bad entries are skipped and counted."""
        imported = failed = 0
        for index, raw in enumerate(payload.products):
            candidate: dict[str, Any] = {
                k: v for k, v in raw.items() if k not in {"id", "created_at", "updated_at"}
            }
            if not candidate.get("store_id"):
                candidate["store_id"] = raw.get("storeId") or payload.default_store_id
            try:
                data = ProductCreate.model_validate(candidate)
                await self.catalog.create(account, data)
            except (ValidationError, StorefrontError) as e:
                failed += 1
                logger.warning("Skipping product %d (%s): %s", index, raw.get("name"), e)
            else:
                imported += 1

        logger.info("Import finished: %d imported, %d failed", imported, failed)
        return ImportResult(imported=imported, failed=failed)
