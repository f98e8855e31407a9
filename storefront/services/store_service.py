"""Store registry and the admin approval workflow."""

import logging
from typing import Any

from storefront.core.currencies import is_supported
from storefront.core.events import EventBus, ProductsChanged, StoreVerified, event_bus
from storefront.core.exceptions import (
    Conflict,
    InvalidTransition,
    NotFound,
    PermissionDenied,
    ValidationFailed,
)
from storefront.core.permissions import can_edit_store_profile
from storefront.models.store import StoreStatus
from storefront.models.user import Role
from storefront.repositories import Repository
from storefront.schemas.store import StoreApplication, StoreResponse, StoreUpdate
from storefront.schemas.user import UserResponse

logger = logging.getLogger(__name__)

# Allowed status changes; rejected is terminal
STORE_TRANSITIONS: dict[StoreStatus, frozenset[StoreStatus]] = {
    StoreStatus.PENDING: frozenset({StoreStatus.VERIFIED, StoreStatus.REJECTED}),
    StoreStatus.VERIFIED: frozenset({StoreStatus.PENDING}),
    StoreStatus.REJECTED: frozenset(),
}


def validate_currency(code: str) -> str:
    code = code.upper()
    if not is_supported(code):
        raise ValidationFailed(f"Unsupported currency: {code}", {"currency": code})
    return code


class StoreService:
    """Business logic for seller stores."""

    def __init__(self, repo: Repository, bus: EventBus = event_bus) -> None:
        self.repo = repo
        self.bus = bus

    async def get_store(self, store_id: str) -> StoreResponse:
        store = await self.repo.get_store(store_id)
        if store is None:
            raise NotFound("Store not found", {"store_id": store_id})
        return store

    async def get_public_store(self, store_id: str) -> StoreResponse:
        """Get a store shoppers may see; unverified stores look absent."""
        store = await self.repo.get_store(store_id)
        if store is None or store.status is not StoreStatus.VERIFIED:
            raise NotFound("Store not found", {"store_id": store_id})
        return store

    async def list_stores(self, status: StoreStatus | None = None) -> list[StoreResponse]:
        return await self.repo.list_stores(status=status)

    async def get_own_store(self, account: UserResponse) -> StoreResponse:
        store = await self.repo.get_store_by_owner(account.id)
        if store is None:
            raise NotFound("You have not applied for a store yet")
        return store

    async def apply(self, account: UserResponse, data: StoreApplication) -> StoreResponse:
        """Create a pending store for the caller.

        The caller's user record is created if missing so the new store
        never starts out orphaned.
        """
        existing = await self.repo.get_store_by_owner(account.id)
        if existing is not None:
            raise Conflict(
                "You already have a store application",
                {"store_id": existing.id, "status": existing.status.value},
            )

        store = await self.repo.create_store(
            {
                "owner_uid": account.id,
                "store_name": data.store_name,
                "contact_email": str(data.contact_email),
                "currency": validate_currency(data.currency),
                "status": StoreStatus.PENDING,
                "application_details": data.application_details.model_dump(mode="json"),
            }
        )
        if await self.repo.get_user(account.id) is None:
            await self.repo.upsert_user(
                account.id,
                {
                    "email": account.email or store.contact_email,
                    "display_name": account.display_name,
                },
            )

        logger.info("Store application %s submitted by %s", store.id, account.id)
        return store

    async def _transition(self, store_id: str, target: StoreStatus) -> StoreResponse:
        store = await self.get_store(store_id)
        if target not in STORE_TRANSITIONS[store.status]:
            raise InvalidTransition(
                f"Cannot change store status from {store.status.value} to {target.value}",
                {"from": store.status.value, "to": target.value},
            )
        updated = await self.repo.update_store(store_id, {"status": target})
        if updated is None:
            raise NotFound("Store not found", {"store_id": store_id})
        logger.info("Store %s: %s -> %s", store_id, store.status.value, target.value)
        return updated

    async def verify(self, store_id: str) -> tuple[StoreResponse, StoreVerified]:
        """Approve a pending store and make its owner a seller.

        Returns the store and the event to publish once the response is sent.
        """
        store = await self._transition(store_id, StoreStatus.VERIFIED)

        owner = await self.repo.get_user(store.owner_uid)
        fields: dict[str, Any] = {"store_id": store.id}
        if owner is None:
            fields |= {"email": store.contact_email, "role": Role.SELLER}
        elif owner.role is not Role.ADMIN:
            fields["role"] = Role.SELLER
        await self.repo.upsert_user(store.owner_uid, fields)

        event = StoreVerified(
            store_id=store.id,
            store_name=store.store_name,
            contact_email=store.contact_email,
        )
        return store, event

    async def reject(self, store_id: str) -> StoreResponse:
        return await self._transition(store_id, StoreStatus.REJECTED)

    async def revoke(self, store_id: str) -> StoreResponse:
        """Send a verified store back to pending and demote its owner."""
        store = await self._transition(store_id, StoreStatus.PENDING)
        await self._detach_owner(store)
        return store

    async def _detach_owner(self, store: StoreResponse) -> None:
        owner = await self.repo.get_user(store.owner_uid)
        if owner is None:
            return
        changes: dict[str, Any] = {}
        if owner.store_id == store.id:
            changes["store_id"] = None
        if owner.role is Role.SELLER:
            changes["role"] = Role.USER
        if changes:
            await self.repo.upsert_user(owner.id, changes)

    async def update_store(
        self, account: UserResponse, store_id: str, data: StoreUpdate
    ) -> StoreResponse:
        store = await self.get_store(store_id)
        if not can_edit_store_profile(account, store):
            raise PermissionDenied("You can only edit your own store", {"store_id": store_id})

        changes = data.model_dump(exclude_unset=True, mode="json")
        if changes.get("currency") is not None:
            changes["currency"] = validate_currency(changes["currency"])
        # Nested settings merge into what is stored
        for section in ("branding", "shipping_policy"):
            if changes.get(section) is not None:
                current = getattr(store, section).model_dump(mode="json")
                changes[section] = current | changes[section]
        changes = {k: v for k, v in changes.items() if v is not None}
        if not changes:
            return store

        updated = await self.repo.update_store(store_id, changes)
        if updated is None:
            raise NotFound("Store not found", {"store_id": store_id})
        return updated

    async def delete_store(self, store_id: str) -> int:
        """Delete a store with all of its products.

        Products go first so that no product is left pointing at a missing
        store if the store delete fails. Returns the number of products
        removed.
        """
        store = await self.get_store(store_id)
        removed = await self.repo.delete_products_for_store(store_id)
        await self.repo.delete_store(store_id)
        await self._detach_owner(store)

        logger.info("Deleted store %s with %d products", store_id, removed)
        if removed:
            await self.bus.publish(ProductsChanged(store_id=store_id, action="deleted"))
        return removed
