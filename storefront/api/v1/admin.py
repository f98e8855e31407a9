"""Admin endpoints: store approval, user management, maintenance."""

import logging

from fastapi import APIRouter, BackgroundTasks, Query

from storefront.core.deps import AdminAccount, Notifications, RepositoryDep
from storefront.core.events import event_bus
from storefront.models.store import StoreStatus
from storefront.schemas.admin import (
    CleanupResponse,
    DataExport,
    DataImport,
    DeleteUserResponse,
    EmailCheckResponse,
    ImportResult,
)
from storefront.schemas.common import ListResponse, MessageResponse
from storefront.schemas.store import StoreResponse
from storefront.schemas.user import UserResponse
from storefront.services.admin_service import AdminService
from storefront.services.store_service import StoreService
from storefront.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


# === Store approval ===


@router.get("/stores", response_model=ListResponse[StoreResponse])
async def list_stores(
    _admin: AdminAccount,
    repo: RepositoryDep,
    status: StoreStatus | None = Query(None, description="Filter by status"),
) -> ListResponse[StoreResponse]:
    stores = await StoreService(repo).list_stores(status=status)
    return ListResponse[StoreResponse](items=stores, total=len(stores))


@router.post("/stores/{store_id}/verify", response_model=StoreResponse)
async def verify_store(
    store_id: str,
    admin: AdminAccount,
    repo: RepositoryDep,
    background_tasks: BackgroundTasks,
) -> StoreResponse:
    """Verify a pending store and promote its owner to seller.

    The owner's notification email is sent after the response.
    """
    store, event = await StoreService(repo).verify(store_id)
    logger.info("Store %s verified by %s", store_id, admin.id)
    background_tasks.add_task(event_bus.publish, event)
    return store


@router.post("/stores/{store_id}/reject", response_model=StoreResponse)
async def reject_store(store_id: str, admin: AdminAccount, repo: RepositoryDep) -> StoreResponse:
    store = await StoreService(repo).reject(store_id)
    logger.info("Store %s rejected by %s", store_id, admin.id)
    return store


@router.post("/stores/{store_id}/revoke", response_model=StoreResponse)
async def revoke_store(store_id: str, admin: AdminAccount, repo: RepositoryDep) -> StoreResponse:
    """Return a verified store to pending and demote its owner."""
    store = await StoreService(repo).revoke(store_id)
    logger.info("Store %s revoked by %s", store_id, admin.id)
    return store


@router.delete("/stores/{store_id}", response_model=MessageResponse)
async def delete_store(store_id: str, _admin: AdminAccount, repo: RepositoryDep) -> MessageResponse:
    """Delete a store and all of its products."""
    removed = await StoreService(repo).delete_store(store_id)
    return MessageResponse(message=f"Store deleted with {removed} products")


@router.post("/cleanup-orphaned-stores", response_model=CleanupResponse)
async def cleanup_orphaned_stores(_admin: AdminAccount, repo: RepositoryDep) -> CleanupResponse:
    """Delete stores whose owner no longer has a user record."""
    deleted = await AdminService(repo).cleanup_orphaned_stores()
    return CleanupResponse(deleted=deleted)


# === Users ===


@router.get("/users", response_model=ListResponse[UserResponse])
async def list_users(_admin: AdminAccount, repo: RepositoryDep) -> ListResponse[UserResponse]:
    users = await UserService(repo).list_users()
    return ListResponse[UserResponse](items=users, total=len(users))


@router.delete("/users/{uid}", response_model=DeleteUserResponse)
async def delete_user(uid: str, _admin: AdminAccount, repo: RepositoryDep) -> DeleteUserResponse:
    """Delete a user together with their store and its products."""
    return await AdminService(repo).delete_user(uid)


# === Maintenance ===


@router.get("/export", response_model=DataExport)
async def export_data(_admin: AdminAccount, repo: RepositoryDep) -> DataExport:
    """Backup of products, orders and stores."""
    return await AdminService(repo).export_data()


@router.post("/import", response_model=ImportResult)
async def import_data(data: DataImport, admin: AdminAccount, repo: RepositoryDep) -> ImportResult:
    """Re-create products from an export payload."""
    return await AdminService(repo).import_products(admin, data)


@router.post("/test-email", response_model=EmailCheckResponse)
async def send_test_email(_admin: AdminAccount, notifications: Notifications) -> EmailCheckResponse:
    """Send a test email to the admin inbox and report the email configuration."""
    return await notifications.send_test_email()
