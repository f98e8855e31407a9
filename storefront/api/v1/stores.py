"""Seller store endpoints: application, public store pages, settings."""

from fastapi import APIRouter, status

from storefront.core.deps import CurrentAccount, RepositoryDep
from storefront.models.store import StoreStatus
from storefront.schemas.common import ListResponse
from storefront.schemas.store import (
    PublicStoreResponse,
    StoreApplication,
    StoreResponse,
    StoreUpdate,
)
from storefront.services.store_service import StoreService

router = APIRouter()


@router.post(
    "",
    response_model=StoreResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Apply for a store",
    description=(
        "Submit a seller application. The store starts out pending until an admin verifies it."
    ),
)
async def apply_for_store(
    data: StoreApplication,
    account: CurrentAccount,
    repo: RepositoryDep,
) -> StoreResponse:
    return await StoreService(repo).apply(account, data)


@router.get(
    "",
    response_model=ListResponse[PublicStoreResponse],
    summary="List verified stores",
)
async def list_verified_stores(repo: RepositoryDep) -> ListResponse[PublicStoreResponse]:
    stores = await StoreService(repo).list_stores(status=StoreStatus.VERIFIED)
    return ListResponse[PublicStoreResponse](
        items=[PublicStoreResponse.model_validate(s) for s in stores],
        total=len(stores),
    )


@router.get(
    "/me",
    response_model=StoreResponse,
    summary="Get my store",
    description="Get the caller's own store, whatever its status.",
)
async def get_my_store(account: CurrentAccount, repo: RepositoryDep) -> StoreResponse:
    return await StoreService(repo).get_own_store(account)


@router.get(
    "/{store_id}",
    response_model=PublicStoreResponse,
    summary="Get store",
    description="Public store page data. Only verified stores are visible.",
)
async def get_store(store_id: str, repo: RepositoryDep) -> PublicStoreResponse:
    store = await StoreService(repo).get_public_store(store_id)
    return PublicStoreResponse.model_validate(store)


@router.patch(
    "/{store_id}",
    response_model=StoreResponse,
    summary="Update store",
    description="Update store name, contact email, currency, branding or shipping policy.",
)
async def update_store(
    store_id: str,
    data: StoreUpdate,
    account: CurrentAccount,
    repo: RepositoryDep,
) -> StoreResponse:
    """Update only the provided fields; branding and shipping merge."""
    return await StoreService(repo).update_store(account, store_id, data)
