"""Product catalog API endpoints."""

from fastapi import APIRouter, Query, status

from storefront.core.deps import CurrentAccount, RepositoryDep
from storefront.schemas.common import ListResponse, PaginatedResponse
from storefront.schemas.product import (
    CatalogRevisionResponse,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)
from storefront.services.catalog_service import CatalogService, catalog_revision

router = APIRouter()


@router.get("", response_model=PaginatedResponse[ProductResponse])
async def list_products(
    repo: RepositoryDep,
    store_id: str | None = Query(None, description="Only products of this store"),
    category: str | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
) -> PaginatedResponse[ProductResponse]:
    """List products of verified stores, newest first."""
    products = await CatalogService(repo).list_public(store_id=store_id, category=category)

    total = len(products)
    offset = (page - 1) * page_size
    pages = (total + page_size - 1) // page_size

    return PaginatedResponse[ProductResponse](
        items=products[offset : offset + page_size],
        total=total,
        page=page,
        page_size=page_size,
        pages=pages,
    )


@router.get("/revision", response_model=CatalogRevisionResponse)
async def get_catalog_revision() -> CatalogRevisionResponse:
    """Current catalog revision; changes whenever any product changes."""
    return catalog_revision.snapshot()


@router.post(
    "/initialize",
    response_model=ListResponse[ProductResponse],
    summary="Seed default products",
)
async def initialize_products(
    account: CurrentAccount,
    repo: RepositoryDep,
    store_id: str = Query(..., description="Store to seed"),
) -> ListResponse[ProductResponse]:
    """Seed the default catalog into an empty store (admin only)."""
    created = await CatalogService(repo).initialize(account, store_id)
    return ListResponse[ProductResponse](items=created, total=len(created))


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, repo: RepositoryDep) -> ProductResponse:
    return await CatalogService(repo).get_public_product(product_id)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    data: ProductCreate,
    account: CurrentAccount,
    repo: RepositoryDep,
) -> ProductResponse:
    """Create a product in a store the caller manages."""
    return await CatalogService(repo).create(account, data)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    data: ProductUpdate,
    account: CurrentAccount,
    repo: RepositoryDep,
) -> ProductResponse:
    """Update only the provided product fields."""
    return await CatalogService(repo).update(account, product_id, data)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    account: CurrentAccount,
    repo: RepositoryDep,
) -> None:
    await CatalogService(repo).delete(account, product_id)
