"""Order intake and management endpoints."""

from fastapi import APIRouter, BackgroundTasks, Request, status

from storefront.core.config import settings
from storefront.core.deps import CurrentAccount, RepositoryDep
from storefront.core.events import event_bus
from storefront.core.rate_limit import limiter
from storefront.schemas.common import ListResponse
from storefront.schemas.order import (
    OrderCreate,
    OrderCreatedResponse,
    OrderResponse,
    OrderStatusUpdate,
)
from storefront.services.order_service import OrderService

router = APIRouter()


@router.post("", response_model=OrderCreatedResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.order_rate_limit)
async def place_order(
    request: Request,  # noqa: ARG001 (required by slowapi)
    data: OrderCreate,
    repo: RepositoryDep,
    background_tasks: BackgroundTasks,
) -> OrderCreatedResponse:
    """Place an order from the cart.

    Seller and customer emails are sent after the response; a failed email
    never fails the order.
    """
    order, event = await OrderService(repo).place_order(data)
    background_tasks.add_task(event_bus.publish, event)
    return OrderCreatedResponse(
        message="Order placed successfully",
        order_id=order.id,
        order=order,
    )


@router.get("", response_model=ListResponse[OrderResponse])
async def list_orders(account: CurrentAccount, repo: RepositoryDep) -> ListResponse[OrderResponse]:
    """List all orders (admin) or orders containing the seller's products."""
    orders = await OrderService(repo).list_orders(account)
    return ListResponse[OrderResponse](items=orders, total=len(orders))


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, account: CurrentAccount, repo: RepositoryDep) -> OrderResponse:
    return await OrderService(repo).get_order(account, order_id)


@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    data: OrderStatusUpdate,
    account: CurrentAccount,
    repo: RepositoryDep,
) -> OrderResponse:
    return await OrderService(repo).update_status(account, order_id, data.status)
