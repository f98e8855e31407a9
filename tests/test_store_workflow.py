"""End-to-end seller lifecycle and store isolation.

A shopper applies for a store, an admin verifies it, the new seller lists
products, a customer orders, and revoking the store takes it off the
public catalog again. Two sellers never see or change each other's data.
"""

from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

from httpx import AsyncClient

from storefront.models.user import Role
from storefront.schemas.store import StoreResponse
from storefront.schemas.user import UserResponse
from tests.conftest import SELLER_INBOX


class TestSellerLifecycle:
    async def test_apply_verify_sell_revoke(
        self,
        client: AsyncClient,
        admin: UserResponse,
        login: Callable[..., None],
        email_service: MagicMock,
        repo: Any,
    ) -> None:
        # Shopper signs in and applies
        login("kofi", "kofi@example.com")
        response = await client.post("/api/v1/users/me", json={"display_name": "Kofi"})
        assert response.json()["role"] == "user"

        response = await client.post(
            "/api/v1/stores",
            json={"store_name": "Kofi Crafts", "contact_email": "crafts@example.com"},
        )
        assert response.status_code == 201
        store_id = response.json()["id"]

        # Pending: cannot list products yet, and not public
        product = {
            "store_id": store_id,
            "name": "Carved Stool",
            "description": "Hand carved",
            "price": "80.00",
            "image": "https://example.com/stool.jpg",
            "category": "Home",
            "stock": 4,
        }
        assert (await client.post("/api/v1/products", json=product)).status_code == 403
        assert (await client.get(f"/api/v1/stores/{store_id}")).status_code == 404

        # Admin verifies
        login(admin.id, admin.email)
        response = await client.post(f"/api/v1/admin/stores/{store_id}/verify")
        assert response.status_code == 200
        assert email_service.send.await_args.kwargs["to"] == "crafts@example.com"

        # Now a seller
        login("kofi", "kofi@example.com")
        profile = (await client.get("/api/v1/users/me")).json()
        assert profile["user"]["role"] == "seller"
        assert profile["user"]["store_id"] == store_id

        response = await client.post("/api/v1/products", json=product)
        assert response.status_code == 201
        product_id = response.json()["id"]

        listing = (await client.get("/api/v1/products")).json()
        assert [p["id"] for p in listing["items"]] == [product_id]

        # A customer orders
        email_service.send.reset_mock()
        response = await client.post(
            "/api/v1/orders",
            json={
                "customer": {
                    "name": "Ama",
                    "email": "ama@example.com",
                    "address": "2 Ring Road",
                },
                "items": [
                    {
                        "product_id": product_id,
                        "product_name": "Carved Stool",
                        "price": "80.00",
                        "quantity": 1,
                        "store_id": store_id,
                    }
                ],
                "total": "80.00",
            },
        )
        assert response.status_code == 201
        order_id = response.json()["order_id"]
        seller_call = email_service.send.await_args_list[0]
        assert seller_call.kwargs["to"] == [SELLER_INBOX, "crafts@example.com"]

        orders = (await client.get("/api/v1/orders")).json()
        assert [o["id"] for o in orders["items"]] == [order_id]

        # Admin revokes: store leaves the catalog and the owner is a user again
        login(admin.id, admin.email)
        response = await client.post(f"/api/v1/admin/stores/{store_id}/revoke")
        assert response.status_code == 200

        assert (await client.get("/api/v1/products")).json()["total"] == 0
        owner = await repo.get_user("kofi")
        assert owner.role == Role.USER
        assert owner.store_id is None


class TestStoreIsolation:
    async def test_sellers_are_isolated(
        self,
        client: AsyncClient,
        as_seller: StoreResponse,
        store_factory: Callable[..., Any],
        user_factory: Callable[..., Any],
        product_factory: Callable[..., Any],
        order_factory: Callable[..., Any],
        login: Callable[..., None],
    ) -> None:
        rival_store = await store_factory(owner_uid="rival", store_name="Rival")
        await user_factory(uid="rival", role=Role.SELLER, store_id=rival_store.id)
        rival_product = await product_factory(store_id=rival_store.id)
        await order_factory(items=[(rival_product.id, rival_store.id, "10.00", 1)])

        # Seller A cannot touch the rival's catalog, store, or orders
        response = await client.put(f"/api/v1/products/{rival_product.id}", json={"stock": 0})
        assert response.status_code == 403
        response = await client.delete(f"/api/v1/products/{rival_product.id}")
        assert response.status_code == 403
        response = await client.patch(
            f"/api/v1/stores/{rival_store.id}", json={"store_name": "Mine now"}
        )
        assert response.status_code == 403
        assert (await client.get("/api/v1/orders")).json()["items"] == []

        # The rival sees their own order
        login("rival")
        assert (await client.get("/api/v1/orders")).json()["total"] == 1

        # And cannot touch seller A's store
        response = await client.patch(
            f"/api/v1/stores/{as_seller.id}", json={"store_name": "Mine now"}
        )
        assert response.status_code == 403
