"""Tests for the cart reducer and the stateless cart endpoint.

Covers:
- Totals over sequences of ADD_ITEM from one store
- Store switching (cart replaced, warning emitted before dispatch)
- REMOVE_ITEM / UPDATE_QUANTITY / CLEAR_CART
- Purity of cart_reducer
- POST /api/v1/cart/actions
"""

from decimal import Decimal
from typing import Any

import pytest
from httpx import AsyncClient
from pydantic import TypeAdapter, ValidationError

from storefront.services.cart.reducer import (
    Cart,
    apply_action,
    cart_reducer,
    cart_total,
)
from storefront.services.cart.state import (
    AddItem,
    CartAction,
    CartProduct,
    CartState,
    ClearCart,
    RemoveItem,
    UpdateQuantity,
)


def product(product_id: str, store_id: str = "s1", price: str = "10.00") -> CartProduct:
    return CartProduct(
        id=product_id, store_id=store_id, name=f"Product {product_id}", price=Decimal(price)
    )


def add(p: CartProduct) -> AddItem:
    return AddItem(product=p, currency="USD")


# ---------------------------------------------------------------------------
# ADD_ITEM
# ---------------------------------------------------------------------------


class TestAddItem:
    def test_add_to_empty_cart(self) -> None:
        state = cart_reducer(CartState(), add(product("a")))
        assert len(state.items) == 1
        assert state.items[0].quantity == 1
        assert state.total == Decimal("10.00")

    def test_add_existing_product_increments_quantity(self) -> None:
        state = CartState()
        for _ in range(3):
            state = cart_reducer(state, add(product("a")))
        assert len(state.items) == 1
        assert state.items[0].quantity == 3
        assert state.total == Decimal("30.00")

    @pytest.mark.parametrize(
        "adds",
        [
            [("a", "1.99")],
            [("a", "1.99"), ("b", "2.01"), ("a", "1.99")],
            [("a", "0.10"), ("b", "0.20"), ("c", "0.30"), ("c", "0.30"), ("b", "0.20")],
            [("x", "299.99")] * 7,
        ],
    )
    def test_total_is_sum_of_price_times_quantity(self, adds: list[tuple[str, str]]) -> None:
        """Same-store adds: total always equals sum(price x quantity)."""
        state = CartState()
        for product_id, price in adds:
            state = cart_reducer(state, add(product(product_id, price=price)))
            expected = sum(
                (item.product.price * item.quantity for item in state.items), Decimal("0")
            )
            assert state.total == expected

        assert state.total == sum((Decimal(price) for _, price in adds), Decimal("0"))

    def test_add_from_other_store_replaces_cart(self) -> None:
        """[A(S1, 10)] then ADD_ITEM(B, S2) -> [B], total = B.price."""
        state = cart_reducer(CartState(), add(product("a", "s1", "10.00")))
        state = cart_reducer(state, add(product("b", "s2", "7.50")))

        assert [item.product.id for item in state.items] == ["b"]
        assert state.items[0].quantity == 1
        assert state.total == Decimal("7.50")
        assert state.store_id == "s2"

    def test_cart_holds_one_store(self) -> None:
        state = CartState()
        for p in [product("a", "s1"), product("b", "s1"), product("c", "s2"), product("d", "s2")]:
            state = cart_reducer(state, add(p))
            assert len({item.product.store_id for item in state.items}) == 1

    def test_add_keeps_currency(self) -> None:
        state = cart_reducer(CartState(), AddItem(product=product("a"), currency="GHS"))
        assert state.items[0].currency == "GHS"


# ---------------------------------------------------------------------------
# REMOVE_ITEM / UPDATE_QUANTITY / CLEAR_CART
# ---------------------------------------------------------------------------


class TestOtherActions:
    @pytest.fixture
    def two_items(self) -> CartState:
        state = cart_reducer(CartState(), add(product("a", price="10.00")))
        state = cart_reducer(state, add(product("a", price="10.00")))
        return cart_reducer(state, add(product("b", price="5.00")))

    def test_remove_item(self, two_items: CartState) -> None:
        state = cart_reducer(two_items, RemoveItem(product_id="a"))
        assert [item.product.id for item in state.items] == ["b"]
        assert state.total == Decimal("5.00")

    def test_remove_missing_item_is_noop(self, two_items: CartState) -> None:
        state = cart_reducer(two_items, RemoveItem(product_id="zzz"))
        assert state == two_items

    def test_update_quantity(self, two_items: CartState) -> None:
        state = cart_reducer(two_items, UpdateQuantity(product_id="b", quantity=4))
        assert state.find("b") is not None
        assert state.find("b").quantity == 4  # type: ignore[union-attr]
        assert state.total == Decimal("40.00")

    def test_update_quantity_to_zero_removes_item(self) -> None:
        """UPDATE_QUANTITY(A, 0) on [A(qty=2)] -> []."""
        state = cart_reducer(CartState(), add(product("a")))
        state = cart_reducer(state, add(product("a")))
        state = cart_reducer(state, UpdateQuantity(product_id="a", quantity=0))
        assert state.items == []
        assert state.total == Decimal("0")

    @pytest.mark.parametrize("quantity", [0, -1, -50])
    def test_never_holds_non_positive_quantity(self, two_items: CartState, quantity: int) -> None:
        state = cart_reducer(two_items, UpdateQuantity(product_id="a", quantity=quantity))
        assert state.find("a") is None
        assert all(item.quantity > 0 for item in state.items)

    def test_clear_cart(self, two_items: CartState) -> None:
        state = cart_reducer(two_items, ClearCart())
        assert state.items == []
        assert state.total == Decimal("0")

    def test_reducer_does_not_mutate_input(self, two_items: CartState) -> None:
        before = two_items.model_copy(deep=True)
        cart_reducer(two_items, add(product("a")))
        cart_reducer(two_items, UpdateQuantity(product_id="b", quantity=9))
        cart_reducer(two_items, add(product("z", "other-store")))
        assert two_items == before

    def test_empty_cart_total_is_zero(self) -> None:
        assert cart_total([]) == Decimal("0")

    def test_unknown_action_is_rejected(self) -> None:
        adapter: TypeAdapter[Any] = TypeAdapter(CartAction)
        with pytest.raises(ValidationError):
            adapter.validate_python({"type": "APPLY_COUPON", "code": "FREE"})


# ---------------------------------------------------------------------------
# Cart wrapper and warnings
# ---------------------------------------------------------------------------


class TestCartWrapper:
    def test_store_switch_callback_runs_before_dispatch(self) -> None:
        seen: list[tuple[int, str]] = []

        def on_switch(state: CartState, incoming: CartProduct) -> None:
            seen.append((len(state.items), incoming.store_id))

        cart = Cart(on_store_switch=on_switch)
        cart.add_item(product("a", "s1"))
        cart.add_item(product("b", "s1"))
        assert seen == []

        cart.add_item(product("c", "s2"))
        assert seen == [(2, "s2")]
        assert [item.product.id for item in cart.state.items] == ["c"]

    def test_helpers(self) -> None:
        cart = Cart()
        cart.add_item(product("a", price="3.00"))
        cart.update_quantity("a", 3)
        assert cart.total == Decimal("9.00")
        cart.remove_item("a")
        assert cart.total == Decimal("0")
        cart.add_item(product("b"))
        cart.clear()
        assert cart.state.items == []

    def test_apply_action_reports_store_switch(self) -> None:
        state = cart_reducer(CartState(), add(product("a", "s1")))
        new_state, warnings = apply_action(state, add(product("b", "s2")))
        assert len(warnings) == 1
        assert "s2" in warnings[0]
        assert new_state.store_id == "s2"

    def test_apply_action_same_store_has_no_warning(self) -> None:
        state = cart_reducer(CartState(), add(product("a", "s1")))
        _, warnings = apply_action(state, add(product("b", "s1")))
        assert warnings == []


# ---------------------------------------------------------------------------
# POST /api/v1/cart/actions
# ---------------------------------------------------------------------------


class TestCartEndpoint:
    async def test_add_item(self, plain_client: AsyncClient) -> None:
        response = await plain_client.post(
            "/api/v1/cart/actions",
            json={
                "action": {
                    "type": "ADD_ITEM",
                    "product": {"id": "p1", "store_id": "s1", "name": "Honey", "price": "12.99"},
                    "currency": "USD",
                }
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["warnings"] == []
        assert len(data["state"]["items"]) == 1
        assert Decimal(data["state"]["total"]) == Decimal("12.99")

    async def test_store_switch_returns_warning(self, plain_client: AsyncClient) -> None:
        state = {
            "items": [
                {
                    "product": {"id": "p1", "store_id": "s1", "name": "Honey", "price": "12.99"},
                    "quantity": 2,
                    "currency": "USD",
                }
            ],
            "total": "25.98",
        }
        response = await plain_client.post(
            "/api/v1/cart/actions",
            json={
                "state": state,
                "action": {
                    "type": "ADD_ITEM",
                    "product": {"id": "p2", "store_id": "s2", "name": "Bottle", "price": "19.99"},
                },
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert len(data["warnings"]) == 1
        assert [i["product"]["id"] for i in data["state"]["items"]] == ["p2"]
        assert Decimal(data["state"]["total"]) == Decimal("19.99")

    async def test_unknown_action_returns_422(self, plain_client: AsyncClient) -> None:
        response = await plain_client.post(
            "/api/v1/cart/actions",
            json={"action": {"type": "EMPTY_TRASH"}},
        )
        assert response.status_code == 422

    @pytest.mark.parametrize(
        "items",
        [
            [("p1", "s1"), ("p2", "s2")],
            [("p1", "s1"), ("p1", "s1")],
        ],
        ids=["mixed_stores", "repeated_product"],
    )
    async def test_inconsistent_cart_returns_422(
        self, plain_client: AsyncClient, items: list[tuple[str, str]]
    ) -> None:
        state = {
            "items": [
                {
                    "product": {"id": pid, "store_id": sid, "name": "Honey", "price": "10.00"},
                    "quantity": 2,
                }
                for pid, sid in items
            ],
        }
        response = await plain_client.post(
            "/api/v1/cart/actions",
            json={"state": state, "action": {"type": "REMOVE_ITEM", "product_id": "zzz"}},
        )
        assert response.status_code == 422


class TestCartStateValidation:
    def test_mixed_stores_rejected(self) -> None:
        with pytest.raises(ValidationError, match="one store"):
            CartState.model_validate(
                {
                    "items": [
                        {"product": product("a", "s1").model_dump(), "quantity": 1},
                        {"product": product("b", "s2").model_dump(), "quantity": 1},
                    ]
                }
            )

    def test_repeated_product_rejected(self) -> None:
        line = {"product": product("a").model_dump(), "quantity": 1}
        with pytest.raises(ValidationError, match="more than once"):
            CartState.model_validate({"items": [line, line]})
