"""Pytest configuration and fixtures for the storefront API test suite.

Provides:
- A repository for each storage backend (JSON files in a temp dir, and
  SQLite through aiosqlite); backend-dependent tests run against both
- Mock authentication (JWT bypass) with a switchable caller
- A mocked email transport with the event bus handlers subscribed
- Disabled rate limiting
- Factory fixtures for users, stores, products and orders
"""

from collections.abc import AsyncGenerator, Callable, Generator
from decimal import Decimal
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from storefront.core.auth import get_current_user
from storefront.core.config import settings
from storefront.core.deps import get_email_service, get_repository
from storefront.core.events import ProductsChanged, event_bus
from storefront.core.rate_limit import limiter
from storefront.main import app
from storefront.models.base import Base
from storefront.models.store import StoreStatus
from storefront.models.user import Role
from storefront.repositories import DocumentRepository, Repository, SqlRepository
from storefront.schemas.order import OrderResponse
from storefront.schemas.product import ProductResponse
from storefront.schemas.store import StoreResponse
from storefront.schemas.user import UserResponse
from storefront.services.catalog_service import catalog_revision
from storefront.services.email_service import EmailService
from storefront.services.notification_service import (
    NotificationService,
    register_notification_handlers,
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
TEST_USER_ID = "test-user-id"
TEST_USER_EMAIL = "test@example.com"
ADMIN_ID = "admin-uid"
ADMIN_EMAIL = "admin@example.com"
SELLER_ID = "seller-uid"
SELLER_EMAIL = "seller@example.com"
SELLER_INBOX = "orders@example.com"

# ---------------------------------------------------------------------------
# Disable rate limiting globally for tests
# ---------------------------------------------------------------------------
limiter.enabled = False


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _email_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Point notification inboxes at test addresses."""
    monkeypatch.setattr(settings, "seller_email", SELLER_INBOX)
    monkeypatch.setattr(settings, "admin_email", ADMIN_EMAIL)
    monkeypatch.setattr(settings, "admin_emails", [ADMIN_EMAIL])


# ---------------------------------------------------------------------------
# Storage backends
# ---------------------------------------------------------------------------


class SessionPerCallRepository:
    """SqlRepository that opens a fresh session for every call.

    Each factory call or assertion then sees the database the way a new
    request would, rather than a session's cached identity map.
    """

    backend_name = "sql"

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    def __getattr__(self, name: str) -> Callable[..., Any]:
        method = getattr(SqlRepository, name)

        async def _call(*args: Any, **kwargs: Any) -> Any:
            async with self._session_factory() as session:
                return await method(SqlRepository(session), *args, **kwargs)

        return _call


@pytest_asyncio.fixture
async def sql_session_factory(
    tmp_path: Path,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """SQLite database file with all tables, one per test.

    Uses NullPool so every session gets its own connection.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture(params=["json", "sql"])
def backend(request: pytest.FixtureRequest) -> str:
    """Storage backend under test; fixtures below follow it."""
    return str(request.param)


@pytest.fixture
def repo(
    backend: str,
    tmp_path: Path,
    sql_session_factory: async_sessionmaker[AsyncSession],
) -> Any:
    """Repository for setting up and checking state directly."""
    if backend == "json":
        return DocumentRepository(tmp_path / "data")
    return SessionPerCallRepository(sql_session_factory)


@pytest.fixture
def repository_override(
    backend: str,
    tmp_path: Path,
    sql_session_factory: async_sessionmaker[AsyncSession],
) -> Callable[[], AsyncGenerator[Repository, None]]:
    """Dependency override yielding a per-request repository for ``backend``."""
    if backend == "json":

        async def _json_repository() -> AsyncGenerator[Repository, None]:
            yield DocumentRepository(tmp_path / "data")

        return _json_repository

    async def _sql_repository() -> AsyncGenerator[Repository, None]:
        async with sql_session_factory() as session:
            yield SqlRepository(session)

    return _sql_repository


# ---------------------------------------------------------------------------
# Email and event bus
# ---------------------------------------------------------------------------


@pytest.fixture
def email_service() -> MagicMock:
    """Email transport mock; ``send`` succeeds unless a test changes it."""
    service = MagicMock(spec=EmailService)
    service.send = AsyncMock(return_value="email-id-123")
    service.configured = True
    service.from_address = "Storefront <onboarding@resend.dev>"
    return service


@pytest.fixture
def event_handlers(email_service: MagicMock) -> Generator[None, None, None]:
    """Subscribe the same handlers as the app lifespan, with mocked email."""
    subscriptions = [
        event_bus.subscribe(ProductsChanged, catalog_revision.on_products_changed),
        *register_notification_handlers(event_bus, NotificationService(email_service)),
    ]
    yield
    for subscription in subscriptions:
        subscription.unsubscribe()


# ---------------------------------------------------------------------------
# Auth mock
# ---------------------------------------------------------------------------


@pytest.fixture
def auth_user() -> dict[str, Any]:
    """Return the default authenticated test user payload (mimics decoded JWT)."""
    return {
        "sub": TEST_USER_ID,
        "email": TEST_USER_EMAIL,
    }


@pytest.fixture
def login(auth_user: dict[str, Any]) -> Callable[..., None]:
    """Switch the authenticated caller for subsequent requests."""

    def _login(uid: str, email: str | None = None) -> None:
        auth_user.clear()
        auth_user.update({"sub": uid, "email": email or f"{uid}@example.com"})

    return _login


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def client(
    repository_override: Callable[[], AsyncGenerator[Repository, None]],
    email_service: MagicMock,
    auth_user: dict[str, Any],
    event_handlers: None,  # noqa: ARG001  # Subscribes notification handlers
) -> AsyncGenerator[AsyncClient, None]:
    """Authenticated async test client with all dependencies overridden."""

    async def _override_user() -> dict[str, Any]:
        return auth_user

    app.dependency_overrides[get_repository] = repository_override
    app.dependency_overrides[get_current_user] = _override_user
    app.dependency_overrides[get_email_service] = lambda: email_service

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def unauthed_client(
    repository_override: Callable[[], AsyncGenerator[Repository, None]],
    email_service: MagicMock,
    event_handlers: None,  # noqa: ARG001
) -> AsyncGenerator[AsyncClient, None]:
    """Unauthenticated async test client. Auth is NOT overridden."""
    app.dependency_overrides[get_repository] = repository_override
    app.dependency_overrides[get_email_service] = lambda: email_service

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def plain_client() -> AsyncGenerator[AsyncClient, None]:
    """Minimal async test client with NO dependency overrides."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


@pytest.fixture
def user_factory(repo: Repository) -> Callable[..., Any]:
    """Factory that creates user records."""

    async def _create(
        *,
        uid: str = TEST_USER_ID,
        email: str | None = None,
        role: Role = Role.USER,
        store_id: str | None = None,
        display_name: str = "",
    ) -> UserResponse:
        return await repo.upsert_user(
            uid,
            {
                "email": email or f"{uid}@example.com",
                "role": role,
                "store_id": store_id,
                "display_name": display_name,
            },
        )

    return _create


@pytest.fixture
def store_factory(repo: Repository) -> Callable[..., Any]:
    """Factory that creates stores (verified unless told otherwise)."""

    async def _create(
        *,
        owner_uid: str = SELLER_ID,
        store_name: str = "Test Store",
        contact_email: str = "store@example.com",
        status: StoreStatus = StoreStatus.VERIFIED,
        currency: str = "USD",
    ) -> StoreResponse:
        return await repo.create_store(
            {
                "owner_uid": owner_uid,
                "store_name": store_name,
                "contact_email": contact_email,
                "status": status,
                "currency": currency,
                "application_details": {},
                "branding": {},
                "shipping_policy": {},
            }
        )

    return _create


@pytest.fixture
def product_factory(repo: Repository) -> Callable[..., Any]:
    """Factory that creates products."""

    async def _create(
        *,
        store_id: str,
        name: str = "Test Product",
        description: str = "A test product description",
        price: Decimal | str = Decimal("10.00"),
        image: str = "https://example.com/product.jpg",
        category: str = "Test",
        stock: int = 5,
    ) -> ProductResponse:
        return await repo.create_product(
            {
                "store_id": store_id,
                "name": name,
                "description": description,
                "price": Decimal(str(price)),
                "image": image,
                "category": category,
                "stock": stock,
            }
        )

    return _create


@pytest.fixture
def order_factory(repo: Repository) -> Callable[..., Any]:
    """Factory that creates orders; each item is (product_id, store_id, price, qty)."""

    async def _create(
        *,
        items: list[tuple[str, str | None, str, int]],
        customer_email: str = "buyer@example.com",
    ) -> OrderResponse:
        lines = [
            {
                "product_id": product_id,
                "store_id": store_id,
                "product_name": f"Product {product_id}",
                "price": Decimal(price),
                "quantity": quantity,
            }
            for product_id, store_id, price, quantity in items
        ]
        total = sum((line["price"] * line["quantity"] for line in lines), Decimal("0"))
        return await repo.create_order(
            {
                "customer_name": "Ada Buyer",
                "customer_email": customer_email,
                "customer_address": "1 Market Street",
                "total": total,
                "currency": "USD",
            },
            lines,
        )

    return _create


# ---------------------------------------------------------------------------
# Convenience fixtures
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def admin(user_factory: Callable[..., Any]) -> UserResponse:
    """An admin user record."""
    return await user_factory(uid=ADMIN_ID, email=ADMIN_EMAIL, role=Role.ADMIN)  # type: ignore[no-any-return]


@pytest_asyncio.fixture
async def seller_store(
    store_factory: Callable[..., Any], user_factory: Callable[..., Any]
) -> StoreResponse:
    """A verified store whose owner is a seller with the store back-reference."""
    store: StoreResponse = await store_factory(owner_uid=SELLER_ID)
    await user_factory(uid=SELLER_ID, email=SELLER_EMAIL, role=Role.SELLER, store_id=store.id)
    return store


@pytest.fixture
def as_admin(admin: UserResponse, login: Callable[..., None]) -> UserResponse:
    login(admin.id, admin.email)
    return admin


@pytest.fixture
def as_seller(seller_store: StoreResponse, login: Callable[..., None]) -> StoreResponse:
    login(SELLER_ID, SELLER_EMAIL)
    return seller_store
