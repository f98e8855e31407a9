"""In-process event bus for cross-component notifications.

Handlers are registered with ``subscribe`` and removed through the returned
``Subscription``. The application lifespan owns the subscriptions, so
nothing stays registered after shutdown.
"""

import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Event:
    """Base class for events; ``occurred_at`` is filled in on creation."""

    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC), kw_only=True)


@dataclass(frozen=True)
class ProductsChanged(Event):
    store_id: str
    product_ids: tuple[str, ...] = ()
    action: str = "updated"


@dataclass(frozen=True)
class OrderPlaced(Event):
    order_id: str
    customer_name: str
    customer_email: str
    customer_address: str
    total: Decimal
    currency: str
    items: tuple[dict[str, Any], ...]
    store_contacts: tuple[str, ...] = ()
    customer_phone: str | None = None


@dataclass(frozen=True)
class StoreVerified(Event):
    store_id: str
    store_name: str
    contact_email: str


@dataclass(frozen=True)
class ContactSubmitted(Event):
    name: str
    email: str
    subject: str
    message: str


Handler = Callable[[Any], Awaitable[None]]


class Subscription:
    """Handle returned by ``EventBus.subscribe``."""

    def __init__(self, bus: "EventBus", event_type: type[Event], handler: Handler) -> None:
        self._bus = bus
        self.event_type = event_type
        self.handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._bus._remove(self)
            self.active = False


class EventBus:
    """Dispatches events to async handlers registered per event type.

    A failing handler is logged and skipped; it never affects the publisher
    or the remaining handlers.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[Event], list[Subscription]] = defaultdict(list)

    def subscribe(self, event_type: type[Event], handler: Handler) -> Subscription:
        subscription = Subscription(self, event_type, handler)
        self._handlers[event_type].append(subscription)
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        handlers = self._handlers.get(subscription.event_type, [])
        if subscription in handlers:
            handlers.remove(subscription)

    def handler_count(self, event_type: type[Event]) -> int:
        return len(self._handlers.get(event_type, []))

    async def publish(self, event: Event) -> None:
        # Copy so handlers may unsubscribe while we iterate
        for subscription in list(self._handlers.get(type(event), [])):
            try:
                await subscription.handler(event)
            except Exception:
                logger.exception(
                    "Event handler %s failed for %s",
                    getattr(subscription.handler, "__qualname__", subscription.handler),
                    type(event).__name__,
                )


event_bus = EventBus()
