"""Email notifications for orders, store verification and the contact form."""

import logging
from datetime import UTC, datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from storefront.core.config import settings
from storefront.core.currencies import format_price
from storefront.core.events import (
    ContactSubmitted,
    EventBus,
    OrderPlaced,
    StoreVerified,
    Subscription,
)
from storefront.core.exceptions import DeliveryFailed
from storefront.schemas.admin import EmailCheckResponse, EmailConfigStatus
from storefront.services.email_service import EmailService

logger = logging.getLogger(__name__)

# Jinja2 template environment
TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"
_jinja_env = Environment(loader=FileSystemLoader(str(TEMPLATE_DIR)), autoescape=True)
_jinja_env.filters["price"] = lambda amount, currency="USD": format_price(
    Decimal(str(amount)), currency
)


def render(template_name: str, **context: Any) -> str:
    template = _jinja_env.get_template(template_name)
    return template.render(
        sender_name=settings.email_sender_name,
        year=datetime.now(UTC).year,
        **context,
    )


class NotificationService:
    """Renders and sends the transactional emails.

    Event handlers are best-effort: delivery problems are logged by the
    email service and never raised. Only the contact form treats failure to
    reach the business inbox as an error.
    """

    def __init__(self, email_service: EmailService | None = None) -> None:
        self.email_service = email_service or EmailService()

    # --- Event handlers ---

    async def on_order_placed(self, event: OrderPlaced) -> None:
        """Notify the seller inbox and every store on the order, then the customer."""
        context = {
            "order_id": event.order_id,
            "customer_name": event.customer_name,
            "customer_email": event.customer_email,
            "customer_phone": event.customer_phone,
            "customer_address": event.customer_address,
            "items": event.items,
            "total": event.total,
            "currency": event.currency,
            "occurred_at": event.occurred_at,
        }
        inboxes = (settings.seller_email, *event.store_contacts)
        recipients = list(dict.fromkeys(r for r in inboxes if r))
        if recipients:
            await self.email_service.send(
                to=recipients,
                subject=f"New Order - {event.order_id}",
                html=render("order_seller_notification.html", **context),
                reply_to=event.customer_email,
                tags=[{"name": "type", "value": "order_notification"}],
            )
        else:
            logger.warning("No seller inbox configured for order %s", event.order_id)

        await self.email_service.send(
            to=event.customer_email,
            subject=f"Order Confirmation - {settings.email_sender_name}",
            html=render("order_confirmation.html", **context),
            tags=[{"name": "type", "value": "order_confirmation"}],
        )

    async def on_store_verified(self, event: StoreVerified) -> None:
        await self.email_service.send(
            to=event.contact_email,
            subject="Your Store has been Verified!",
            html=render(
                "store_verified.html",
                store_name=event.store_name,
                contact_email=event.contact_email,
                dashboard_url=f"{settings.app_url}/admin/dashboard",
            ),
            tags=[{"name": "type", "value": "store_verified"}],
        )

    async def on_contact_submitted(self, event: ContactSubmitted) -> None:
        """Send the submitter a confirmation of their contact message."""
        await self.email_service.send(
            to=event.email,
            subject=f"Thank you for contacting {settings.email_sender_name}",
            html=render(
                "contact_confirmation.html",
                name=event.name,
                email=event.email,
                subject=event.subject,
                app_url=settings.app_url,
            ),
        )

    # --- Direct sends ---

    async def send_contact_message(self, event: ContactSubmitted) -> str | None:
        """Deliver a contact form message to the business inbox.

        Raises:
            DeliveryFailed: If the email could not be sent
        """
        recipient = settings.seller_email or settings.admin_email
        if not recipient:
            raise DeliveryFailed("No inbox is configured to receive contact messages")

        email_id = await self.email_service.send(
            to=recipient,
            subject=f"New Contact Form Message: {event.subject}",
            html=render(
                "contact_message.html",
                name=event.name,
                email=event.email,
                subject=event.subject,
                message=event.message,
            ),
            reply_to=event.email,
            tags=[{"name": "type", "value": "contact"}],
        )
        if email_id is None:
            raise DeliveryFailed("Failed to send email")
        return email_id

    async def send_test_email(self) -> EmailCheckResponse:
        recipient = settings.admin_email or settings.seller_email
        config = EmailConfigStatus(
            has_api_key=self.email_service.configured,
            from_address=self.email_service.from_address,
            admin_email=settings.admin_email or "NOT SET",
            app_url=settings.app_url,
        )
        if not recipient:
            logger.warning("Test email requested but no admin inbox is configured")
            return EmailCheckResponse(sent=False, recipient="", config=config)

        email_id = await self.email_service.send(
            to=recipient,
            subject="Test Email",
            html=render(
                "test_email.html",
                environment=settings.environment,
                from_address=self.email_service.from_address,
                recipient=recipient,
                app_url=settings.app_url,
                occurred_at=datetime.now(UTC),
            ),
        )
        return EmailCheckResponse(
            sent=email_id is not None,
            email_id=email_id,
            recipient=recipient,
            config=config,
        )


def register_notification_handlers(
    bus: EventBus, service: NotificationService
) -> list[Subscription]:
    """Subscribe the email handlers; the caller unsubscribes them on shutdown."""
    return [
        bus.subscribe(OrderPlaced, service.on_order_placed),
        bus.subscribe(StoreVerified, service.on_store_verified),
        bus.subscribe(ContactSubmitted, service.on_contact_submitted),
    ]
