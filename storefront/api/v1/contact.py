"""Contact form endpoint."""

from fastapi import APIRouter, BackgroundTasks, Request

from storefront.core.config import settings
from storefront.core.deps import Notifications
from storefront.core.events import ContactSubmitted, event_bus
from storefront.core.exceptions import ValidationFailed
from storefront.core.rate_limit import limiter
from storefront.schemas.common import MessageResponse
from storefront.schemas.contact import ContactRequest

router = APIRouter()


@router.post("", response_model=MessageResponse)
@limiter.limit(settings.contact_rate_limit)
async def submit_contact_form(
    request: Request,  # noqa: ARG001 (required by slowapi)
    data: ContactRequest,
    notifications: Notifications,
    background_tasks: BackgroundTasks,
) -> MessageResponse:
    """Email a contact message to the business inbox.

    Fails with 502 if the message cannot be delivered. The confirmation to
    the sender is sent after the response and may fail silently.
    """
    fields = data.model_dump()
    missing = [name for name, value in fields.items() if not (value or "").strip()]
    if missing:
        raise ValidationFailed("All fields are required", {"missing": missing})

    event = ContactSubmitted(
        name=fields["name"].strip(),
        email=fields["email"].strip(),
        subject=fields["subject"].strip(),
        message=fields["message"].strip(),
    )
    await notifications.send_contact_message(event)
    background_tasks.add_task(event_bus.publish, event)
    return MessageResponse(message="Contact form submitted successfully")
