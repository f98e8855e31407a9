"""Email delivery service using Resend API."""

import logging
from typing import Any

import httpx

from storefront.core.config import settings

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


class EmailService:
    """Sends transactional emails via the Resend API."""

    def __init__(self, api_key: str | None = None, from_address: str | None = None) -> None:
        self.api_key = settings.resend_api_key if api_key is None else api_key
        self.from_address = from_address or settings.email_from

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def send(
        self,
        to: str | list[str],
        subject: str,
        html: str,
        reply_to: str | None = None,
        tags: list[dict[str, str]] | None = None,
    ) -> str | None:
        """Send one email.

        Returns the Resend email ID on success, None on failure. Never raises;
        callers that must know about failure check for None.
        """
        recipients = [to] if isinstance(to, str) else [r for r in to if r]
        if not recipients:
            logger.warning("Email %r has no recipients, skipping", subject)
            return None

        payload: dict[str, Any] = {
            "from": self.from_address,
            "to": recipients,
            "subject": subject,
            "html": html,
        }
        if reply_to:
            payload["reply_to"] = reply_to
        if tags:
            payload["tags"] = tags

        if not self.api_key:
            logger.warning("Resend API key not configured, email not sent to %s", recipients)
            return None

        try:
            async with httpx.AsyncClient(timeout=15.0) as client:
                response = await client.post(
                    RESEND_API_URL,
                    headers={
                        "Authorization": f"Bearer {self.api_key}",
                        "Content-Type": "application/json",
                    },
                    json=payload,
                )
                if response.is_success:
                    data = response.json()
                    email_id = data.get("id")
                    logger.info("Email sent: to=%s subject=%r id=%s", recipients, subject, email_id)
                    return str(email_id) if email_id else None
                else:
                    logger.error(
                        "Failed to send email: to=%s status=%s body=%s",
                        recipients,
                        response.status_code,
                        response.text[:500],
                    )
                    return None
        except Exception:
            logger.exception("Error sending email to %s", recipients)
            return None
