"""Tests for the contact form endpoint."""

from unittest.mock import MagicMock

import pytest
from httpx import AsyncClient

from storefront.core.config import settings
from tests.conftest import ADMIN_EMAIL, SELLER_INBOX

CONTACT = {
    "name": "Ama Mensah",
    "email": "ama@example.com",
    "subject": "Wholesale",
    "message": "Do you sell <b>in bulk</b>?",
}


class TestContactForm:
    async def test_sends_message_and_confirmation(
        self, unauthed_client: AsyncClient, email_service: MagicMock
    ) -> None:
        response = await unauthed_client.post("/api/v1/contact", json=CONTACT)
        assert response.status_code == 200
        assert response.json() == {"message": "Contact form submitted successfully"}

        assert email_service.send.await_count == 2
        inbox_call, confirmation_call = email_service.send.await_args_list

        assert inbox_call.kwargs["to"] == SELLER_INBOX
        assert inbox_call.kwargs["subject"] == "New Contact Form Message: Wholesale"
        assert inbox_call.kwargs["reply_to"] == "ama@example.com"
        # User input is escaped in the HTML body
        assert "&lt;b&gt;in bulk&lt;/b&gt;" in inbox_call.kwargs["html"]

        assert confirmation_call.kwargs["to"] == "ama@example.com"
        assert "Wholesale" in confirmation_call.kwargs["html"]

    async def test_falls_back_to_admin_inbox(
        self,
        unauthed_client: AsyncClient,
        email_service: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(settings, "seller_email", "")
        response = await unauthed_client.post("/api/v1/contact", json=CONTACT)
        assert response.status_code == 200
        assert email_service.send.await_args_list[0].kwargs["to"] == ADMIN_EMAIL

    @pytest.mark.parametrize("field", ["name", "email", "subject", "message"])
    async def test_blank_field(
        self, unauthed_client: AsyncClient, email_service: MagicMock, field: str
    ) -> None:
        response = await unauthed_client.post("/api/v1/contact", json={**CONTACT, field: "  "})
        assert response.status_code == 400
        assert response.json()["details"] == {"missing": [field]}
        email_service.send.assert_not_called()

    async def test_delivery_failure(
        self, unauthed_client: AsyncClient, email_service: MagicMock
    ) -> None:
        email_service.send.return_value = None
        response = await unauthed_client.post("/api/v1/contact", json=CONTACT)
        assert response.status_code == 502
        assert response.json()["error"] == "Failed to send email"
        # No confirmation is sent when the message itself failed
        assert email_service.send.await_count == 1

    async def test_no_inbox_configured(
        self,
        unauthed_client: AsyncClient,
        email_service: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(settings, "seller_email", "")
        monkeypatch.setattr(settings, "admin_email", "")
        response = await unauthed_client.post("/api/v1/contact", json=CONTACT)
        assert response.status_code == 502
        email_service.send.assert_not_called()
