"""Unit tests for the contact form email notification."""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from app.config import settings
from app.modules.messages.notifier import build_notification, notify_new_message
from app.modules.messages.schemas import MessageResponse
from app.modules.messages.service import MessageService
from tests.fakes import FakeSupabase

pytestmark = pytest.mark.unit

TENANT_PK = "6f1c2d9e-0000-4000-8000-000000000001"


@pytest.fixture
def message():
    return MessageResponse(
        id="msg-1",
        tenant_id=TENANT_PK,
        name="<b>Sam</b>",
        email="sam@example.com",
        subject="Hello",
        message="Line one\nLine two <script>",
    )


@pytest.fixture
def smtp(monkeypatch):
    monkeypatch.setattr(settings, "smtp_host", "smtp.example.com")
    monkeypatch.setattr(settings, "smtp_username", "bot@example.com")
    monkeypatch.setattr(settings, "smtp_password", "app-password")
    monkeypatch.setattr(settings, "receiver_email", "fallback@example.com")


class TestBuildNotification:
    def test_headers(self, message):
        email = build_notification(message, "owner@example.com")

        assert email["To"] == "owner@example.com"
        assert email["Reply-To"] == "sam@example.com"
        assert email["Subject"] == "Portfolio Contact - Hello"

    def test_html_part_escapes_user_input(self, message):
        email = build_notification(message, "owner@example.com")
        text_part, html_part = email.get_payload()

        html = html_part.get_payload(decode=True).decode()
        assert "&lt;b&gt;Sam&lt;/b&gt;" in html
        assert "<script>" not in html
        assert "Line one<br/>Line two" in html
        assert "<b>Sam</b>" in text_part.get_payload(decode=True).decode()


class TestNotifyNewMessage:
    def test_skipped_without_smtp(self, monkeypatch, message):
        monkeypatch.setattr(settings, "smtp_host", None)
        with patch("app.modules.messages.notifier.aiosmtplib.send", new_callable=AsyncMock) as send:
            result = asyncio.run(notify_new_message(MessageService(FakeSupabase()), message))

        assert result is None
        send.assert_not_called()

    def test_sends_to_tenant_contact_email(self, smtp, message):
        supabase = FakeSupabase()
        supabase.add_row("contact_info", {"tenant_id": TENANT_PK, "email": "owner@example.com"})

        with patch("app.modules.messages.notifier.aiosmtplib.send", new_callable=AsyncMock) as send:
            result = asyncio.run(notify_new_message(MessageService(supabase), message))

        assert result == "owner@example.com"
        send.assert_awaited_once()
        assert send.await_args.kwargs["hostname"] == "smtp.example.com"
        assert send.await_args.args[0]["To"] == "owner@example.com"

    def test_falls_back_to_receiver_email(self, smtp, message):
        with patch("app.modules.messages.notifier.aiosmtplib.send", new_callable=AsyncMock):
            result = asyncio.run(notify_new_message(MessageService(FakeSupabase()), message))

        assert result == "fallback@example.com"

    def test_smtp_failure_is_logged_not_raised(self, smtp, message, caplog):
        send = AsyncMock(side_effect=OSError("connection refused"))
        with patch("app.modules.messages.notifier.aiosmtplib.send", send):
            result = asyncio.run(notify_new_message(MessageService(FakeSupabase()), message))

        assert result is None
        assert "Failed to send contact notification" in caplog.text
