"""
Email notification for new contact form messages.

Runs as a FastAPI background task after the message is stored, so SMTP
problems never fail the public contact request; they are only logged.
"""

import html
import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

import aiosmtplib

from app.config import settings
from app.modules.messages.schemas import MessageResponse
from app.modules.messages.service import MessageService

logger = logging.getLogger(__name__)


def build_notification(message: MessageResponse, recipient: str) -> MIMEMultipart:
    """Plain text and HTML versions of the new-message email. User input is escaped in the HTML part."""
    email = MIMEMultipart("alternative")
    email["From"] = f"{settings.smtp_from_name} <{settings.smtp_username}>"
    email["To"] = recipient
    email["Subject"] = f"Portfolio Contact - {message.subject}"
    email["Reply-To"] = message.email

    text_body = (
        "New Contact Form Message\n\n"
        f"Name: {message.name}\n"
        f"Email: {message.email}\n"
        f"Subject: {message.subject}\n\n"
        f"{message.message}\n"
    )
    html_body = (
        "<h2>New Contact Form Message</h2>"
        f"<p><strong>Name:</strong> {html.escape(message.name)}</p>"
        f"<p><strong>Email:</strong> {html.escape(message.email)}</p>"
        f"<p><strong>Subject:</strong> {html.escape(message.subject)}</p>"
        f"<p><strong>Message:</strong><br/>{html.escape(message.message).replace(chr(10), '<br/>')}</p>"
    )
    email.attach(MIMEText(text_body, "plain", "utf-8"))
    email.attach(MIMEText(html_body, "html", "utf-8"))
    return email


async def send_email(email: MIMEMultipart) -> None:
    await aiosmtplib.send(
        email,
        hostname=settings.smtp_host,
        port=settings.smtp_port,
        username=settings.smtp_username,
        password=settings.smtp_password,
        start_tls=settings.smtp_use_tls,
    )


async def notify_new_message(service: MessageService, message: MessageResponse) -> Optional[str]:
    """Email the tenant (or RECEIVER_EMAIL) about a new message. Returns the recipient when sent."""
    if not settings.smtp_configured:
        logger.debug("SMTP not configured, skipping contact notification")
        return None

    recipient = service.get_notification_recipient(message.tenant_id) or settings.receiver_email
    if not recipient:
        logger.warning(f"No recipient for contact notification of message {message.id}")
        return None

    try:
        await send_email(build_notification(message, recipient))
    except Exception as e:
        logger.error(f"Failed to send contact notification to {recipient}: {e}")
        return None

    logger.info(f"Contact notification for message {message.id} sent to {recipient}")
    return recipient
