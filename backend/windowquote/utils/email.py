import asyncio
import logging
from email.message import EmailMessage

import aiosmtplib

from ..core.config import settings

logger = logging.getLogger(__name__)


async def _send_async(msg: EmailMessage) -> None:
    await aiosmtplib.send(
        msg,
        hostname=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USERNAME or None,
        password=settings.SMTP_PASSWORD or None,
        start_tls=bool(settings.SMTP_USERNAME),
    )


def send_email(recipient: str, subject: str, body: str) -> None:
    """Send an email via SMTP and log failures.

    Fire-and-forget: never raises, so callers can schedule it as a
    background task after the response has been sent.
    """
    if not settings.SMTP_HOST:
        logger.warning("SMTP_HOST not configured; skipping email to %s", recipient)
        return
    msg = EmailMessage()
    msg["From"] = f"{settings.BUSINESS_NAME} <{settings.SMTP_FROM}>"
    msg["To"] = recipient
    msg["Subject"] = subject
    msg.set_content(body)
    try:
        asyncio.run(_send_async(msg))
        logger.info("Sent email to %s", recipient)
    except Exception as exc:
        logger.error("Failed to send email to %s: %s", recipient, exc)
