"""
SendGrid email delivery.

Sends HTML emails through the SendGrid v3 mail/send API.
"""

import logging

import httpx

from hrbuddy.config import settings
from hrbuddy.errors import EmailError

logger = logging.getLogger(__name__)

SENDGRID_API_URL = "https://api.sendgrid.com/v3/mail/send"


def _recipients(emails: str | list[str] | None) -> list[dict[str, str]] | None:
    if not emails:
        return None
    if isinstance(emails, str):
        emails = [emails]
    return [{"email": email} for email in emails]


def build_payload(
    to: str | list[str],
    subject: str,
    html: str,
    from_email: str,
    cc: str | list[str] | None = None,
    bcc: str | list[str] | None = None,
    reply_to: str | None = None,
) -> dict:
    """Build the SendGrid request body. Empty optional fields are left out."""
    personalization = {"to": _recipients(to), "subject": subject}
    if cc:
        personalization["cc"] = _recipients(cc)
    if bcc:
        personalization["bcc"] = _recipients(bcc)

    payload = {
        "personalizations": [personalization],
        "from": {"email": from_email},
        "content": [{"type": "text/html", "value": html}],
    }
    if reply_to:
        payload["reply_to"] = {"email": reply_to}
    return payload


async def send_email(
    to: str | list[str],
    subject: str,
    html: str,
    from_email: str | None = None,
    cc: str | list[str] | None = None,
    bcc: str | list[str] | None = None,
    reply_to: str | None = None,
) -> bool:
    """
    Send an email using SendGrid.

    Raises:
        EmailError: Not configured, or SendGrid rejected the request
    """
    if not settings.sendgrid_api_key:
        raise EmailError("SendGrid API key not configured")

    sender = from_email or settings.sendgrid_from_email
    if not sender:
        raise EmailError("Sender email not configured")

    payload = build_payload(to, subject, html, sender, cc=cc, bcc=bcc, reply_to=reply_to)
    headers = {
        "Authorization": f"Bearer {settings.sendgrid_api_key}",
        "Content-Type": "application/json",
    }

    try:
        async with httpx.AsyncClient(timeout=settings.request_timeout) as client:
            response = await client.post(SENDGRID_API_URL, headers=headers, json=payload)
            response.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.error(f"SendGrid HTTP error: {e.response.status_code} {e.response.text}")
        raise EmailError(f"Failed to send email: HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        logger.error(f"Error sending email: {e}")
        raise EmailError(f"Failed to send email: {e}") from e

    logger.info(f"Email sent successfully: {subject}")
    return True
