"""
Transactional email through the Resend HTTP API.

Sending is skipped (and logged) when no API key is configured, so local
environments work without an email provider.
"""

from html import escape
from typing import Any, Optional

import httpx

from solosuccess.config.settings import get_settings
from solosuccess.domain.exceptions import ExternalError
from solosuccess.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


async def send_email(to: str, subject: str, html: str) -> Optional[dict[str, Any]]:
    """
    Send one email.

    Returns:
        The provider response, or None when sending is disabled

    Raises:
        ExternalError: If the provider rejects the request or is unreachable
    """
    settings = get_settings()
    if settings.email_api_key is None:
        logger.warning("Email API key not configured, email not sent", subject=subject)
        return None

    try:
        async with httpx.AsyncClient(timeout=10.0) as client:
            response = await client.post(
                settings.email_api_url,
                headers={"Authorization": f"Bearer {settings.email_api_key.get_secret_value()}"},
                json={
                    "from": settings.email_from,
                    "to": [to],
                    "subject": subject,
                    "html": html,
                },
            )
            response.raise_for_status()
    except httpx.HTTPError as e:
        logger.error("Email delivery failed", subject=subject, error=str(e))
        raise ExternalError("Email delivery failed", details={"provider": "resend"}) from e

    logger.info("Email sent", subject=subject)
    return response.json()


def welcome_email(full_name: Optional[str]) -> tuple[str, str]:
    """Subject and HTML body of the welcome email."""
    settings = get_settings()
    name = escape(full_name or "there")
    dashboard_url = f"{settings.app_base_url.rstrip('/')}/dashboard"

    subject = "Welcome to SoloSuccess AI!"
    html = (
        f"<h1>Welcome, {name}!</h1>"
        "<p>Your workspace is ready. We've set up your briefcase, a few starter "
        "goals and onboarding tasks to help you get going.</p>"
        "<p>Your AI team is standing by: start a chat with Blaze for growth "
        "strategy or Echo for marketing ideas.</p>"
        f'<p><a href="{dashboard_url}">Open your dashboard</a></p>'
    )
    return subject, html
