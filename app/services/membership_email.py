"""
Send membership-related emails (downgrade confirmations).
Uses Resend if RESEND_API_KEY is set; otherwise no-op so enforcement sweeps never fail.
"""
import logging
from html import escape
from typing import Any, Dict, Mapping

import resend

from app.core.config import settings
from app.core.membership_policy import DOWNGRADE_TEMPLATE_KEY

logger = logging.getLogger(__name__)

# template_key -> (subject, html body). Bodies are str.format templates; values are HTML-escaped.
EMAIL_TEMPLATES: Dict[str, tuple[str, str]] = {
    DOWNGRADE_TEMPLATE_KEY: (
        "Your {app_name} membership is now Basic",
        """
        <p>Hi {display_name},</p>
        <p>Your Premium membership has ended, so your account has moved to the free Basic plan.</p>
        <p>Your studio <strong>{studio_name}</strong> is still listed. Premium extras such as
        featured placement, phone and directions buttons, verified badge and custom page title
        have been switched off.</p>
        <p>You can renew Premium at any time: <a href="{renew_url}">{renew_url}</a></p>
        <p>Thank you for using {app_name}.</p>
        """,
    ),
}


def render_template(template_key: str, variables: Mapping[str, Any]) -> tuple[str, str]:
    """Return (subject, html) for a template. Raises KeyError for an unknown template."""
    subject, body = EMAIL_TEMPLATES[template_key]
    values = {
        "app_name": settings.APP_NAME,
        "renew_url": f"{settings.APP_URL.rstrip('/')}/membership",
        "display_name": "there",
        "studio_name": "your studio",
    }
    values.update({k: v for k, v in variables.items() if v is not None})
    safe = {k: escape(str(v)) for k, v in values.items()}
    return subject.format(**values), body.format(**safe).strip()


def send_templated_email(account_id: int, template_key: str, variables: Mapping[str, Any]) -> bool:
    """
    Send a templated email to an account. variables["email"] is the recipient.
    Returns True if sent, False if skipped (no API key / no recipient) or the provider failed.
    Does not raise for provider errors; logs them so enforcement is never broken.
    """
    to_email = variables.get("email")
    if not settings.RESEND_API_KEY or not to_email:
        logger.info("Skipping %s email for account %s (no API key or recipient)", template_key, account_id)
        return False

    resend.api_key = settings.RESEND_API_KEY

    subject, html = render_template(template_key, variables)
    try:
        params = {
            "from": settings.MEMBERSHIP_FROM_EMAIL,
            "to": [to_email],
            "subject": subject,
            "html": html,
        }
        resend.Emails.send(params)
        logger.info("%s email sent to account %s", template_key, account_id)
        return True
    except Exception as e:
        logger.warning("Failed to send %s email to account %s: %s", template_key, account_id, e)
        return False
