# advisor_booking/services/email.py
"""
Email Service

Implements the ``Notifier`` protocol on top of Jinja2 templates and either
the Resend API or the console (log-only) provider, selected by
``EMAIL_PROVIDER``.
"""

import logging
import re
from typing import Any, Mapping, Optional

import resend

from ..core.config import settings
from ..core.exceptions import NotificationFailure
from .notifier import NotificationResult
from .template_service import TemplateService

logger = logging.getLogger(__name__)


def html_to_text(html_content: str) -> str:
    """Convert HTML content to plain text for better deliverability."""
    text = re.sub(r"<[^>]+>", "", html_content)
    return re.sub(r"\s+", " ", text).strip()


class EmailService:
    """
    Send templated emails.

    Transport errors never escape ``send``: they come back as a failed
    ``NotificationResult`` so callers can record them.
    """

    def __init__(
        self,
        template_service: Optional[TemplateService] = None,
        provider: Optional[str] = None,
    ):
        self.template_service = template_service or TemplateService()
        self.provider = provider or settings.email_provider
        self.sender = settings.sender

        if self.provider == "resend":
            if not settings.resend_api_key:
                raise NotificationFailure("Resend API key not configured")
            resend.api_key = settings.resend_api_key

        logger.info("EmailService initialized with provider=%s", self.provider)

    def send(
        self,
        recipient: str,
        subject: str,
        template: str,
        data: Mapping[str, Any],
    ) -> NotificationResult:
        try:
            html_content = self.template_service.render(template, data)
            message_id = self._deliver(recipient, subject, html_content)
        except NotificationFailure as exc:
            logger.error("Failed to send email to %s (%s): %s", recipient, subject, exc)
            return NotificationResult.failed(str(exc))
        logger.info("Email sent to %s - Subject: %s", recipient, subject)
        return NotificationResult.ok(message_id)

    def _deliver(self, recipient: str, subject: str, html_content: str) -> Optional[str]:
        if self.provider == "console":
            logger.info(
                "[console email] to=%s subject=%s\n%s",
                recipient,
                subject,
                html_to_text(html_content),
            )
            return None

        email_data = {
            "from": self.sender,
            "to": [recipient],
            "subject": subject,
            "html": html_content,
            "text": html_to_text(html_content),
        }
        try:
            response = resend.Emails.send(email_data)
        except Exception as exc:
            raise NotificationFailure(f"{type(exc).__name__}: {exc}") from exc

        message_id = response.get("id") if isinstance(response, Mapping) else None
        if not message_id:
            raise NotificationFailure(f"Unexpected response from email provider: {response!r}")
        return str(message_id)
