# advisor_booking/services/notifier.py
"""
Notifier capability.

The booking core only needs "send this templated message to this
recipient and tell me whether it worked". Transport and rendering live
behind this protocol (see ``EmailService``).
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol


@dataclass(slots=True)
class NotificationResult:
    success: bool
    provider_message_id: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, provider_message_id: Optional[str] = None) -> "NotificationResult":
        return cls(success=True, provider_message_id=provider_message_id)

    @classmethod
    def failed(cls, error: str) -> "NotificationResult":
        return cls(success=False, error=error)


class Notifier(Protocol):
    def send(
        self,
        recipient: str,
        subject: str,
        template: str,
        data: Mapping[str, Any],
    ) -> NotificationResult:
        """
        Deliver one message.

        Implementations either return a failed result or raise
        ``NotificationFailure``; callers handle both.
        """
        ...
