# tests/helpers.py
"""Row builders and fake notifiers shared by the test suite."""

from datetime import datetime, timedelta, timezone
import threading
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session

from advisor_booking.auth import get_password_hash
from advisor_booking.core.enums import BookingStatus, EmailStatus, EmailType, SlotStatus
from advisor_booking.core.exceptions import NotificationFailure
from advisor_booking.models import Admin, Advisor, Booking, EmailLog, TimeSlot
from advisor_booking.services.notifier import NotificationResult

# Fixed reference instant used by clock-driven tests.
NOW = datetime(2026, 3, 2, 15, 0, tzinfo=timezone.utc)

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "correct-horse-42"


def create_advisor(
    db: Session, name: str = "Laura Pérez", timezone_name: str = "America/Mexico_City"
) -> Advisor:
    advisor = Advisor(name=name, timezone=timezone_name)
    db.add(advisor)
    db.commit()
    return advisor


def create_slot(
    db: Session,
    advisor: Advisor,
    start: datetime,
    *,
    status: SlotStatus = SlotStatus.FREE,
    minutes: int = 60,
) -> TimeSlot:
    slot = TimeSlot(
        advisor_id=advisor.id,
        start_utc=start,
        end_utc=start + timedelta(minutes=minutes),
        status=status.value,
    )
    db.add(slot)
    db.commit()
    return slot


def create_booking(
    db: Session,
    slot: TimeSlot,
    *,
    client_name: str = "Juan Cliente",
    client_email: str = "juan@example.com",
    status: BookingStatus = BookingStatus.CONFIRMED,
) -> Booking:
    """Insert a booking directly; an active booking also marks its slot booked."""
    booking = Booking(
        slot_id=slot.id,
        advisor_id=slot.advisor_id,
        client_name=client_name,
        client_email=client_email,
        status=status.value,
    )
    db.add(booking)
    if status in BookingStatus.active():
        slot.status = SlotStatus.BOOKED.value
    db.commit()
    return booking


def create_email_log(
    db: Session,
    booking: Booking,
    email_type: EmailType,
    status: EmailStatus,
    sent_at: Optional[datetime] = None,
) -> EmailLog:
    log = EmailLog(
        booking_id=booking.id,
        type=email_type.value,
        status=status.value,
        attempts=0 if status == EmailStatus.PENDING else 1,
        sent_at=sent_at,
    )
    db.add(log)
    db.commit()
    return log


def create_admin(db: Session, email: str = ADMIN_EMAIL, password: str = ADMIN_PASSWORD) -> Admin:
    admin = Admin(email=email, password_hash=get_password_hash(password))
    db.add(admin)
    db.commit()
    return admin


def email_logs_for(db: Session, booking_id: int, email_type: EmailType) -> List[EmailLog]:
    db.expire_all()
    logs = (
        db.query(EmailLog)
        .filter(EmailLog.booking_id == booking_id, EmailLog.type == email_type.value)
        .order_by(EmailLog.id)
        .all()
    )
    db.commit()
    return logs


def reload(db: Session, entity):
    """Fresh copy of ``entity`` from the database; the read transaction is closed."""
    entity_id = entity.id
    db.expire_all()
    fresh = db.get(type(entity), entity_id)
    db.commit()
    return fresh


class RecordingNotifier:
    """Accepts every message and remembers it."""

    def __init__(self) -> None:
        self.sent: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def send(
        self, recipient: str, subject: str, template: str, data: Mapping[str, Any]
    ) -> NotificationResult:
        with self._lock:
            self.sent.append(
                {"recipient": recipient, "subject": subject, "template": template, "data": dict(data)}
            )
            return NotificationResult.ok(f"msg-{len(self.sent)}")

    def recipients(self) -> List[str]:
        return [message["recipient"] for message in self.sent]


class FailingNotifier:
    """Fails for every recipient in ``fail_for`` (or for everyone when empty)."""

    def __init__(self, *fail_for: str, raise_error: bool = False) -> None:
        self.fail_for = set(fail_for)
        self.raise_error = raise_error
        self.delivered = RecordingNotifier()
        self.attempts = 0

    def send(
        self, recipient: str, subject: str, template: str, data: Mapping[str, Any]
    ) -> NotificationResult:
        self.attempts += 1
        if not self.fail_for or recipient in self.fail_for:
            if self.raise_error:
                raise NotificationFailure("SMTP connection refused")
            return NotificationResult.failed("mailbox unavailable")
        return self.delivered.send(recipient, subject, template, data)
