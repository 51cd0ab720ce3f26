"""Reminder due-ness, idempotent recording and per-booking failure isolation."""

from datetime import timedelta

import pytest

from advisor_booking.core.enums import BookingStatus, EmailStatus, EmailType
from advisor_booking.core.exceptions import RepositoryException
from advisor_booking.services.notification_service import NotificationService
from advisor_booking.services.notifier import NotificationResult
from advisor_booking.services.reminder_service import ReminderService

from .helpers import (
    NOW,
    FailingNotifier,
    RecordingNotifier,
    create_advisor,
    create_booking,
    create_email_log,
    create_slot,
    email_logs_for,
)


@pytest.fixture
def advisor(db):
    return create_advisor(db, name="Dra. Ana Martínez", timezone_name="America/Bogota")


def book_at(db, advisor, offset, **kwargs):
    slot = create_slot(db, advisor, NOW + offset)
    return create_booking(db, slot, **kwargs)


class TestFindDueBookings:
    def test_window_edges(self, db, advisor, clock, notifier):
        inside_low = book_at(db, advisor, timedelta(hours=23), client_email="low@example.com")
        inside_high = book_at(db, advisor, timedelta(hours=25), client_email="high@example.com")
        book_at(db, advisor, timedelta(hours=22, minutes=59), client_email="early@example.com")
        book_at(db, advisor, timedelta(hours=25, minutes=1), client_email="late@example.com")

        due = ReminderService(db, notifier, clock).find_due_bookings(EmailType.REMINDER_24H)

        assert [b.id for b in due] == [inside_low.id, inside_high.id]

    def test_only_confirmed_bookings_are_due(self, db, advisor, clock, notifier):
        book_at(db, advisor, timedelta(minutes=60), status=BookingStatus.CANCELLED)
        book_at(db, advisor, timedelta(minutes=61), status=BookingStatus.COMPLETED)
        confirmed = book_at(db, advisor, timedelta(minutes=62))

        due = ReminderService(db, notifier, clock).find_due_bookings(EmailType.REMINDER_1H)

        assert [b.id for b in due] == [confirmed.id]

    def test_sent_row_excludes_booking_even_inside_window(self, db, advisor, clock, notifier):
        booking = book_at(db, advisor, timedelta(hours=24))
        create_email_log(db, booking, EmailType.REMINDER_24H, EmailStatus.SENT, sent_at=NOW)

        due = ReminderService(db, notifier, clock).find_due_bookings(EmailType.REMINDER_24H)

        assert due == []

    def test_failed_or_other_type_rows_do_not_exclude(self, db, advisor, clock, notifier):
        booking = book_at(db, advisor, timedelta(hours=24))
        create_email_log(db, booking, EmailType.REMINDER_24H, EmailStatus.FAILED)
        create_email_log(db, booking, EmailType.REMINDER_1H, EmailStatus.SENT, sent_at=NOW)
        create_email_log(db, booking, EmailType.CONFIRMATION, EmailStatus.SENT, sent_at=NOW)

        due = ReminderService(db, notifier, clock).find_due_bookings(EmailType.REMINDER_24H)

        assert [b.id for b in due] == [booking.id]


class TestSendReminders:
    def test_24h_reminder_is_sent_once(self, db, advisor, clock, notifier):
        booking = book_at(db, advisor, timedelta(hours=24, minutes=1))
        service = ReminderService(db, notifier, clock)

        first = service.send_24h_reminders()
        second = service.send_24h_reminders()

        assert (first.sent, first.errors) == (1, 0)
        assert (second.sent, second.errors) == (0, 0)
        assert notifier.recipients() == [booking.client_email]

        logs = email_logs_for(db, booking.id, EmailType.REMINDER_24H)
        assert [log.status for log in logs] == [EmailStatus.SENT.value]
        assert logs[0].sent_at == NOW
        assert logs[0].attempts == 1

    def test_message_uses_advisor_timezone(self, db, advisor, clock, notifier):
        book_at(db, advisor, timedelta(hours=24))

        ReminderService(db, notifier, clock).send_24h_reminders()

        message = notifier.sent[0]
        assert message["subject"] == "Recordatorio de cita - Dra. Ana Martínez"
        assert message["template"] == "email/reminder.html"
        # 15:00 UTC + 24h rendered in Bogotá (UTC-5)
        assert message["data"]["appointment_time"] == "10:00 - 11:00"
        assert message["data"]["appointment_date"] == "03/03/2026"
        assert message["data"]["lead_time"] == "24 horas"

    def test_one_failure_does_not_abort_the_batch(self, db, advisor, clock):
        bad = book_at(db, advisor, timedelta(hours=23, minutes=30), client_email="bad@example.com")
        good = book_at(db, advisor, timedelta(hours=24), client_email="good@example.com")
        failing = FailingNotifier("bad@example.com")

        result = ReminderService(db, failing, clock).send_24h_reminders()

        assert (result.sent, result.errors) == (1, 1)
        assert failing.delivered.recipients() == ["good@example.com"]
        failed_logs = email_logs_for(db, bad.id, EmailType.REMINDER_24H)
        assert [log.status for log in failed_logs] == [EmailStatus.FAILED.value]
        assert failed_logs[0].error_message == "mailbox unavailable"
        assert failed_logs[0].sent_at is None
        assert [log.status for log in email_logs_for(db, good.id, EmailType.REMINDER_24H)] == [
            EmailStatus.SENT.value
        ]

    def test_raised_notification_failure_is_recorded(self, db, advisor, clock):
        booking = book_at(db, advisor, timedelta(minutes=60))

        result = ReminderService(db, FailingNotifier(raise_error=True), clock).send_1h_reminders()

        assert (result.sent, result.errors) == (0, 1)
        logs = email_logs_for(db, booking.id, EmailType.REMINDER_1H)
        assert logs[0].status == EmailStatus.FAILED.value
        assert "SMTP connection refused" in logs[0].error_message

    def test_failed_attempt_is_retried_next_cycle(self, db, advisor, clock, notifier):
        booking = book_at(db, advisor, timedelta(hours=24))
        ReminderService(db, FailingNotifier(), clock).send_24h_reminders()

        clock.advance(timedelta(minutes=5))
        retry = ReminderService(db, notifier, clock).send_24h_reminders()

        assert retry.sent == 1
        statuses = [log.status for log in email_logs_for(db, booking.id, EmailType.REMINDER_24H)]
        assert statuses == [EmailStatus.FAILED.value, EmailStatus.SENT.value]

    def test_unexpected_error_is_isolated(self, db, advisor, clock, notifier):
        book_at(db, advisor, timedelta(hours=24), client_email="first@example.com")
        book_at(db, advisor, timedelta(hours=24, minutes=30), client_email="second@example.com")

        class ExplodingOnce(RecordingNotifier):
            def send(self, recipient, subject, template, data):
                if recipient == "first@example.com":
                    raise RuntimeError("template engine crashed")
                return super().send(recipient, subject, template, data)

        exploding = ExplodingOnce()
        result = ReminderService(db, exploding, clock).send_24h_reminders()

        assert (result.sent, result.errors) == (1, 1)
        assert exploding.recipients() == ["second@example.com"]

    def test_scan_failure_is_reported_not_raised(self, db, advisor, clock, notifier, monkeypatch):
        service = ReminderService(db, notifier, clock)

        def broken(*args, **kwargs):
            raise RepositoryException("Failed to find due Booking")

        monkeypatch.setattr(service.booking_repository, "find_due_for_reminder", broken)
        result = service.send_24h_reminders()

        assert result.sent == 0
        assert result.error == "Failed to find due Booking"


class TestProcessAllReminders:
    def test_runs_both_types_and_aggregates(self, db, advisor, clock, notifier):
        book_at(db, advisor, timedelta(hours=24), client_email="day@example.com")
        book_at(db, advisor, timedelta(hours=1), client_email="hour@example.com")

        summary = ReminderService(db, notifier, clock).process_all_reminders()

        assert summary.reminder_24h.sent == 1
        assert summary.reminder_1h.sent == 1
        assert summary.total.sent == 2
        assert summary.to_dict()["total"] == {"sent": 2, "errors": 0}
        assert summary.to_dict()["ran_at"] == NOW.isoformat()
        assert notifier.recipients() == ["day@example.com", "hour@example.com"]

    def test_nothing_due(self, db, clock, notifier):
        summary = ReminderService(db, notifier, clock).process_all_reminders()
        assert summary.total.sent == 0
        assert summary.total.errors == 0
        assert "error" not in summary.to_dict()["total"]

    def test_failed_scans_show_in_total(self, db, clock, notifier, monkeypatch):
        service = ReminderService(db, notifier, clock)

        def broken(*args, **kwargs):
            raise RepositoryException("Failed to find due Booking")

        monkeypatch.setattr(service.booking_repository, "find_due_for_reminder", broken)
        summary = service.process_all_reminders()

        assert summary.total.error == (
            "reminder_24h: Failed to find due Booking; reminder_1h: Failed to find due Booking"
        )
        assert summary.to_dict()["total"]["error"] == summary.total.error
        assert summary.to_dict()["total"]["sent"] == 0


class TestRecordOutcome:
    def test_duplicate_sent_reminder_is_not_recorded_twice(self, db, advisor, clock, notifier):
        booking = book_at(db, advisor, timedelta(hours=24))
        service = NotificationService(db, notifier, clock)

        assert service.record_outcome(booking.id, EmailType.REMINDER_24H, NotificationResult.ok("a"))
        assert service.record_outcome(booking.id, EmailType.REMINDER_24H, NotificationResult.ok("b"))

        logs = email_logs_for(db, booking.id, EmailType.REMINDER_24H)
        assert [log.status for log in logs] == [EmailStatus.SENT.value]

    def test_confirmations_may_be_recorded_repeatedly(self, db, advisor, clock, notifier):
        booking = book_at(db, advisor, timedelta(days=3))
        service = NotificationService(db, notifier, clock)

        service.record_outcome(booking.id, EmailType.CONFIRMATION, NotificationResult.ok())
        service.record_outcome(booking.id, EmailType.CONFIRMATION, NotificationResult.ok())

        assert len(email_logs_for(db, booking.id, EmailType.CONFIRMATION)) == 2

    def test_send_reminder_for_single_booking(self, db, advisor, clock, notifier):
        booking = book_at(db, advisor, timedelta(hours=1))

        assert NotificationService(db, notifier, clock).send_reminder(booking.id, EmailType.REMINDER_1H)
        assert notifier.sent[0]["data"]["lead_time"] == "1 hora"

    def test_send_reminder_rejects_confirmation_type(self, db, clock, notifier):
        with pytest.raises(ValueError):
            NotificationService(db, notifier, clock).send_reminder(1, EmailType.CONFIRMATION)
