"""Admin status transitions and slot reconciliation."""

from datetime import timedelta

import pytest

from advisor_booking.core.enums import BookingStatus, SlotStatus
from advisor_booking.core.exceptions import (
    BookingNotFoundException,
    InvalidTransitionException,
    SlotConflictException,
    ValidationException,
)
from advisor_booking.services.booking_service import BookingService
from advisor_booking.services.booking_status_service import BookingStatusService

from .helpers import NOW, create_advisor, create_booking, create_slot, reload


@pytest.fixture
def slot(db):
    advisor = create_advisor(db)
    return create_slot(db, advisor, NOW + timedelta(days=1))


@pytest.fixture
def booking(db, slot):
    return create_booking(db, slot)


class TestUpdateBookingStatus:
    def test_cancel_frees_slot(self, db, slot, booking):
        transition = BookingStatusService(db).update_booking_status(booking.id, "cancelled")

        assert transition.previous_status == "confirmed"
        assert transition.new_status == "cancelled"
        assert transition.slot_status == SlotStatus.FREE.value
        assert reload(db, slot).status == SlotStatus.FREE.value
        assert reload(db, booking).status == BookingStatus.CANCELLED.value

    def test_cancel_frees_slot_even_with_older_cancelled_bookings(self, db, slot):
        create_booking(db, slot, client_email="old@example.com", status=BookingStatus.CANCELLED)
        current = create_booking(db, slot, client_email="new@example.com")

        BookingStatusService(db).update_booking_status(current.id, BookingStatus.CANCELLED)

        assert reload(db, slot).status == SlotStatus.FREE.value

    def test_complete_keeps_slot_booked(self, db, slot, booking):
        transition = BookingStatusService(db).update_booking_status(booking.id, "completed")

        assert transition.slot_status == SlotStatus.BOOKED.value
        assert reload(db, slot).status == SlotStatus.BOOKED.value

    def test_reconfirm_after_cancel_rebooks_slot(self, db, slot, booking):
        service = BookingStatusService(db)
        service.update_booking_status(booking.id, "cancelled")
        service.update_booking_status(booking.id, "confirmed")

        assert reload(db, slot).status == SlotStatus.BOOKED.value

    @pytest.mark.parametrize("status", ["confirmed", "cancelled", "completed"])
    def test_same_status_is_invalid_transition(self, db, slot, status):
        booking = create_booking(db, slot, status=BookingStatus(status))

        with pytest.raises(InvalidTransitionException) as exc_info:
            BookingStatusService(db).update_booking_status(booking.id, status)

        assert exc_info.value.code == "INVALID_TRANSITION"
        assert exc_info.value.status_code == 422

    def test_unknown_booking(self, db):
        with pytest.raises(BookingNotFoundException):
            BookingStatusService(db).update_booking_status(4242, "cancelled")

    @pytest.mark.parametrize("status", ["pending", "", "deleted"])
    def test_unknown_status(self, db, booking, status):
        with pytest.raises(ValidationException):
            BookingStatusService(db).update_booking_status(booking.id, status)

    def test_reconfirm_conflicts_with_completed_booking(self, db, slot):
        cancelled = create_booking(db, slot, client_email="b1@example.com", status=BookingStatus.CANCELLED)
        holder = create_booking(db, slot, client_email="b2@example.com", status=BookingStatus.COMPLETED)

        with pytest.raises(SlotConflictException) as exc_info:
            BookingStatusService(db).update_booking_status(cancelled.id, "confirmed")

        assert exc_info.value.details["conflicting_booking_id"] == holder.id
        assert reload(db, cancelled).status == BookingStatus.CANCELLED.value
        assert reload(db, holder).status == BookingStatus.COMPLETED.value
        assert reload(db, slot).status == SlotStatus.BOOKED.value

    def test_slot_relet_after_cancellation_cannot_be_resurrected(self, db, slot, booking):
        status_service = BookingStatusService(db)
        status_service.update_booking_status(booking.id, "cancelled")
        relet = BookingService(db).create_booking(slot.id, "Luis", "luis@example.com")

        with pytest.raises(SlotConflictException):
            status_service.update_booking_status(booking.id, "completed")

        assert reload(db, slot).status == SlotStatus.BOOKED.value
        assert reload(db, booking).status == BookingStatus.CANCELLED.value
        assert relet.status == BookingStatus.CONFIRMED.value

    def test_delete_is_cancel(self, db, slot, booking):
        transition = BookingStatusService(db).cancel_booking(booking.id)

        assert transition.new_status == BookingStatus.CANCELLED.value
        assert reload(db, booking) is not None
        assert reload(db, slot).status == SlotStatus.FREE.value
