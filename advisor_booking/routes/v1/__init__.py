from . import admin, auth, bookings, reminders

__all__ = ["admin", "auth", "bookings", "reminders"]
