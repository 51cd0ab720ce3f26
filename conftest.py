# conftest.py
"""
Root pytest configuration.

Testing mode and the console email provider are forced BEFORE any
advisor_booking import so settings are built with them.
"""

import os

os.environ["IS_TESTING"] = "true"
os.environ["EMAIL_PROVIDER"] = "console"
os.environ["REMINDER_SCHEDULER_ENABLED"] = "false"
os.environ.setdefault("DATABASE_URL", "sqlite:///./advisor_booking_test.db")

# No test may reach the real Resend API.
import unittest.mock

global_resend_mock = unittest.mock.patch("resend.Emails.send")
mocked_send = global_resend_mock.start()
mocked_send.return_value = {"id": "test-email-id"}
