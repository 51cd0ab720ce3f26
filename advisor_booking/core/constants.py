"""Application-wide constants for the advisor booking service."""

SERVICE_NAME = "Advisor Booking API"
API_VERSION = "1.0.0"

# Client input constraints
MIN_CLIENT_NAME_LENGTH = 2
MAX_CLIENT_NAME_LENGTH = 255
MAX_EMAIL_LENGTH = 255

# Query limits
EMAIL_LOG_QUERY_LIMIT = 100

# Reminder scheduling
DEFAULT_REMINDER_INTERVAL_MINUTES = 5
DEFAULT_TASK_QUEUE = "celery"
REMINDER_TASK_QUEUE = "notifications"

# Seed data
DEFAULT_SEED_DAYS = 30
SEED_DAY_START_HOUR = 9
SEED_DAY_END_HOUR = 18
SEED_BLOCKED_RATIO = 0.1

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
