# advisor_booking/commands/seed.py
"""
Seed advisors, bookable slots and a default admin.

Usage:
    python -m advisor_booking.commands.seed              # next 30 days
    python -m advisor_booking.commands.seed --days 14
    python -m advisor_booking.commands.seed --reset      # wipe all rows first

Slots are one hour long, 09:00-18:00 in each advisor's local time. Roughly
one in ten is created ``blocked``. Re-running without ``--reset`` only adds
slots that do not exist yet.
"""

import argparse
from datetime import date, datetime, timedelta
import logging
import random
import sys
from typing import Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import (
    DEFAULT_SEED_DAYS,
    SEED_BLOCKED_RATIO,
    SEED_DAY_END_HOUR,
    SEED_DAY_START_HOUR,
)
from ..core.enums import SlotStatus
from ..core.exceptions import ConflictException
from ..core.logging_config import configure_logging
from ..core.time_window import localize, to_timezone
from ..database import Base, SessionLocal, engine, session_scope
from ..models import Admin, Advisor, Booking, EmailLog, TimeSlot
from ..repositories.factory import RepositoryFactory
from ..services.auth_service import AuthService

logger = logging.getLogger(__name__)

ADVISORS = [
    {"name": "María García", "timezone": "America/Mexico_City"},
    {"name": "Roberto Silva", "timezone": "Europe/Madrid"},
    {"name": "Ana Martínez", "timezone": "America/Bogota"},
    {"name": "Carlos López", "timezone": "America/Argentina/Buenos_Aires"},
]


def reset_data(db: Session) -> None:
    """Delete every row, children first."""
    for model in (EmailLog, Booking, TimeSlot, Advisor, Admin):
        db.query(model).delete(synchronize_session=False)
    db.flush()
    db.expunge_all()
    logger.warning("All booking data deleted")


def ensure_advisors(db: Session) -> List[Advisor]:
    repository = RepositoryFactory.create_advisor_repository(db)
    advisors = []
    for spec in ADVISORS:
        advisor = repository.get_by_name(spec["name"])
        if advisor is None:
            advisor = repository.create(**spec)
            logger.info("Created advisor %s (%s)", advisor.name, advisor.timezone)
        advisors.append(advisor)
    return advisors


def build_slot_rows(
    advisor: Advisor,
    first_day: date,
    days: int,
    existing: set,
    rng: random.Random,
) -> List[Dict]:
    rows = []
    for offset in range(days):
        day = first_day + timedelta(days=offset)
        for hour in range(SEED_DAY_START_HOUR, SEED_DAY_END_HOUR):
            start = localize(datetime(day.year, day.month, day.day, hour), advisor.timezone)
            if start in existing:
                continue
            status = SlotStatus.BLOCKED if rng.random() < SEED_BLOCKED_RATIO else SlotStatus.FREE
            rows.append(
                {
                    "advisor_id": advisor.id,
                    "start_utc": start,
                    "end_utc": start + timedelta(hours=1),
                    "status": status.value,
                }
            )
    return rows


def seed_slots(
    db: Session,
    advisors: Sequence[Advisor],
    days: int,
    now: datetime,
    rng: random.Random,
) -> int:
    slot_repository = RepositoryFactory.create_slot_repository(db)
    created = 0
    for advisor in advisors:
        first_day = to_timezone(now, advisor.timezone).date() + timedelta(days=1)
        range_start = localize(datetime.combine(first_day, datetime.min.time()), advisor.timezone)
        range_end = range_start + timedelta(days=days + 1)
        existing = slot_repository.existing_starts(advisor.id, range_start, range_end)
        rows = build_slot_rows(advisor, first_day, days, existing, rng)
        slot_repository.bulk_create(rows)
        created += len(rows)
        logger.info("Advisor %s: %d new slots", advisor.name, len(rows))
    return created


def ensure_default_admin(db: Session) -> Optional[Admin]:
    if settings.is_production:
        logger.info("Production environment: default admin not created")
        return None
    try:
        admin = AuthService(db).create_admin(
            settings.admin_email, settings.admin_password.get_secret_value()
        )
    except ConflictException:
        logger.info("Default admin %s already exists", settings.admin_email)
        return None
    logger.info("Created default admin %s", admin.email)
    return admin


def seed(
    db: Session,
    *,
    days: int = DEFAULT_SEED_DAYS,
    reset: bool = False,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> Dict[str, int]:
    """Seed ``db`` and commit. Returns how many advisors and slots exist afterwards."""
    if days < 1:
        raise ValueError("days must be at least 1")
    now = now or datetime.now().astimezone()
    rng = rng or random.Random()

    if reset:
        reset_data(db)
    advisors = ensure_advisors(db)
    created = seed_slots(db, advisors, days, now, rng)
    db.commit()

    ensure_default_admin(db)
    return {"advisors": len(advisors), "slots_created": created}


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Seed advisors, time slots and a default admin")
    parser.add_argument(
        "--days", type=int, default=DEFAULT_SEED_DAYS, help="Number of days of slots to create"
    )
    parser.add_argument("--reset", action="store_true", help="Delete all existing data first")
    args = parser.parse_args(argv)

    configure_logging(settings.log_level, structured=settings.log_json)
    Base.metadata.create_all(bind=engine)

    with session_scope(SessionLocal) as db:
        summary = seed(db, days=args.days, reset=args.reset)

    print(f"Seeding complete: {summary['advisors']} advisors, {summary['slots_created']} new slots")
    return 0


if __name__ == "__main__":
    sys.exit(main())
