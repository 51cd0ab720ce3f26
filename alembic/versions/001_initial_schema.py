# alembic/versions/001_initial_schema.py
"""Initial schema - advisors, time slots, bookings, email logs, admins

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-18 00:00:00.000000

Slots are pre-generated fixed-length units owned by an advisor. A booking
references exactly one slot; email_logs is the append-only notification
audit trail. Status columns are VARCHAR with CHECK constraints rather than
database ENUMs.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    print("Creating advisor booking schema...")

    op.create_table(
        "advisors",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("timezone", sa.String(50), nullable=False, server_default="UTC"),
        *_timestamps(),
    )

    op.create_table(
        "time_slots",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "advisor_id",
            sa.Integer(),
            sa.ForeignKey("advisors.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("start_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_utc", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="free"),
        *_timestamps(),
        sa.UniqueConstraint("advisor_id", "start_utc", "end_utc", name="uq_time_slots_advisor_range"),
        sa.CheckConstraint("status IN ('free', 'booked', 'blocked')", name="ck_time_slots_status"),
        sa.CheckConstraint("end_utc > start_utc", name="ck_time_slots_range"),
    )
    op.create_index(
        "ix_time_slots_advisor_start_status", "time_slots", ["advisor_id", "start_utc", "status"]
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "slot_id",
            sa.Integer(),
            sa.ForeignKey("time_slots.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "advisor_id",
            sa.Integer(),
            sa.ForeignKey("advisors.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("client_name", sa.String(255), nullable=False),
        sa.Column("client_email", sa.String(255), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="confirmed"),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('confirmed', 'cancelled', 'completed')", name="ck_bookings_status"
        ),
    )
    op.create_index("ix_bookings_slot_id", "bookings", ["slot_id"])
    op.create_index("ix_bookings_client_email", "bookings", ["client_email"])

    op.create_table(
        "email_logs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "booking_id",
            sa.Integer(),
            sa.ForeignKey("bookings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "type IN ('confirmation', 'reminder_24h', 'reminder_1h')", name="ck_email_logs_type"
        ),
        sa.CheckConstraint("status IN ('pending', 'sent', 'failed')", name="ck_email_logs_status"),
    )
    op.create_index(
        "ix_email_logs_booking_type_status", "email_logs", ["booking_id", "type", "status"]
    )

    op.create_table(
        "admins",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        *_timestamps(),
    )

    print("Advisor booking schema created")


def downgrade() -> None:
    print("Dropping advisor booking schema...")
    op.drop_table("admins")
    op.drop_index("ix_email_logs_booking_type_status", table_name="email_logs")
    op.drop_table("email_logs")
    op.drop_index("ix_bookings_client_email", table_name="bookings")
    op.drop_index("ix_bookings_slot_id", table_name="bookings")
    op.drop_table("bookings")
    op.drop_index("ix_time_slots_advisor_start_status", table_name="time_slots")
    op.drop_table("time_slots")
    op.drop_table("advisors")
