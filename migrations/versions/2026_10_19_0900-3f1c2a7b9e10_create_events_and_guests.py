"""create users, events and guests

Revision ID: 3f1c2a7b9e10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f1c2a7b9e10"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    op.create_table(
        "events",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("host_id", sa.UUID(), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("start_date_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("timezone", sa.String(length=64), nullable=False),
        sa.Column("location_address", sa.String(length=500), nullable=True),
        sa.Column("location_unit", sa.String(length=255), nullable=True),
        sa.Column("show_map", sa.Boolean(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("DRAFT", "PUBLISHED", "CANCELLED", "COMPLETED", name="event_status_enum"),
            nullable=False,
        ),
        sa.Column("private_guest_list", sa.Boolean(), nullable=False),
        sa.Column("allow_plus_ones", sa.Boolean(), nullable=False),
        sa.Column("allow_maybe_rsvp", sa.Boolean(), nullable=False),
        sa.Column("allow_family_headcount", sa.Boolean(), nullable=False),
        sa.Column("limit_event_capacity", sa.Boolean(), nullable=False),
        sa.Column("max_event_capacity", sa.Integer(), nullable=False),
        sa.Column("max_plus_ones", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("max_event_capacity >= 1", name="ck_events_max_event_capacity"),
        sa.CheckConstraint("max_plus_ones >= 0", name="ck_events_max_plus_ones"),
        sa.ForeignKeyConstraint(["host_id"], ["users.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index(op.f("ix_events_host_id"), "events", ["host_id"], unique=False)

    op.create_table(
        "guests",
        sa.Column("uuid", sa.UUID(), nullable=False),
        sa.Column("event_id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column(
            "status",
            sa.Enum(
                "PENDING", "INVITED", "CONFIRMED", "DECLINED", "MAYBE", name="guest_status_enum"
            ),
            nullable=False,
        ),
        sa.Column(
            "response",
            sa.Enum("YES", "NO", "MAYBE", name="guest_response_enum"),
            nullable=True,
        ),
        sa.Column("invited_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("responded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("plus_ones", sa.Integer(), nullable=False),
        sa.Column("adults", sa.Integer(), nullable=False),
        sa.Column("children", sa.Integer(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["event_id"], ["events.uuid"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("uuid"),
    )
    op.create_index(op.f("ix_guests_event_id"), "guests", ["event_id"], unique=False)
    op.create_index(op.f("ix_guests_email"), "guests", ["email"], unique=False)
    op.create_index(op.f("ix_guests_status"), "guests", ["status"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_guests_status"), table_name="guests")
    op.drop_index(op.f("ix_guests_email"), table_name="guests")
    op.drop_index(op.f("ix_guests_event_id"), table_name="guests")
    op.drop_table("guests")
    op.drop_index(op.f("ix_events_host_id"), table_name="events")
    op.drop_table("events")
    op.drop_index(op.f("ix_users_email"), table_name="users")
    op.drop_table("users")

    sa.Enum(name="guest_response_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="guest_status_enum").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="event_status_enum").drop(op.get_bind(), checkfirst=True)
