"""tournament_registrations_core

Revision ID: 5d1e2f3a4b60
Revises:
Create Date: 2026-10-18 09:00:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "5d1e2f3a4b60"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("role", sa.String(16), nullable=False, server_default=sa.text("'user'")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("role IN ('user','organizer','admin')", name="ck_users_role"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )
    op.create_index("idx_users_created_at", "users", ["created_at"])

    op.create_table(
        "tournaments",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("sport_type", sa.String(16), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("max_participants", sa.Integer(), nullable=False),
        sa.Column("entry_fee", sa.BigInteger(), nullable=False),
        sa.Column("organizer_id", sa.BigInteger(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("description", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("location", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("rules", postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("prizes", postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "sport_type IN ('Cricket','Football','Basketball','Tennis','Volleyball','Badminton','Other')",
            name="ck_tournaments_sport_type",
        ),
        sa.CheckConstraint(
            "status IN ('upcoming','ongoing','completed','cancelled')",
            name="ck_tournaments_status",
        ),
        sa.CheckConstraint("max_participants >= 1", name="ck_tournaments_max_participants_positive"),
        sa.CheckConstraint("entry_fee >= 0", name="ck_tournaments_entry_fee_non_negative"),
        sa.CheckConstraint("ends_at IS NULL OR ends_at >= starts_at", name="ck_tournaments_ends_after_start"),
        sa.ForeignKeyConstraint(["organizer_id"], ["users.id"]),
    )
    op.create_index("idx_tournaments_status_starts_at", "tournaments", ["status", "starts_at"])
    op.create_index("idx_tournaments_organizer", "tournaments", ["organizer_id"])
    op.create_index("idx_tournaments_created_at", "tournaments", ["created_at"])

    op.create_table(
        "tournament_registrations",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("tournament_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("registered_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("payment_status", sa.String(16), nullable=False),
        sa.Column("registration_status", sa.String(16), nullable=False),
        sa.Column("payment_method", sa.String(16), nullable=False, server_default=sa.text("'card'")),
        sa.Column("amount_paid", sa.BigInteger(), nullable=False, server_default=sa.text("0")),
        sa.Column("transaction_id", sa.String(128), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("profile", postgresql.JSONB(), nullable=True),
        sa.Column("has_full_profile", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancel_reason", sa.Text(), nullable=True),
        sa.Column("admin_notes", postgresql.JSONB(), nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "payment_status IN ('pending','completed','failed','refunded')",
            name="ck_tournament_registrations_payment_status",
        ),
        sa.CheckConstraint(
            "registration_status IN ('pending','confirmed','waitlisted','cancelled','completed')",
            name="ck_tournament_registrations_registration_status",
        ),
        sa.CheckConstraint(
            "payment_method IN ('card','upi','netbanking','wallet','cash')",
            name="ck_tournament_registrations_payment_method",
        ),
        sa.CheckConstraint("amount_paid >= 0", name="ck_tournament_registrations_amount_paid_non_negative"),
        sa.CheckConstraint(
            "is_active OR registration_status = 'cancelled'",
            name="ck_tournament_registrations_inactive_only_when_cancelled",
        ),
        sa.ForeignKeyConstraint(["tournament_id"], ["tournaments.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
    )
    op.create_index(
        "uq_tournament_registrations_active_tournament_user",
        "tournament_registrations",
        ["tournament_id", "user_id"],
        unique=True,
        postgresql_where=sa.text("is_active"),
    )
    op.create_index(
        "idx_tournament_registrations_tournament",
        "tournament_registrations",
        ["tournament_id", "registration_status"],
    )
    op.create_index(
        "idx_tournament_registrations_user",
        "tournament_registrations",
        ["user_id", "registered_at"],
    )
    op.create_index(
        "idx_tournament_registrations_registered_at",
        "tournament_registrations",
        ["registered_at"],
    )
    op.create_index(
        "idx_tournament_registrations_payment_status",
        "tournament_registrations",
        ["payment_status"],
    )

    op.create_table(
        "admin_stats",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("total_tournaments", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("active_tournaments", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("completed_tournaments", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("upcoming_tournaments", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("total_users", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("active_users", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("total_revenue", sa.BigInteger(), nullable=False, server_default=sa.text("0")),
        sa.Column("this_month_revenue", sa.BigInteger(), nullable=False, server_default=sa.text("0")),
        sa.Column("average_participants", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("total_registrations", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("total_tournaments >= 0", name="ck_admin_stats_total_tournaments_non_negative"),
        sa.CheckConstraint("total_revenue >= 0", name="ck_admin_stats_total_revenue_non_negative"),
        sa.CheckConstraint(
            "total_registrations >= 0",
            name="ck_admin_stats_total_registrations_non_negative",
        ),
    )

    op.create_table(
        "outbox_events",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("event_type", sa.String(64), nullable=False),
        sa.Column("registration_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("tournament_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("payload", postgresql.JSONB(), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("happened_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("idx_outbox_events_status_created", "outbox_events", ["status", "created_at"])
    op.create_index("idx_outbox_events_registration", "outbox_events", ["registration_id", "id"])


def downgrade() -> None:
    op.drop_index("idx_outbox_events_registration", table_name="outbox_events")
    op.drop_index("idx_outbox_events_status_created", table_name="outbox_events")
    op.drop_table("outbox_events")
    op.drop_table("admin_stats")
    op.drop_index("idx_tournament_registrations_payment_status", table_name="tournament_registrations")
    op.drop_index("idx_tournament_registrations_registered_at", table_name="tournament_registrations")
    op.drop_index("idx_tournament_registrations_user", table_name="tournament_registrations")
    op.drop_index("idx_tournament_registrations_tournament", table_name="tournament_registrations")
    op.drop_index(
        "uq_tournament_registrations_active_tournament_user",
        table_name="tournament_registrations",
    )
    op.drop_table("tournament_registrations")
    op.drop_index("idx_tournaments_created_at", table_name="tournaments")
    op.drop_index("idx_tournaments_organizer", table_name="tournaments")
    op.drop_index("idx_tournaments_status_starts_at", table_name="tournaments")
    op.drop_table("tournaments")
    op.drop_index("idx_users_created_at", table_name="users")
    op.drop_table("users")
