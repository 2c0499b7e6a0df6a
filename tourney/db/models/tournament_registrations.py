from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from tourney.db.models.base import Base


class TournamentRegistration(Base):
    __tablename__ = "tournament_registrations"
    __table_args__ = (
        CheckConstraint(
            "payment_status IN ('pending','completed','failed','refunded')",
            name="ck_tournament_registrations_payment_status",
        ),
        CheckConstraint(
            "registration_status IN ('pending','confirmed','waitlisted','cancelled','completed')",
            name="ck_tournament_registrations_registration_status",
        ),
        CheckConstraint(
            "payment_method IN ('card','upi','netbanking','wallet','cash')",
            name="ck_tournament_registrations_payment_method",
        ),
        CheckConstraint(
            "amount_paid >= 0",
            name="ck_tournament_registrations_amount_paid_non_negative",
        ),
        CheckConstraint(
            "is_active OR registration_status = 'cancelled'",
            name="ck_tournament_registrations_inactive_only_when_cancelled",
        ),
        Index(
            "uq_tournament_registrations_active_tournament_user",
            "tournament_id",
            "user_id",
            unique=True,
            postgresql_where=text("is_active"),
        ),
        Index("idx_tournament_registrations_tournament", "tournament_id", "registration_status"),
        Index("idx_tournament_registrations_user", "user_id", "registered_at"),
        Index("idx_tournament_registrations_registered_at", "registered_at"),
        Index("idx_tournament_registrations_payment_status", "payment_status"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    tournament_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("tournaments.id"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id"), nullable=False)
    registered_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    payment_status: Mapped[str] = mapped_column(String(16), nullable=False)
    registration_status: Mapped[str] = mapped_column(String(16), nullable=False)
    payment_method: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        server_default=text("'card'"),
    )
    amount_paid: Mapped[int] = mapped_column(BigInteger, nullable=False, server_default=text("0"))
    transaction_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    profile: Mapped[dict[str, object] | None] = mapped_column(JSONB, nullable=True)
    has_full_profile: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        server_default=text("false"),
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    cancel_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    admin_notes: Mapped[list[dict[str, object]]] = mapped_column(
        JSONB,
        nullable=False,
        server_default=text("'[]'::jsonb"),
    )
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
