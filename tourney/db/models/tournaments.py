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
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from tourney.db.models.base import Base


class Tournament(Base):
    __tablename__ = "tournaments"
    __table_args__ = (
        CheckConstraint(
            "sport_type IN ('Cricket','Football','Basketball','Tennis','Volleyball','Badminton','Other')",
            name="ck_tournaments_sport_type",
        ),
        CheckConstraint(
            "status IN ('upcoming','ongoing','completed','cancelled')",
            name="ck_tournaments_status",
        ),
        CheckConstraint("max_participants >= 1", name="ck_tournaments_max_participants_positive"),
        CheckConstraint("entry_fee >= 0", name="ck_tournaments_entry_fee_non_negative"),
        CheckConstraint(
            "ends_at IS NULL OR ends_at >= starts_at",
            name="ck_tournaments_ends_after_start",
        ),
        Index("idx_tournaments_status_starts_at", "status", "starts_at"),
        Index("idx_tournaments_organizer", "organizer_id"),
        Index("idx_tournaments_created_at", "created_at"),
    )

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    sport_type: Mapped[str] = mapped_column(String(16), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False)
    starts_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ends_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    max_participants: Mapped[int] = mapped_column(Integer, nullable=False)
    entry_fee: Mapped[int] = mapped_column(BigInteger, nullable=False)
    organizer_id: Mapped[int] = mapped_column(BigInteger, ForeignKey("users.id"), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"))
    description: Mapped[str] = mapped_column(Text, nullable=False, server_default=text("''"))
    location: Mapped[str] = mapped_column(Text, nullable=False, server_default=text("''"))
    rules: Mapped[list[str]] = mapped_column(JSONB, nullable=False, server_default=text("'[]'::jsonb"))
    prizes: Mapped[list[dict[str, object]]] = mapped_column(
        JSONB,
        nullable=False,
        server_default=text("'[]'::jsonb"),
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
