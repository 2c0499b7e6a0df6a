from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import BigInteger, DateTime, Index, String, text
from sqlalchemy.dialects.postgresql import JSONB, UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from tourney.db.models.base import Base


class OutboxEvent(Base):
    """Registration lifecycle event written in the same transaction as the ledger change."""

    __tablename__ = "outbox_events"
    __table_args__ = (
        Index("idx_outbox_events_status_created", "status", "created_at"),
        Index("idx_outbox_events_registration", "registration_id", "id"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    event_type: Mapped[str] = mapped_column(String(64), nullable=False)
    registration_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    tournament_id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), nullable=False)
    payload: Mapped[dict[str, object]] = mapped_column(JSONB, nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False)
    happened_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
