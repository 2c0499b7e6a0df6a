from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tourney.db.models.outbox_events import OutboxEvent


class OutboxEventsRepo:
    @staticmethod
    async def append(
        session: AsyncSession,
        *,
        event_type: str,
        registration_id: UUID,
        tournament_id: UUID,
        payload: dict[str, object],
        status: str,
        happened_at: datetime,
    ) -> OutboxEvent:
        event = OutboxEvent(
            event_type=event_type,
            registration_id=registration_id,
            tournament_id=tournament_id,
            payload=payload,
            status=status,
            happened_at=happened_at,
        )
        session.add(event)
        await session.flush()
        return event

    @staticmethod
    async def list_for_registration(
        session: AsyncSession,
        *,
        registration_id: UUID,
        event_type: str | None = None,
    ) -> list[OutboxEvent]:
        stmt = select(OutboxEvent).where(OutboxEvent.registration_id == registration_id)
        if event_type is not None:
            stmt = stmt.where(OutboxEvent.event_type == event_type)
        result = await session.execute(stmt.order_by(OutboxEvent.id.asc()))
        return list(result.scalars().all())
