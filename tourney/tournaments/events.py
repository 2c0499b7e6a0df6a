from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from tourney.db.models.tournament_registrations import TournamentRegistration
from tourney.db.repo.outbox_events_repo import OutboxEventsRepo
from tourney.tournaments.constants import OUTBOX_STATUS_NEW

logger = structlog.get_logger(__name__)


async def emit_registration_event(
    session: AsyncSession,
    *,
    event_type: str,
    registration: TournamentRegistration,
    happened_at: datetime,
    extra_payload: dict[str, object] | None = None,
) -> None:
    payload: dict[str, object] = {
        "registration_id": str(registration.id),
        "tournament_id": str(registration.tournament_id),
        "user_id": int(registration.user_id),
        "registration_status": registration.registration_status,
        "payment_status": registration.payment_status,
        "amount_paid": int(registration.amount_paid or 0),
        "happened_at": happened_at.isoformat(),
    }
    if extra_payload:
        payload.update(extra_payload)
    await OutboxEventsRepo.append(
        session,
        event_type=event_type,
        registration_id=registration.id,
        tournament_id=registration.tournament_id,
        payload=payload,
        status=OUTBOX_STATUS_NEW,
        happened_at=happened_at,
    )
    logger.info(
        "registration_event_enqueued",
        event_type=event_type,
        registration_id=str(registration.id),
    )
