from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

from tourney.db.repo.users_repo import UsersRepo
from tourney.db.session import SessionLocal
from tourney.tournaments import aggregator, service
from tourney.tournaments.types import Actor

UTC = timezone.utc


async def _create_user(seed: str, *, role: str = "user") -> int:
    async with SessionLocal.begin() as session:
        user = await UsersRepo.create(
            session,
            email=f"{seed}-{uuid4().hex[:8]}@example.test",
            name=seed,
            role=role,
        )
        return user.id


async def _create_tournament(
    *,
    now_utc: datetime,
    max_participants: int,
    entry_fee: int = 500,
    organizer_id: int | None = None,
    starts_at: datetime | None = None,
) -> UUID:
    resolved_organizer_id = organizer_id or await _create_user("organizer", role="organizer")
    async with SessionLocal.begin() as session:
        tournament = await service.create_tournament(
            session,
            actor=Actor(user_id=resolved_organizer_id, role="organizer"),
            name="Integration Cup",
            sport_type="Football",
            starts_at=starts_at or now_utc + timedelta(days=7),
            max_participants=max_participants,
            entry_fee=entry_fee,
            now_utc=now_utc,
        )
        return tournament.tournament_id


async def _tournament_totals(tournament_id: UUID) -> tuple[int, int]:
    async with SessionLocal.begin() as session:
        tournament = await service.get_tournament(session, tournament_id=tournament_id)
    return tournament.participants, tournament.total_revenue


async def _ledger_totals(tournament_id: UUID) -> tuple[int, int]:
    async with SessionLocal.begin() as session:
        participants = await aggregator.participant_count(session, tournament_id=tournament_id)
        revenue = await aggregator.total_revenue(session, tournament_id=tournament_id)
    return participants, revenue
