"""Participant counts and revenue derived from the registration ledger.

Nothing here is stored: every figure is recomputed from active registration rows at
call time, so it cannot drift from the ledger.
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from tourney.db.repo.registrations_repo import RegistrationsRepo
from tourney.tournaments.types import TournamentTotals


async def participant_count(session: AsyncSession, *, tournament_id: UUID) -> int:
    return await RegistrationsRepo.count_participants(session, tournament_id=tournament_id)


async def total_revenue(session: AsyncSession, *, tournament_id: UUID) -> int:
    return await RegistrationsRepo.sum_revenue(session, tournament_id=tournament_id)


async def tournament_totals(
    session: AsyncSession,
    *,
    tournament_ids: Sequence[UUID],
) -> dict[UUID, TournamentTotals]:
    rows = await RegistrationsRepo.totals_by_tournament(session, tournament_ids=tournament_ids)
    return {
        tournament_id: TournamentTotals(
            participants=rows.get(tournament_id, (0, 0))[0],
            total_revenue=rows.get(tournament_id, (0, 0))[1],
        )
        for tournament_id in tournament_ids
    }


async def totals_for(session: AsyncSession, *, tournament_id: UUID) -> TournamentTotals:
    totals = await tournament_totals(session, tournament_ids=(tournament_id,))
    return totals[tournament_id]
