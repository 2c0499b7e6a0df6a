from __future__ import annotations

from datetime import datetime

from sqlalchemy import Integer, cast, extract, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tourney.db.models.tournament_registrations import TournamentRegistration
from tourney.db.models.tournaments import Tournament
from tourney.tournaments.constants import (
    PAYMENT_STATUS_COMPLETED,
    REGISTRATION_COUNTED_STATUSES,
    REGISTRATION_STATUS_CONFIRMED,
    REGISTRATION_STATUS_PENDING,
)

_COUNTED = TournamentRegistration.registration_status.in_(REGISTRATION_COUNTED_STATUSES)
_PAID = TournamentRegistration.payment_status == PAYMENT_STATUS_COMPLETED


def _tournament_filters(
    *,
    organizer_id: int | None,
    active_only: bool,
    created_from: datetime | None,
    starts_from: datetime | None = None,
    starts_before: datetime | None = None,
) -> list:
    filters: list = []
    if organizer_id is not None:
        filters.append(Tournament.organizer_id == organizer_id)
    if active_only:
        filters.append(Tournament.is_active.is_(True))
    if created_from is not None:
        filters.append(Tournament.created_at >= created_from)
    if starts_from is not None:
        filters.append(Tournament.starts_at >= starts_from)
    if starts_before is not None:
        filters.append(Tournament.starts_at < starts_before)
    return filters


class StatsRepo:
    @staticmethod
    async def count_tournaments_by_status(
        session: AsyncSession,
        *,
        organizer_id: int | None = None,
        active_only: bool = False,
    ) -> dict[str, int]:
        stmt = (
            select(Tournament.status, func.count(Tournament.id))
            .where(*_tournament_filters(organizer_id=organizer_id, active_only=active_only, created_from=None))
            .group_by(Tournament.status)
        )
        result = await session.execute(stmt)
        return {str(status): int(total) for status, total in result.all()}

    @staticmethod
    async def ledger_totals(
        session: AsyncSession,
        *,
        organizer_id: int | None = None,
        active_only: bool = False,
        created_from: datetime | None = None,
        starts_from: datetime | None = None,
        starts_before: datetime | None = None,
    ) -> tuple[int, int]:
        """Participants and revenue derived from active registrations, joined to tournaments."""
        stmt = (
            select(
                func.count(TournamentRegistration.id).filter(_COUNTED),
                func.coalesce(func.sum(TournamentRegistration.amount_paid).filter(_PAID), 0),
            )
            .select_from(TournamentRegistration)
            .join(Tournament, Tournament.id == TournamentRegistration.tournament_id)
            .where(
                TournamentRegistration.is_active.is_(True),
                *_tournament_filters(
                    organizer_id=organizer_id,
                    active_only=active_only,
                    created_from=created_from,
                    starts_from=starts_from,
                    starts_before=starts_before,
                ),
            )
        )
        result = await session.execute(stmt)
        participants, revenue = result.one()
        return int(participants or 0), int(revenue or 0)

    @staticmethod
    async def registration_counts(
        session: AsyncSession,
        *,
        recent_from: datetime,
    ) -> dict[str, int]:
        stmt = select(
            func.count(TournamentRegistration.id),
            func.count(TournamentRegistration.id).filter(
                TournamentRegistration.registration_status == REGISTRATION_STATUS_CONFIRMED
            ),
            func.count(TournamentRegistration.id).filter(
                TournamentRegistration.registration_status == REGISTRATION_STATUS_PENDING
            ),
            func.count(TournamentRegistration.id).filter(_PAID),
            func.count(TournamentRegistration.id).filter(
                TournamentRegistration.registered_at >= recent_from
            ),
        ).where(TournamentRegistration.is_active.is_(True))
        result = await session.execute(stmt)
        total, confirmed, pending, paid, recent = result.one()
        return {
            "total": int(total or 0),
            "confirmed": int(confirmed or 0),
            "pending": int(pending or 0),
            "payments_completed": int(paid or 0),
            "recent": int(recent or 0),
        }

    @staticmethod
    async def payment_totals(session: AsyncSession) -> tuple[int, float]:
        stmt = select(
            func.coalesce(func.sum(TournamentRegistration.amount_paid), 0),
            func.coalesce(func.avg(TournamentRegistration.amount_paid), 0),
        ).where(TournamentRegistration.is_active.is_(True), _PAID)
        result = await session.execute(stmt)
        total, average = result.one()
        return int(total or 0), float(average or 0)

    @staticmethod
    async def monthly_tournament_totals(
        session: AsyncSession,
        *,
        created_from: datetime,
    ) -> list[tuple[int, int, int, int, int]]:
        """Rows of (year, month, tournaments, participants, revenue) by tournament creation month."""
        ledger = (
            select(
                TournamentRegistration.tournament_id.label("tournament_id"),
                func.count(TournamentRegistration.id).filter(_COUNTED).label("participants"),
                func.coalesce(
                    func.sum(TournamentRegistration.amount_paid).filter(_PAID),
                    0,
                ).label("revenue"),
            )
            .where(TournamentRegistration.is_active.is_(True))
            .group_by(TournamentRegistration.tournament_id)
            .subquery()
        )
        year = cast(extract("year", Tournament.created_at), Integer)
        month = cast(extract("month", Tournament.created_at), Integer)
        stmt = (
            select(
                year,
                month,
                func.count(Tournament.id),
                func.coalesce(func.sum(ledger.c.participants), 0),
                func.coalesce(func.sum(ledger.c.revenue), 0),
            )
            .select_from(Tournament)
            .outerjoin(ledger, ledger.c.tournament_id == Tournament.id)
            .where(Tournament.created_at >= created_from)
            .group_by(year, month)
            .order_by(year.asc(), month.asc())
        )
        result = await session.execute(stmt)
        return [
            (int(y), int(m), int(tournaments or 0), int(participants or 0), int(revenue or 0))
            for y, m, tournaments, participants, revenue in result.all()
        ]
