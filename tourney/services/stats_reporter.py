"""Dashboard statistics derived from tournaments and the registration ledger.

The global admin rollup is cached as a single snapshot row and recomputed when it
is older than the staleness window. Concurrent recomputes are allowed to race:
each one upserts a complete fresh computation, so the last writer wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from tourney.core.config import get_settings
from tourney.db.models.admin_stats import AdminStatsSnapshot
from tourney.db.repo.admin_stats_repo import AdminStatsRepo, AdminStatsUpsert
from tourney.db.repo.stats_repo import StatsRepo
from tourney.db.repo.users_repo import UsersRepo
from tourney.tournaments.constants import (
    ADMIN_STATS_SNAPSHOT_ID,
    RECENT_REGISTRATIONS_DAYS,
    TOURNAMENT_STATUS_COMPLETED,
    TOURNAMENT_STATUS_ONGOING,
    TOURNAMENT_STATUS_UPCOMING,
)

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class OrganizerStats:
    total_tournaments: int
    upcoming_tournaments: int
    ongoing_tournaments: int
    completed_tournaments: int
    active_tournaments: int
    total_participants: int
    total_revenue: int
    this_month_revenue: int
    average_participants: int


@dataclass(frozen=True, slots=True)
class RegistrationStats:
    total_registrations: int
    confirmed_registrations: int
    pending_registrations: int
    completed_payments: int
    recent_registrations: int
    total_revenue: int
    average_payment: float


@dataclass(frozen=True, slots=True)
class MonthlyRevenueRow:
    year: int
    month: int
    revenue: int
    tournaments: int
    participants: int


def month_start_utc(now_utc: datetime) -> datetime:
    return now_utc.astimezone(timezone.utc).replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def shift_months(month_start: datetime, months: int) -> datetime:
    month_index = month_start.year * 12 + (month_start.month - 1) + months
    return month_start.replace(year=month_index // 12, month=month_index % 12 + 1)


def average_rounded(*, total: int, count: int) -> int:
    if count <= 0:
        return 0
    return int((Decimal(total) / Decimal(count)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def is_snapshot_stale(last_updated: datetime | None, *, now_utc: datetime, staleness: timedelta) -> bool:
    if last_updated is None:
        return True
    return last_updated < now_utc - staleness


def _default_staleness() -> timedelta:
    return timedelta(seconds=get_settings().stats_staleness_seconds)


async def compute_global_stats(session: AsyncSession, *, now_utc: datetime) -> AdminStatsUpsert:
    by_status = await StatsRepo.count_tournaments_by_status(session)
    total_tournaments = sum(by_status.values())
    upcoming = by_status.get(TOURNAMENT_STATUS_UPCOMING, 0)
    ongoing = by_status.get(TOURNAMENT_STATUS_ONGOING, 0)

    total_users, active_users = await UsersRepo.count_totals(session)
    total_participants, total_revenue = await StatsRepo.ledger_totals(session)
    # Attributed to the tournament's creation month, not the payment month.
    _, this_month_revenue = await StatsRepo.ledger_totals(
        session,
        created_from=month_start_utc(now_utc),
    )

    return AdminStatsUpsert(
        total_tournaments=total_tournaments,
        active_tournaments=upcoming + ongoing,
        completed_tournaments=by_status.get(TOURNAMENT_STATUS_COMPLETED, 0),
        upcoming_tournaments=upcoming,
        total_users=total_users,
        active_users=active_users,
        total_revenue=total_revenue,
        this_month_revenue=this_month_revenue,
        average_participants=average_rounded(total=total_participants, count=total_tournaments),
        total_registrations=total_participants,
        last_updated=now_utc,
    )


async def refresh_global_stats(session: AsyncSession, *, now_utc: datetime) -> AdminStatsSnapshot:
    row = await compute_global_stats(session, now_utc=now_utc)
    snapshot = await AdminStatsRepo.upsert(session, snapshot_id=ADMIN_STATS_SNAPSHOT_ID, row=row)
    logger.info(
        "admin_stats_recomputed",
        total_tournaments=row.total_tournaments,
        total_registrations=row.total_registrations,
        total_revenue=row.total_revenue,
    )
    return snapshot


async def get_global_stats(
    session: AsyncSession,
    *,
    now_utc: datetime,
    staleness: timedelta | None = None,
) -> AdminStatsSnapshot:
    resolved_staleness = staleness if staleness is not None else _default_staleness()
    snapshot = await AdminStatsRepo.get(session, snapshot_id=ADMIN_STATS_SNAPSHOT_ID)
    if snapshot is not None and not is_snapshot_stale(
        snapshot.last_updated,
        now_utc=now_utc,
        staleness=resolved_staleness,
    ):
        return snapshot
    return await refresh_global_stats(session, now_utc=now_utc)


async def compute_organizer_stats(
    session: AsyncSession,
    *,
    organizer_id: int,
    now_utc: datetime,
) -> OrganizerStats:
    by_status = await StatsRepo.count_tournaments_by_status(
        session,
        organizer_id=organizer_id,
        active_only=True,
    )
    total_tournaments = sum(by_status.values())
    upcoming = by_status.get(TOURNAMENT_STATUS_UPCOMING, 0)
    ongoing = by_status.get(TOURNAMENT_STATUS_ONGOING, 0)
    total_participants, total_revenue = await StatsRepo.ledger_totals(
        session,
        organizer_id=organizer_id,
        active_only=True,
    )
    # Organizer view attributes revenue to the month the tournament starts in.
    month_start = month_start_utc(now_utc)
    _, this_month_revenue = await StatsRepo.ledger_totals(
        session,
        organizer_id=organizer_id,
        active_only=True,
        starts_from=month_start,
        starts_before=shift_months(month_start, 1),
    )
    return OrganizerStats(
        total_tournaments=total_tournaments,
        upcoming_tournaments=upcoming,
        ongoing_tournaments=ongoing,
        completed_tournaments=by_status.get(TOURNAMENT_STATUS_COMPLETED, 0),
        active_tournaments=upcoming + ongoing,
        total_participants=total_participants,
        total_revenue=total_revenue,
        this_month_revenue=this_month_revenue,
        average_participants=average_rounded(total=total_participants, count=total_tournaments),
    )


async def compute_registration_stats(session: AsyncSession, *, now_utc: datetime) -> RegistrationStats:
    counts = await StatsRepo.registration_counts(
        session,
        recent_from=now_utc - timedelta(days=RECENT_REGISTRATIONS_DAYS),
    )
    total_revenue, average_payment = await StatsRepo.payment_totals(session)
    return RegistrationStats(
        total_registrations=counts["total"],
        confirmed_registrations=counts["confirmed"],
        pending_registrations=counts["pending"],
        completed_payments=counts["payments_completed"],
        recent_registrations=counts["recent"],
        total_revenue=total_revenue,
        average_payment=round(average_payment, 2),
    )


async def compute_monthly_revenue(
    session: AsyncSession,
    *,
    now_utc: datetime,
    months: int = 6,
) -> list[MonthlyRevenueRow]:
    resolved_months = max(1, min(24, int(months)))
    created_from = shift_months(month_start_utc(now_utc), -(resolved_months - 1))
    rows = await StatsRepo.monthly_tournament_totals(session, created_from=created_from)
    return [
        MonthlyRevenueRow(
            year=year,
            month=month,
            revenue=revenue,
            tournaments=tournaments,
            participants=participants,
        )
        for year, month, tournaments, participants, revenue in rows
    ]
