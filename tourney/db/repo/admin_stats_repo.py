from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from tourney.db.models.admin_stats import AdminStatsSnapshot


@dataclass(frozen=True, slots=True)
class AdminStatsUpsert:
    total_tournaments: int
    active_tournaments: int
    completed_tournaments: int
    upcoming_tournaments: int
    total_users: int
    active_users: int
    total_revenue: int
    this_month_revenue: int
    average_participants: int
    total_registrations: int
    last_updated: datetime


class AdminStatsRepo:
    @staticmethod
    async def get(session: AsyncSession, *, snapshot_id: int) -> AdminStatsSnapshot | None:
        stmt = select(AdminStatsSnapshot).where(AdminStatsSnapshot.id == snapshot_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def upsert(
        session: AsyncSession,
        *,
        snapshot_id: int,
        row: AdminStatsUpsert,
    ) -> AdminStatsSnapshot:
        values = asdict(row)
        stmt = (
            insert(AdminStatsSnapshot)
            .values(id=snapshot_id, **values)
            .on_conflict_do_update(index_elements=[AdminStatsSnapshot.id], set_=values)
            .returning(AdminStatsSnapshot)
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one()
