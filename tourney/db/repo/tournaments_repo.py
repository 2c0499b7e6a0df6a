from __future__ import annotations

from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tourney.db.models.tournaments import Tournament


def _apply_filters(
    stmt: Select,
    *,
    status: str | None,
    sport_type: str | None,
    organizer_id: int | None,
    active_only: bool,
) -> Select:
    if status is not None:
        stmt = stmt.where(Tournament.status == status)
    if sport_type is not None:
        stmt = stmt.where(Tournament.sport_type == sport_type)
    if organizer_id is not None:
        stmt = stmt.where(Tournament.organizer_id == organizer_id)
    if active_only:
        stmt = stmt.where(Tournament.is_active.is_(True))
    return stmt


class TournamentsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, tournament: Tournament) -> Tournament:
        session.add(tournament)
        await session.flush()
        return tournament

    @staticmethod
    async def get_by_id(session: AsyncSession, tournament_id: UUID) -> Tournament | None:
        return await session.get(Tournament, tournament_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, tournament_id: UUID) -> Tournament | None:
        stmt = (
            select(Tournament)
            .where(Tournament.id == tournament_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def delete(session: AsyncSession, *, tournament: Tournament) -> None:
        await session.delete(tournament)
        await session.flush()

    @staticmethod
    async def list_page(
        session: AsyncSession,
        *,
        offset: int,
        limit: int,
        status: str | None = None,
        sport_type: str | None = None,
        organizer_id: int | None = None,
        active_only: bool = False,
        order_by_start: bool = False,
    ) -> list[Tournament]:
        stmt = _apply_filters(
            select(Tournament),
            status=status,
            sport_type=sport_type,
            organizer_id=organizer_id,
            active_only=active_only,
        )
        if order_by_start:
            stmt = stmt.order_by(Tournament.starts_at.desc(), Tournament.id.desc())
        else:
            stmt = stmt.order_by(Tournament.created_at.desc(), Tournament.id.desc())
        stmt = stmt.offset(max(0, int(offset))).limit(max(1, int(limit)))
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def count(
        session: AsyncSession,
        *,
        status: str | None = None,
        sport_type: str | None = None,
        organizer_id: int | None = None,
        active_only: bool = False,
    ) -> int:
        stmt = _apply_filters(
            select(func.count(Tournament.id)),
            status=status,
            sport_type=sport_type,
            organizer_id=organizer_id,
            active_only=active_only,
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

    @staticmethod
    async def list_recent(session: AsyncSession, *, limit: int) -> list[Tournament]:
        stmt = (
            select(Tournament)
            .order_by(Tournament.created_at.desc(), Tournament.id.desc())
            .limit(max(1, int(limit)))
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
