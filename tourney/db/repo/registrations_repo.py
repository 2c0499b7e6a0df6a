from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tourney.db.models.tournament_registrations import TournamentRegistration
from tourney.tournaments.constants import PAYMENT_STATUS_COMPLETED, REGISTRATION_COUNTED_STATUSES

_COUNTED = (
    TournamentRegistration.is_active.is_(True),
    TournamentRegistration.registration_status.in_(REGISTRATION_COUNTED_STATUSES),
)
_PAID = (
    TournamentRegistration.is_active.is_(True),
    TournamentRegistration.payment_status == PAYMENT_STATUS_COMPLETED,
)


def _apply_filters(
    stmt: Select,
    *,
    registration_status: str | None,
    tournament_id: UUID | None,
) -> Select:
    stmt = stmt.where(TournamentRegistration.is_active.is_(True))
    if registration_status is not None:
        stmt = stmt.where(TournamentRegistration.registration_status == registration_status)
    if tournament_id is not None:
        stmt = stmt.where(TournamentRegistration.tournament_id == tournament_id)
    return stmt


class RegistrationsRepo:
    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        registration: TournamentRegistration,
    ) -> TournamentRegistration:
        session.add(registration)
        await session.flush()
        return registration

    @staticmethod
    async def get_by_id(session: AsyncSession, registration_id: UUID) -> TournamentRegistration | None:
        return await session.get(TournamentRegistration, registration_id)

    @staticmethod
    async def get_by_id_for_update(
        session: AsyncSession,
        registration_id: UUID,
    ) -> TournamentRegistration | None:
        stmt = (
            select(TournamentRegistration)
            .where(TournamentRegistration.id == registration_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_active_for_user(
        session: AsyncSession,
        *,
        tournament_id: UUID,
        user_id: int,
    ) -> TournamentRegistration | None:
        stmt = select(TournamentRegistration).where(
            TournamentRegistration.tournament_id == tournament_id,
            TournamentRegistration.user_id == user_id,
            TournamentRegistration.is_active.is_(True),
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def count_participants(session: AsyncSession, *, tournament_id: UUID) -> int:
        stmt = select(func.count(TournamentRegistration.id)).where(
            TournamentRegistration.tournament_id == tournament_id,
            *_COUNTED,
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

    @staticmethod
    async def sum_revenue(session: AsyncSession, *, tournament_id: UUID) -> int:
        stmt = select(func.coalesce(func.sum(TournamentRegistration.amount_paid), 0)).where(
            TournamentRegistration.tournament_id == tournament_id,
            *_PAID,
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

    @staticmethod
    async def totals_by_tournament(
        session: AsyncSession,
        *,
        tournament_ids: Sequence[UUID],
    ) -> dict[UUID, tuple[int, int]]:
        if not tournament_ids:
            return {}
        participants = func.count(TournamentRegistration.id).filter(
            TournamentRegistration.registration_status.in_(REGISTRATION_COUNTED_STATUSES)
        )
        revenue = func.coalesce(
            func.sum(TournamentRegistration.amount_paid).filter(
                TournamentRegistration.payment_status == PAYMENT_STATUS_COMPLETED
            ),
            0,
        )
        stmt = (
            select(TournamentRegistration.tournament_id, participants, revenue)
            .where(
                TournamentRegistration.tournament_id.in_(tuple(tournament_ids)),
                TournamentRegistration.is_active.is_(True),
            )
            .group_by(TournamentRegistration.tournament_id)
        )
        result = await session.execute(stmt)
        return {
            tournament_id: (int(count or 0), int(total or 0))
            for tournament_id, count, total in result.all()
        }

    @staticmethod
    async def exists_for_tournament(session: AsyncSession, *, tournament_id: UUID) -> bool:
        stmt = (
            select(TournamentRegistration.id)
            .where(TournamentRegistration.tournament_id == tournament_id)
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def list_for_tournament(
        session: AsyncSession,
        *,
        tournament_id: UUID,
    ) -> list[TournamentRegistration]:
        stmt = (
            select(TournamentRegistration)
            .where(
                TournamentRegistration.tournament_id == tournament_id,
                TournamentRegistration.is_active.is_(True),
            )
            .order_by(TournamentRegistration.registered_at.desc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_for_user(session: AsyncSession, *, user_id: int) -> list[TournamentRegistration]:
        stmt = (
            select(TournamentRegistration)
            .where(TournamentRegistration.user_id == user_id)
            .order_by(TournamentRegistration.registered_at.desc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_page(
        session: AsyncSession,
        *,
        offset: int,
        limit: int,
        registration_status: str | None = None,
        tournament_id: UUID | None = None,
    ) -> list[TournamentRegistration]:
        stmt = (
            _apply_filters(
                select(TournamentRegistration),
                registration_status=registration_status,
                tournament_id=tournament_id,
            )
            .order_by(TournamentRegistration.registered_at.desc(), TournamentRegistration.id.desc())
            .offset(max(0, int(offset)))
            .limit(max(1, int(limit)))
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def count(
        session: AsyncSession,
        *,
        registration_status: str | None = None,
        tournament_id: UUID | None = None,
    ) -> int:
        stmt = _apply_filters(
            select(func.count(TournamentRegistration.id)),
            registration_status=registration_status,
            tournament_id=tournament_id,
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)
