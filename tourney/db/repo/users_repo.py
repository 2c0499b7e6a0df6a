from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tourney.db.models.users import User


class UsersRepo:
    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        email: str,
        name: str | None,
        role: str,
    ) -> User:
        user = User(email=email.strip().lower(), name=name, role=role, is_active=True)
        session.add(user)
        await session.flush()
        return user

    @staticmethod
    async def get_by_id(session: AsyncSession, user_id: int) -> User | None:
        return await session.get(User, user_id)

    @staticmethod
    async def count_totals(session: AsyncSession) -> tuple[int, int]:
        stmt = select(
            func.count(User.id),
            func.count(User.id).filter(User.is_active.is_(True)),
        )
        result = await session.execute(stmt)
        total, active = result.one()
        return int(total or 0), int(active or 0)
