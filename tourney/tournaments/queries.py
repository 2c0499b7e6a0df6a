from __future__ import annotations

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from tourney.db.repo.registrations_repo import RegistrationsRepo
from tourney.db.repo.tournaments_repo import TournamentsRepo
from tourney.tournaments.access import assert_admin, assert_can_manage_tournament, is_admin
from tourney.tournaments.aggregator import totals_for, tournament_totals
from tourney.tournaments.errors import AuthorizationError, NotFoundError
from tourney.tournaments.internal import (
    build_pagination,
    build_registration_snapshot,
    build_tournament_snapshot,
    resolve_page,
)
from tourney.tournaments.types import (
    Actor,
    RegistrationPage,
    RegistrationSnapshot,
    TournamentPage,
    TournamentRegistrations,
    TournamentSnapshot,
)


async def _snapshots(session: AsyncSession, tournaments: list) -> list[TournamentSnapshot]:
    totals = await tournament_totals(session, tournament_ids=[item.id for item in tournaments])
    return [build_tournament_snapshot(item, totals[item.id]) for item in tournaments]


async def get_tournament(session: AsyncSession, *, tournament_id: UUID) -> TournamentSnapshot:
    tournament = await TournamentsRepo.get_by_id(session, tournament_id)
    if tournament is None:
        raise NotFoundError("tournament not found")
    return build_tournament_snapshot(tournament, await totals_for(session, tournament_id=tournament.id))


async def list_tournaments(
    session: AsyncSession,
    *,
    page: int = 1,
    limit: int | None = None,
    status: str | None = None,
    sport_type: str | None = None,
) -> TournamentPage:
    resolved_page, resolved_limit, offset = resolve_page(page, limit)
    tournaments = await TournamentsRepo.list_page(
        session,
        offset=offset,
        limit=resolved_limit,
        status=status,
        sport_type=sport_type,
        active_only=True,
    )
    total_count = await TournamentsRepo.count(
        session,
        status=status,
        sport_type=sport_type,
        active_only=True,
    )
    return TournamentPage(
        items=await _snapshots(session, tournaments),
        pagination=build_pagination(
            page=resolved_page,
            limit=resolved_limit,
            total_count=total_count,
            returned=len(tournaments),
        ),
    )


async def list_organizer_tournaments(
    session: AsyncSession,
    *,
    organizer_id: int,
    page: int = 1,
    limit: int | None = None,
    status: str | None = None,
) -> TournamentPage:
    resolved_status = None if status in {None, "", "all"} else status
    resolved_page, resolved_limit, offset = resolve_page(page, limit)
    tournaments = await TournamentsRepo.list_page(
        session,
        offset=offset,
        limit=resolved_limit,
        status=resolved_status,
        organizer_id=organizer_id,
        active_only=True,
        order_by_start=True,
    )
    total_count = await TournamentsRepo.count(
        session,
        status=resolved_status,
        organizer_id=organizer_id,
        active_only=True,
    )
    return TournamentPage(
        items=await _snapshots(session, tournaments),
        pagination=build_pagination(
            page=resolved_page,
            limit=resolved_limit,
            total_count=total_count,
            returned=len(tournaments),
        ),
    )


async def list_recent_tournaments(session: AsyncSession, *, limit: int) -> list[TournamentSnapshot]:
    return await _snapshots(session, await TournamentsRepo.list_recent(session, limit=limit))


async def list_tournament_registrations(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    actor: Actor,
) -> TournamentRegistrations:
    tournament = await TournamentsRepo.get_by_id(session, tournament_id)
    if tournament is None:
        raise NotFoundError("tournament not found")
    assert_can_manage_tournament(tournament, actor)

    registrations = await RegistrationsRepo.list_for_tournament(session, tournament_id=tournament.id)
    return TournamentRegistrations(
        tournament=build_tournament_snapshot(
            tournament,
            await totals_for(session, tournament_id=tournament.id),
        ),
        registrations=[build_registration_snapshot(item) for item in registrations],
    )


async def list_user_registrations(session: AsyncSession, *, user_id: int) -> list[RegistrationSnapshot]:
    registrations = await RegistrationsRepo.list_for_user(session, user_id=user_id)
    return [build_registration_snapshot(item) for item in registrations]


async def get_registration(
    session: AsyncSession,
    *,
    registration_id: UUID,
    actor: Actor,
) -> RegistrationSnapshot:
    registration = await RegistrationsRepo.get_by_id(session, registration_id)
    if registration is None:
        raise NotFoundError("registration not found")
    if not is_admin(actor) and int(registration.user_id) != actor.user_id:
        raise AuthorizationError("access denied")
    return build_registration_snapshot(registration)


async def assert_can_cancel_registration(
    session: AsyncSession,
    *,
    registration_id: UUID,
    actor: Actor,
) -> None:
    """Owner, organizer of the tournament, or admin."""
    registration = await RegistrationsRepo.get_by_id(session, registration_id)
    if registration is None:
        raise NotFoundError("registration not found")
    if is_admin(actor) or int(registration.user_id) == actor.user_id:
        return
    tournament = await TournamentsRepo.get_by_id(session, registration.tournament_id)
    if tournament is None:
        raise NotFoundError("tournament not found")
    assert_can_manage_tournament(tournament, actor)


async def list_registrations(
    session: AsyncSession,
    *,
    actor: Actor,
    page: int = 1,
    limit: int | None = 20,
    registration_status: str | None = None,
    tournament_id: UUID | None = None,
) -> RegistrationPage:
    assert_admin(actor)
    resolved_page, resolved_limit, offset = resolve_page(page, limit)
    registrations = await RegistrationsRepo.list_page(
        session,
        offset=offset,
        limit=resolved_limit,
        registration_status=registration_status,
        tournament_id=tournament_id,
    )
    total_count = await RegistrationsRepo.count(
        session,
        registration_status=registration_status,
        tournament_id=tournament_id,
    )
    return RegistrationPage(
        items=[build_registration_snapshot(item) for item in registrations],
        pagination=build_pagination(
            page=resolved_page,
            limit=resolved_limit,
            total_count=total_count,
            returned=len(registrations),
        ),
    )
