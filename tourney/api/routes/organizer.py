from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

import structlog
from fastapi import APIRouter, Query, Request

from tourney.core.config import get_settings
from tourney.db.session import SessionLocal
from tourney.services import stats_reporter
from tourney.tournaments import service
from tourney.tournaments.access import assert_organizer
from tourney.tournaments.errors import TournamentsError

from .api_helpers import as_http_error, assert_gateway_access, require_actor
from .api_mappers import pagination_as_response, registration_as_response, tournament_as_response
from .api_models import (
    DeleteTournamentResponse,
    OrganizerStatsResponse,
    TournamentCreateRequest,
    TournamentListResponse,
    TournamentRegistrationsResponse,
    TournamentResponse,
    TournamentUpdateRequest,
)

router = APIRouter(prefix="/api/organizer", tags=["organizer"])
logger = structlog.get_logger(__name__)


def _assert_gateway_access(request: Request) -> None:
    assert_gateway_access(request, settings=get_settings(), route="organizer")


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


async def _refresh_global_stats(now_utc: datetime) -> None:
    async with SessionLocal.begin() as session:
        await stats_reporter.refresh_global_stats(session, now_utc=now_utc)


@router.get("/stats", response_model=OrganizerStatsResponse)
async def get_organizer_stats(request: Request) -> OrganizerStatsResponse:
    _assert_gateway_access(request)
    actor = require_actor(request)
    now_utc = datetime.now(timezone.utc)
    try:
        assert_organizer(actor)
    except TournamentsError as exc:
        raise as_http_error(exc) from exc
    async with SessionLocal.begin() as session:
        stats = await stats_reporter.compute_organizer_stats(
            session,
            organizer_id=actor.user_id,
            now_utc=now_utc,
        )
    return OrganizerStatsResponse(
        total_tournaments=stats.total_tournaments,
        upcoming_tournaments=stats.upcoming_tournaments,
        ongoing_tournaments=stats.ongoing_tournaments,
        completed_tournaments=stats.completed_tournaments,
        active_tournaments=stats.active_tournaments,
        total_participants=stats.total_participants,
        total_revenue=stats.total_revenue,
        this_month_revenue=stats.this_month_revenue,
        average_participants=stats.average_participants,
    )


@router.get("/tournaments", response_model=TournamentListResponse)
async def list_organizer_tournaments(
    request: Request,
    status: str | None = Query(default=None, min_length=1, max_length=16),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> TournamentListResponse:
    _assert_gateway_access(request)
    actor = require_actor(request)
    try:
        assert_organizer(actor)
        async with SessionLocal.begin() as session:
            result = await service.list_organizer_tournaments(
                session,
                organizer_id=actor.user_id,
                page=page,
                limit=limit,
                status=status,
            )
    except TournamentsError as exc:
        raise as_http_error(exc) from exc
    return TournamentListResponse(
        tournaments=[tournament_as_response(item) for item in result.items],
        pagination=pagination_as_response(result.pagination),
    )


@router.post("/tournaments", response_model=TournamentResponse, status_code=201)
async def create_tournament(payload: TournamentCreateRequest, request: Request) -> TournamentResponse:
    _assert_gateway_access(request)
    actor = require_actor(request)
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            tournament = await service.create_tournament(
                session,
                actor=actor,
                name=payload.name,
                sport_type=payload.sport_type,
                starts_at=_as_utc(payload.starts_at),
                ends_at=_as_utc(payload.ends_at),
                max_participants=payload.max_participants,
                entry_fee=payload.entry_fee,
                description=payload.description,
                location=payload.location,
                rules=payload.rules,
                prizes=[prize.model_dump() for prize in payload.prizes],
                now_utc=now_utc,
            )
    except TournamentsError as exc:
        raise as_http_error(exc) from exc
    await _refresh_global_stats(now_utc)
    return tournament_as_response(tournament)


@router.put("/tournaments/{tournament_id}", response_model=TournamentResponse)
async def update_tournament(
    tournament_id: UUID,
    payload: TournamentUpdateRequest,
    request: Request,
) -> TournamentResponse:
    _assert_gateway_access(request)
    actor = require_actor(request)
    now_utc = datetime.now(timezone.utc)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    for field in ("starts_at", "ends_at"):
        if field in changes:
            changes[field] = _as_utc(changes[field])
    try:
        async with SessionLocal.begin() as session:
            tournament = await service.update_tournament(
                session,
                tournament_id=tournament_id,
                actor=actor,
                changes=changes,
                now_utc=now_utc,
            )
    except TournamentsError as exc:
        raise as_http_error(exc) from exc
    await _refresh_global_stats(now_utc)
    return tournament_as_response(tournament)


@router.delete("/tournaments/{tournament_id}", response_model=DeleteTournamentResponse)
async def delete_tournament(tournament_id: UUID, request: Request) -> DeleteTournamentResponse:
    _assert_gateway_access(request)
    actor = require_actor(request)
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            result = await service.delete_tournament(
                session,
                tournament_id=tournament_id,
                actor=actor,
                now_utc=now_utc,
            )
    except TournamentsError as exc:
        raise as_http_error(exc) from exc
    await _refresh_global_stats(now_utc)
    return DeleteTournamentResponse(
        tournament_id=result.tournament_id,
        soft_deleted=result.soft_deleted,
    )


@router.get(
    "/tournaments/{tournament_id}/registrations",
    response_model=TournamentRegistrationsResponse,
)
async def list_tournament_registrations(
    tournament_id: UUID,
    request: Request,
) -> TournamentRegistrationsResponse:
    _assert_gateway_access(request)
    actor = require_actor(request)
    try:
        async with SessionLocal.begin() as session:
            result = await service.list_tournament_registrations(
                session,
                tournament_id=tournament_id,
                actor=actor,
            )
    except TournamentsError as exc:
        raise as_http_error(exc) from exc
    return TournamentRegistrationsResponse(
        tournament=tournament_as_response(result.tournament),
        registrations=[registration_as_response(item) for item in result.registrations],
    )
