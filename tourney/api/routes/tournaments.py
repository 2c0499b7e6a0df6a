from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Query, Request

from tourney.core.config import get_settings
from tourney.db.session import SessionLocal
from tourney.services import stats_reporter
from tourney.tournaments import service
from tourney.tournaments.access import assert_admin
from tourney.tournaments.errors import TournamentsError

from .api_helpers import as_http_error, assert_gateway_access, require_actor
from .api_mappers import (
    admin_stats_as_response,
    pagination_as_response,
    registration_as_response,
    tournament_as_response,
)
from .api_models import (
    RegisterRequest,
    RegisterResponse,
    TournamentListResponse,
    TournamentResponse,
    TournamentStatsResponse,
)

router = APIRouter(prefix="/api/tournaments", tags=["tournaments"])
RECENT_TOURNAMENTS_LIMIT = 10


def _assert_gateway_access(request: Request) -> None:
    assert_gateway_access(request, settings=get_settings(), route="tournaments")


@router.get("", response_model=TournamentListResponse)
async def list_tournaments(
    request: Request,
    status: str | None = Query(default=None, min_length=1, max_length=16),
    sport_type: str | None = Query(default=None, min_length=1, max_length=32),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
) -> TournamentListResponse:
    _assert_gateway_access(request)
    async with SessionLocal.begin() as session:
        result = await service.list_tournaments(
            session,
            page=page,
            limit=limit,
            status=status,
            sport_type=sport_type,
        )
    return TournamentListResponse(
        tournaments=[tournament_as_response(item) for item in result.items],
        pagination=pagination_as_response(result.pagination),
    )


@router.get("/stats", response_model=TournamentStatsResponse)
async def get_tournament_stats(request: Request) -> TournamentStatsResponse:
    _assert_gateway_access(request)
    actor = require_actor(request)
    now_utc = datetime.now(timezone.utc)
    try:
        assert_admin(actor)
        async with SessionLocal.begin() as session:
            snapshot = await stats_reporter.get_global_stats(session, now_utc=now_utc)
            recent = await service.list_recent_tournaments(session, limit=RECENT_TOURNAMENTS_LIMIT)
    except TournamentsError as exc:
        raise as_http_error(exc) from exc
    return TournamentStatsResponse(
        stats=admin_stats_as_response(snapshot),
        recent_tournaments=[tournament_as_response(item) for item in recent],
    )


@router.get("/{tournament_id}", response_model=TournamentResponse)
async def get_tournament(tournament_id: UUID, request: Request) -> TournamentResponse:
    _assert_gateway_access(request)
    try:
        async with SessionLocal.begin() as session:
            tournament = await service.get_tournament(session, tournament_id=tournament_id)
    except TournamentsError as exc:
        raise as_http_error(exc) from exc
    return tournament_as_response(tournament)


@router.post("/{tournament_id}/register", response_model=RegisterResponse, status_code=201)
async def register_for_tournament(
    tournament_id: UUID,
    payload: RegisterRequest,
    request: Request,
) -> RegisterResponse:
    _assert_gateway_access(request)
    actor = require_actor(request)
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            result = await service.register(
                session,
                tournament_id=tournament_id,
                user_id=actor.user_id,
                now_utc=now_utc,
                payment_status=payload.payment_status,
                profile=payload.profile,
                payment_method=payload.payment_method,
                transaction_id=payload.transaction_id,
            )
    except TournamentsError as exc:
        raise as_http_error(exc) from exc
    return RegisterResponse(
        registration=registration_as_response(result.registration),
        participants=result.participants,
        max_participants=result.max_participants,
        has_full_profile=result.has_full_profile,
    )
