from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID

import structlog
from fastapi import APIRouter, Query, Request

from tourney.core.config import get_settings
from tourney.db.session import SessionLocal
from tourney.services import stats_reporter
from tourney.tournaments import service
from tourney.tournaments.access import assert_admin
from tourney.tournaments.errors import TournamentsError

from .api_helpers import as_http_error, assert_gateway_access, require_actor
from .api_mappers import pagination_as_response, registration_as_response
from .api_models import (
    CancelRequest,
    CancelResponse,
    PaymentRequest,
    RegistrationListResponse,
    RegistrationResponse,
    RegistrationStatsResponse,
    StatusUpdateRequest,
)

router = APIRouter(prefix="/api/registrations", tags=["registrations"])
logger = structlog.get_logger(__name__)


def _assert_gateway_access(request: Request) -> None:
    assert_gateway_access(request, settings=get_settings(), route="registrations")


@router.get("", response_model=RegistrationListResponse)
async def list_registrations(
    request: Request,
    status: str | None = Query(default=None, min_length=1, max_length=16),
    tournament_id: UUID | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
) -> RegistrationListResponse:
    _assert_gateway_access(request)
    actor = require_actor(request)
    try:
        async with SessionLocal.begin() as session:
            result = await service.list_registrations(
                session,
                actor=actor,
                page=page,
                limit=limit,
                registration_status=status,
                tournament_id=tournament_id,
            )
    except TournamentsError as exc:
        raise as_http_error(exc) from exc
    return RegistrationListResponse(
        registrations=[registration_as_response(item) for item in result.items],
        pagination=pagination_as_response(result.pagination),
    )


@router.get("/my", response_model=RegistrationListResponse)
async def list_my_registrations(request: Request) -> RegistrationListResponse:
    _assert_gateway_access(request)
    actor = require_actor(request)
    async with SessionLocal.begin() as session:
        registrations = await service.list_user_registrations(session, user_id=actor.user_id)
    return RegistrationListResponse(
        registrations=[registration_as_response(item) for item in registrations],
    )


@router.get("/stats", response_model=RegistrationStatsResponse)
async def get_registration_stats(request: Request) -> RegistrationStatsResponse:
    _assert_gateway_access(request)
    actor = require_actor(request)
    now_utc = datetime.now(timezone.utc)
    try:
        assert_admin(actor)
    except TournamentsError as exc:
        raise as_http_error(exc) from exc
    async with SessionLocal.begin() as session:
        stats = await stats_reporter.compute_registration_stats(session, now_utc=now_utc)
    return RegistrationStatsResponse(
        total_registrations=stats.total_registrations,
        confirmed_registrations=stats.confirmed_registrations,
        pending_registrations=stats.pending_registrations,
        completed_payments=stats.completed_payments,
        recent_registrations=stats.recent_registrations,
        total_revenue=stats.total_revenue,
        average_payment=stats.average_payment,
    )


@router.get("/{registration_id}", response_model=RegistrationResponse)
async def get_registration(registration_id: UUID, request: Request) -> RegistrationResponse:
    _assert_gateway_access(request)
    actor = require_actor(request)
    try:
        async with SessionLocal.begin() as session:
            registration = await service.get_registration(
                session,
                registration_id=registration_id,
                actor=actor,
            )
    except TournamentsError as exc:
        raise as_http_error(exc) from exc
    return registration_as_response(registration)


@router.patch("/{registration_id}/status", response_model=RegistrationResponse)
async def update_registration_status(
    registration_id: UUID,
    payload: StatusUpdateRequest,
    request: Request,
) -> RegistrationResponse:
    _assert_gateway_access(request)
    actor = require_actor(request)
    now_utc = datetime.now(timezone.utc)
    try:
        assert_admin(actor)
        async with SessionLocal.begin() as session:
            registration = await service.transition(
                session,
                registration_id=registration_id,
                target_status=payload.status.strip().lower(),
                actor_id=actor.user_id,
                now_utc=now_utc,
                note=(payload.note or "").strip() or None,
            )
    except TournamentsError as exc:
        raise as_http_error(exc) from exc
    return registration_as_response(registration)


@router.post("/{registration_id}/pay", response_model=RegistrationResponse)
async def record_registration_payment(
    registration_id: UUID,
    payload: PaymentRequest,
    request: Request,
) -> RegistrationResponse:
    _assert_gateway_access(request)
    actor = require_actor(request)
    now_utc = datetime.now(timezone.utc)
    try:
        assert_admin(actor)
        async with SessionLocal.begin() as session:
            registration = await service.mark_paid(
                session,
                registration_id=registration_id,
                amount_paid=payload.amount_paid,
                now_utc=now_utc,
                transaction_id=payload.transaction_id,
            )
    except TournamentsError as exc:
        raise as_http_error(exc) from exc
    return registration_as_response(registration)


@router.post("/{registration_id}/cancel", response_model=CancelResponse)
async def cancel_registration(
    registration_id: UUID,
    payload: CancelRequest,
    request: Request,
) -> CancelResponse:
    _assert_gateway_access(request)
    actor = require_actor(request)
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            await service.assert_can_cancel_registration(
                session,
                registration_id=registration_id,
                actor=actor,
            )
            result = await service.cancel(
                session,
                registration_id=registration_id,
                now_utc=now_utc,
                reason=(payload.reason or "").strip() or None,
                actor_id=actor.user_id,
            )
    except TournamentsError as exc:
        raise as_http_error(exc) from exc
    if result.idempotent_replay:
        logger.info("registration_cancel_replayed", registration_id=str(registration_id))
    return CancelResponse(
        registration=registration_as_response(result.registration),
        participants=result.participants,
        idempotent_replay=result.idempotent_replay,
    )
