from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Query, Request

from tourney.core.config import get_settings
from tourney.db.session import SessionLocal
from tourney.services import stats_reporter
from tourney.tournaments import service
from tourney.tournaments.access import assert_admin
from tourney.tournaments.errors import TournamentsError

from .api_helpers import as_http_error, assert_gateway_access, require_actor
from .api_mappers import admin_stats_as_response, tournament_as_response
from .api_models import (
    AdminDashboardResponse,
    MonthlyRevenueResponse,
    MonthlyRevenueRowResponse,
    RegistrationStatsResponse,
)

router = APIRouter(prefix="/api/admin", tags=["admin"])
DASHBOARD_RECENT_TOURNAMENTS_LIMIT = 5


def _assert_admin_access(request: Request) -> None:
    assert_gateway_access(request, settings=get_settings(), route="admin")
    try:
        assert_admin(require_actor(request))
    except TournamentsError as exc:
        raise as_http_error(exc) from exc


@router.get("/dashboard", response_model=AdminDashboardResponse)
async def get_admin_dashboard(request: Request) -> AdminDashboardResponse:
    _assert_admin_access(request)
    now_utc = datetime.now(timezone.utc)
    async with SessionLocal.begin() as session:
        snapshot = await stats_reporter.get_global_stats(session, now_utc=now_utc)
        registrations = await stats_reporter.compute_registration_stats(session, now_utc=now_utc)
        recent = await service.list_recent_tournaments(
            session,
            limit=DASHBOARD_RECENT_TOURNAMENTS_LIMIT,
        )
    return AdminDashboardResponse(
        generated_at=now_utc,
        stats=admin_stats_as_response(snapshot),
        registrations=RegistrationStatsResponse(
            total_registrations=registrations.total_registrations,
            confirmed_registrations=registrations.confirmed_registrations,
            pending_registrations=registrations.pending_registrations,
            completed_payments=registrations.completed_payments,
            recent_registrations=registrations.recent_registrations,
            total_revenue=registrations.total_revenue,
            average_payment=registrations.average_payment,
        ),
        recent_tournaments=[tournament_as_response(item) for item in recent],
    )


@router.get("/analytics/revenue", response_model=MonthlyRevenueResponse)
async def get_revenue_analytics(
    request: Request,
    months: int = Query(default=6, ge=1, le=24),
) -> MonthlyRevenueResponse:
    _assert_admin_access(request)
    now_utc = datetime.now(timezone.utc)
    async with SessionLocal.begin() as session:
        rows = await stats_reporter.compute_monthly_revenue(session, now_utc=now_utc, months=months)
    return MonthlyRevenueResponse(
        generated_at=now_utc,
        months=months,
        rows=[
            MonthlyRevenueRowResponse(
                year=row.year,
                month=row.month,
                revenue=row.revenue,
                tournaments=row.tournaments,
                participants=row.participants,
            )
            for row in rows
        ],
    )
