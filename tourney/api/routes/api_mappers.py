from __future__ import annotations

from tourney.db.models.admin_stats import AdminStatsSnapshot
from tourney.tournaments.types import (
    Pagination,
    RegistrationSnapshot,
    TournamentSnapshot,
)

from .api_models import (
    AdminStatsResponse,
    PaginationResponse,
    PrizeModel,
    RegistrationResponse,
    TournamentResponse,
)


def tournament_as_response(item: TournamentSnapshot) -> TournamentResponse:
    return TournamentResponse(
        id=item.tournament_id,
        name=item.name,
        sport_type=item.sport_type,
        status=item.status,
        starts_at=item.starts_at,
        ends_at=item.ends_at,
        max_participants=item.max_participants,
        entry_fee=item.entry_fee,
        organizer_id=item.organizer_id,
        is_active=item.is_active,
        description=item.description,
        location=item.location,
        rules=item.rules,
        prizes=[
            PrizeModel(position=str(prize.get("position", "")), amount=int(prize.get("amount", 0)))
            for prize in item.prizes
        ],
        participants=item.participants,
        total_revenue=item.total_revenue,
        created_at=item.created_at,
    )


def registration_as_response(item: RegistrationSnapshot) -> RegistrationResponse:
    return RegistrationResponse(
        id=item.registration_id,
        tournament_id=item.tournament_id,
        user_id=item.user_id,
        registered_at=item.registered_at,
        payment_status=item.payment_status,
        registration_status=item.registration_status,
        payment_method=item.payment_method,
        amount_paid=item.amount_paid,
        transaction_id=item.transaction_id,
        paid_at=item.paid_at,
        profile=item.profile,
        has_full_profile=item.has_full_profile,
        is_active=item.is_active,
        cancelled_at=item.cancelled_at,
        cancel_reason=item.cancel_reason,
        admin_notes=item.admin_notes,
    )


def pagination_as_response(item: Pagination) -> PaginationResponse:
    return PaginationResponse(
        current_page=item.current_page,
        total_pages=item.total_pages,
        total_count=item.total_count,
        has_next=item.has_next,
        has_prev=item.has_prev,
    )


def admin_stats_as_response(snapshot: AdminStatsSnapshot) -> AdminStatsResponse:
    return AdminStatsResponse(
        total_tournaments=snapshot.total_tournaments,
        active_tournaments=snapshot.active_tournaments,
        completed_tournaments=snapshot.completed_tournaments,
        upcoming_tournaments=snapshot.upcoming_tournaments,
        total_users=snapshot.total_users,
        active_users=snapshot.active_users,
        total_revenue=snapshot.total_revenue,
        this_month_revenue=snapshot.this_month_revenue,
        average_participants=snapshot.average_participants,
        total_registrations=snapshot.total_registrations,
        last_updated=snapshot.last_updated,
    )
