from __future__ import annotations

import math
from datetime import datetime

from tourney.db.models.tournament_registrations import TournamentRegistration
from tourney.db.models.tournaments import Tournament
from tourney.tournaments.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from tourney.tournaments.types import (
    Pagination,
    RegistrationSnapshot,
    TournamentSnapshot,
    TournamentTotals,
)


def build_tournament_snapshot(tournament: Tournament, totals: TournamentTotals) -> TournamentSnapshot:
    return TournamentSnapshot(
        tournament_id=tournament.id,
        name=tournament.name,
        sport_type=tournament.sport_type,
        status=tournament.status,
        starts_at=tournament.starts_at,
        ends_at=tournament.ends_at,
        max_participants=int(tournament.max_participants),
        entry_fee=int(tournament.entry_fee),
        organizer_id=int(tournament.organizer_id),
        is_active=bool(tournament.is_active),
        description=tournament.description or "",
        location=tournament.location or "",
        rules=list(tournament.rules or []),
        prizes=list(tournament.prizes or []),
        participants=totals.participants,
        total_revenue=totals.total_revenue,
        created_at=tournament.created_at,
    )


def build_registration_snapshot(registration: TournamentRegistration) -> RegistrationSnapshot:
    return RegistrationSnapshot(
        registration_id=registration.id,
        tournament_id=registration.tournament_id,
        user_id=int(registration.user_id),
        registered_at=registration.registered_at,
        payment_status=registration.payment_status,
        registration_status=registration.registration_status,
        payment_method=registration.payment_method,
        amount_paid=int(registration.amount_paid or 0),
        transaction_id=registration.transaction_id,
        paid_at=registration.paid_at,
        profile=registration.profile,
        has_full_profile=bool(registration.has_full_profile),
        is_active=bool(registration.is_active),
        cancelled_at=registration.cancelled_at,
        cancel_reason=registration.cancel_reason,
        admin_notes=list(registration.admin_notes or []),
    )


def resolve_page(page: int, limit: int | None) -> tuple[int, int, int]:
    resolved_page = max(1, int(page))
    resolved_limit = max(1, min(MAX_PAGE_LIMIT, int(limit or DEFAULT_PAGE_LIMIT)))
    return resolved_page, resolved_limit, (resolved_page - 1) * resolved_limit


def build_pagination(*, page: int, limit: int, total_count: int, returned: int) -> Pagination:
    offset = (page - 1) * limit
    return Pagination(
        current_page=page,
        total_pages=math.ceil(total_count / limit) if total_count else 0,
        total_count=total_count,
        has_next=offset + returned < total_count,
        has_prev=page > 1,
    )


def build_admin_note(*, note: str, added_by: int | None, now_utc: datetime) -> dict[str, object]:
    return {
        "note": note,
        "added_by": added_by,
        "added_at": now_utc.isoformat(),
    }
