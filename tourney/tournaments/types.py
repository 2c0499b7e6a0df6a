from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(slots=True)
class Actor:
    user_id: int
    role: str


@dataclass(slots=True)
class TournamentTotals:
    participants: int
    total_revenue: int


@dataclass(slots=True)
class TournamentSnapshot:
    tournament_id: UUID
    name: str
    sport_type: str
    status: str
    starts_at: datetime
    ends_at: datetime | None
    max_participants: int
    entry_fee: int
    organizer_id: int
    is_active: bool
    description: str
    location: str
    rules: list[str]
    prizes: list[dict[str, object]]
    participants: int
    total_revenue: int
    created_at: datetime


@dataclass(slots=True)
class RegistrationSnapshot:
    registration_id: UUID
    tournament_id: UUID
    user_id: int
    registered_at: datetime
    payment_status: str
    registration_status: str
    payment_method: str
    amount_paid: int
    transaction_id: str | None
    paid_at: datetime | None
    profile: dict[str, object] | None
    has_full_profile: bool
    is_active: bool
    cancelled_at: datetime | None
    cancel_reason: str | None
    admin_notes: list[dict[str, object]]


@dataclass(slots=True)
class RegisterResult:
    registration: RegistrationSnapshot
    participants: int
    max_participants: int
    has_full_profile: bool


@dataclass(slots=True)
class CancelResult:
    registration: RegistrationSnapshot
    participants: int
    idempotent_replay: bool


@dataclass(slots=True)
class DeleteTournamentResult:
    tournament_id: UUID
    soft_deleted: bool


@dataclass(slots=True)
class Pagination:
    current_page: int
    total_pages: int
    total_count: int
    has_next: bool
    has_prev: bool


@dataclass(slots=True)
class TournamentPage:
    items: list[TournamentSnapshot]
    pagination: Pagination


@dataclass(slots=True)
class RegistrationPage:
    items: list[RegistrationSnapshot]
    pagination: Pagination


@dataclass(slots=True)
class TournamentRegistrations:
    tournament: TournamentSnapshot
    registrations: list[RegistrationSnapshot]
