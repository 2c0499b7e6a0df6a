from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class PrizeModel(BaseModel):
    position: str = Field(min_length=1, max_length=64)
    amount: int = Field(ge=0)


class PaginationResponse(BaseModel):
    current_page: int = Field(ge=1)
    total_pages: int = Field(ge=0)
    total_count: int = Field(ge=0)
    has_next: bool
    has_prev: bool


class TournamentResponse(BaseModel):
    id: UUID
    name: str
    sport_type: str
    status: str
    starts_at: datetime
    ends_at: datetime | None = None
    max_participants: int = Field(ge=1)
    entry_fee: int = Field(ge=0)
    organizer_id: int
    is_active: bool
    description: str
    location: str
    rules: list[str]
    prizes: list[PrizeModel]
    participants: int = Field(ge=0)
    total_revenue: int = Field(ge=0)
    created_at: datetime


class TournamentListResponse(BaseModel):
    tournaments: list[TournamentResponse]
    pagination: PaginationResponse


class RegistrationResponse(BaseModel):
    id: UUID
    tournament_id: UUID
    user_id: int
    registered_at: datetime
    payment_status: str
    registration_status: str
    payment_method: str
    amount_paid: int = Field(ge=0)
    transaction_id: str | None = None
    paid_at: datetime | None = None
    profile: dict[str, object] | None = None
    has_full_profile: bool
    is_active: bool
    cancelled_at: datetime | None = None
    cancel_reason: str | None = None
    admin_notes: list[dict[str, object]]


class RegistrationListResponse(BaseModel):
    registrations: list[RegistrationResponse]
    pagination: PaginationResponse | None = None


class TournamentRegistrationsResponse(BaseModel):
    tournament: TournamentResponse
    registrations: list[RegistrationResponse]


class RegisterRequest(BaseModel):
    payment_status: str = Field(default="pending", min_length=1, max_length=16)
    payment_method: str | None = Field(default=None, max_length=16)
    transaction_id: str | None = Field(default=None, max_length=128)
    profile: dict[str, object] | None = None


class RegisterResponse(BaseModel):
    registration: RegistrationResponse
    participants: int = Field(ge=0)
    max_participants: int = Field(ge=1)
    has_full_profile: bool


class PaymentRequest(BaseModel):
    amount_paid: int = Field(ge=0)
    transaction_id: str | None = Field(default=None, max_length=128)


class CancelRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=500)


class CancelResponse(BaseModel):
    registration: RegistrationResponse
    participants: int = Field(ge=0)
    idempotent_replay: bool


class StatusUpdateRequest(BaseModel):
    status: str = Field(min_length=1, max_length=16)
    note: str | None = Field(default=None, max_length=500)


class TournamentCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    sport_type: str = Field(min_length=1, max_length=32)
    starts_at: datetime
    ends_at: datetime | None = None
    max_participants: int = Field(ge=1)
    entry_fee: int = Field(default=0, ge=0)
    description: str = Field(default="", max_length=5000)
    location: str = Field(default="", max_length=500)
    rules: list[str] = Field(default_factory=list)
    prizes: list[PrizeModel] = Field(default_factory=list)


class TournamentUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    sport_type: str | None = Field(default=None, min_length=1, max_length=32)
    status: str | None = Field(default=None, min_length=1, max_length=16)
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    max_participants: int | None = Field(default=None, ge=1)
    entry_fee: int | None = Field(default=None, ge=0)
    description: str | None = Field(default=None, max_length=5000)
    location: str | None = Field(default=None, max_length=500)
    rules: list[str] | None = None
    prizes: list[PrizeModel] | None = None


class DeleteTournamentResponse(BaseModel):
    tournament_id: UUID
    soft_deleted: bool


class AdminStatsResponse(BaseModel):
    total_tournaments: int = Field(ge=0)
    active_tournaments: int = Field(ge=0)
    completed_tournaments: int = Field(ge=0)
    upcoming_tournaments: int = Field(ge=0)
    total_users: int = Field(ge=0)
    active_users: int = Field(ge=0)
    total_revenue: int = Field(ge=0)
    this_month_revenue: int = Field(ge=0)
    average_participants: int = Field(ge=0)
    total_registrations: int = Field(ge=0)
    last_updated: datetime


class TournamentStatsResponse(BaseModel):
    stats: AdminStatsResponse
    recent_tournaments: list[TournamentResponse]


class OrganizerStatsResponse(BaseModel):
    total_tournaments: int = Field(ge=0)
    upcoming_tournaments: int = Field(ge=0)
    ongoing_tournaments: int = Field(ge=0)
    completed_tournaments: int = Field(ge=0)
    active_tournaments: int = Field(ge=0)
    total_participants: int = Field(ge=0)
    total_revenue: int = Field(ge=0)
    this_month_revenue: int = Field(ge=0)
    average_participants: int = Field(ge=0)


class RegistrationStatsResponse(BaseModel):
    total_registrations: int = Field(ge=0)
    confirmed_registrations: int = Field(ge=0)
    pending_registrations: int = Field(ge=0)
    completed_payments: int = Field(ge=0)
    recent_registrations: int = Field(ge=0)
    total_revenue: int = Field(ge=0)
    average_payment: float = Field(ge=0.0)


class MonthlyRevenueRowResponse(BaseModel):
    year: int
    month: int = Field(ge=1, le=12)
    revenue: int = Field(ge=0)
    tournaments: int = Field(ge=0)
    participants: int = Field(ge=0)


class MonthlyRevenueResponse(BaseModel):
    generated_at: datetime
    months: int = Field(ge=1, le=24)
    rows: list[MonthlyRevenueRowResponse]


class AdminDashboardResponse(BaseModel):
    generated_at: datetime
    stats: AdminStatsResponse
    registrations: RegistrationStatsResponse
    recent_tournaments: list[TournamentResponse]
