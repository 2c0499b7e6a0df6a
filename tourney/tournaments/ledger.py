"""Registration ledger: the only writer of tournament registrations.

Every check-then-act sequence runs under a row lock held for the caller's
transaction. ``register`` locks the tournament row, so duplicate and capacity
checks for one tournament are serialized; ``cancel`` takes the same tournament
lock before the registration lock. ``mark_paid`` and ``transition`` lock the
registration row. The partial unique index on active
(tournament, user) pairs backs up the duplicate check.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tourney.db.models.tournament_registrations import TournamentRegistration
from tourney.db.repo.registrations_repo import RegistrationsRepo
from tourney.db.repo.tournaments_repo import TournamentsRepo
from tourney.db.repo.users_repo import UsersRepo
from tourney.tournaments.constants import (
    DEFAULT_PAYMENT_METHOD,
    EVENT_REGISTRATION_CANCELLED,
    EVENT_REGISTRATION_CREATED,
    EVENT_REGISTRATION_PAID,
    PAYMENT_METHODS,
    PAYMENT_STATUS_COMPLETED,
    PAYMENT_STATUS_PENDING,
    REGISTRATION_STATUS_CANCELLED,
    REGISTRATION_STATUS_CONFIRMED,
    REGISTRATION_STATUS_PENDING,
    REGISTRATION_STATUS_TRANSITIONS,
    REGISTRATION_STATUSES,
    TOURNAMENT_OPEN_STATUSES,
)
from tourney.tournaments.errors import (
    CapacityExceededError,
    DuplicateRegistrationError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from tourney.tournaments.events import emit_registration_event
from tourney.tournaments.internal import build_admin_note, build_registration_snapshot
from tourney.tournaments.profile import validate_profile
from tourney.tournaments.types import CancelResult, RegisterResult, RegistrationSnapshot

logger = structlog.get_logger(__name__)

_PAYABLE_STATUSES = frozenset({REGISTRATION_STATUS_PENDING, REGISTRATION_STATUS_CONFIRMED})
_CREATION_PAYMENT_STATUSES = frozenset({PAYMENT_STATUS_PENDING, PAYMENT_STATUS_COMPLETED})


def _resolve_user_id(user_id: int | None) -> int:
    if user_id is None or int(user_id) <= 0:
        raise ValidationError("user id is required", details=["user_id: required"])
    return int(user_id)


async def register(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    user_id: int | None,
    now_utc: datetime,
    payment_status: str = PAYMENT_STATUS_PENDING,
    profile: Mapping[str, object] | None = None,
    payment_method: str | None = None,
    transaction_id: str | None = None,
) -> RegisterResult:
    resolved_user_id = _resolve_user_id(user_id)
    if payment_status not in _CREATION_PAYMENT_STATUSES:
        raise ValidationError(
            "unsupported payment status",
            details=["payment_status: must be pending or completed"],
        )
    resolved_method = payment_method or DEFAULT_PAYMENT_METHOD
    if resolved_method not in PAYMENT_METHODS:
        raise ValidationError("unsupported payment method", details=["payment_method: unsupported value"])
    stored_profile = validate_profile(profile) if profile is not None else None

    if await UsersRepo.get_by_id(session, resolved_user_id) is None:
        raise NotFoundError("user not found")

    tournament = await TournamentsRepo.get_by_id_for_update(session, tournament_id)
    if tournament is None or not tournament.is_active:
        raise NotFoundError("tournament not found")
    if tournament.status not in TOURNAMENT_OPEN_STATUSES:
        raise InvalidStateError("tournament is not open for registration")

    existing = await RegistrationsRepo.get_active_for_user(
        session,
        tournament_id=tournament.id,
        user_id=resolved_user_id,
    )
    if existing is not None:
        logger.info(
            "registration_rejected",
            reason="duplicate",
            tournament_id=str(tournament.id),
            user_id=resolved_user_id,
        )
        raise DuplicateRegistrationError

    participants = await RegistrationsRepo.count_participants(session, tournament_id=tournament.id)
    if participants >= int(tournament.max_participants):
        logger.info(
            "registration_rejected",
            reason="capacity",
            tournament_id=str(tournament.id),
            user_id=resolved_user_id,
            participants=participants,
            max_participants=int(tournament.max_participants),
        )
        raise CapacityExceededError

    paid_now = payment_status == PAYMENT_STATUS_COMPLETED
    try:
        registration = await RegistrationsRepo.create(
            session,
            registration=TournamentRegistration(
                id=uuid4(),
                tournament_id=tournament.id,
                user_id=resolved_user_id,
                registered_at=now_utc,
                payment_status=payment_status,
                registration_status=(
                    REGISTRATION_STATUS_CONFIRMED if paid_now else REGISTRATION_STATUS_PENDING
                ),
                payment_method=resolved_method,
                amount_paid=int(tournament.entry_fee) if paid_now else 0,
                transaction_id=transaction_id,
                paid_at=now_utc if paid_now else None,
                profile=stored_profile,
                has_full_profile=stored_profile is not None,
                is_active=True,
                admin_notes=[],
                updated_at=now_utc,
            ),
        )
    except IntegrityError as exc:
        raise DuplicateRegistrationError from exc

    await emit_registration_event(
        session,
        event_type=EVENT_REGISTRATION_CREATED,
        registration=registration,
        happened_at=now_utc,
    )
    logger.info(
        "registration_created",
        registration_id=str(registration.id),
        tournament_id=str(tournament.id),
        user_id=resolved_user_id,
        participants=participants + 1,
    )
    return RegisterResult(
        registration=build_registration_snapshot(registration),
        participants=participants + 1,
        max_participants=int(tournament.max_participants),
        has_full_profile=stored_profile is not None,
    )


async def mark_paid(
    session: AsyncSession,
    *,
    registration_id: UUID,
    amount_paid: int,
    now_utc: datetime,
    transaction_id: str | None = None,
) -> RegistrationSnapshot:
    if int(amount_paid) < 0:
        raise ValidationError("amount must not be negative", details=["amount_paid: must be >= 0"])

    registration = await RegistrationsRepo.get_by_id_for_update(session, registration_id)
    if registration is None:
        raise NotFoundError("registration not found")
    if not registration.is_active:
        raise InvalidStateError("registration is not active")
    if registration.payment_status == PAYMENT_STATUS_COMPLETED:
        raise InvalidStateError("registration is already paid")
    if registration.registration_status not in _PAYABLE_STATUSES:
        raise InvalidStateError("registration cannot be paid in its current status")

    registration.payment_status = PAYMENT_STATUS_COMPLETED
    registration.registration_status = REGISTRATION_STATUS_CONFIRMED
    registration.amount_paid = int(amount_paid)
    registration.paid_at = now_utc
    if transaction_id is not None:
        registration.transaction_id = transaction_id
    registration.updated_at = now_utc
    await session.flush()

    await emit_registration_event(
        session,
        event_type=EVENT_REGISTRATION_PAID,
        registration=registration,
        happened_at=now_utc,
    )
    logger.info(
        "registration_paid",
        registration_id=str(registration.id),
        amount_paid=int(amount_paid),
    )
    return build_registration_snapshot(registration)


async def cancel(
    session: AsyncSession,
    *,
    registration_id: UUID,
    now_utc: datetime,
    reason: str | None = None,
    actor_id: int | None = None,
) -> CancelResult:
    registration = await RegistrationsRepo.get_by_id(session, registration_id)
    if registration is None:
        raise NotFoundError("registration not found")
    # Tournament lock first, same order as register.
    await TournamentsRepo.get_by_id_for_update(session, registration.tournament_id)
    registration = await RegistrationsRepo.get_by_id_for_update(session, registration_id)
    if registration is None:
        raise NotFoundError("registration not found")

    if registration.registration_status == REGISTRATION_STATUS_CANCELLED:
        participants = await RegistrationsRepo.count_participants(
            session,
            tournament_id=registration.tournament_id,
        )
        return CancelResult(
            registration=build_registration_snapshot(registration),
            participants=participants,
            idempotent_replay=True,
        )
    if registration.registration_status not in _PAYABLE_STATUSES:
        raise InvalidStateError("registration cannot be cancelled in its current status")

    registration.registration_status = REGISTRATION_STATUS_CANCELLED
    registration.is_active = False
    registration.cancelled_at = now_utc
    registration.cancel_reason = reason
    if reason:
        registration.admin_notes = [
            *(registration.admin_notes or []),
            build_admin_note(
                note=f"Registration cancelled: {reason}",
                added_by=actor_id if actor_id is not None else int(registration.user_id),
                now_utc=now_utc,
            ),
        ]
    registration.updated_at = now_utc
    await session.flush()

    participants = await RegistrationsRepo.count_participants(
        session,
        tournament_id=registration.tournament_id,
    )
    await emit_registration_event(
        session,
        event_type=EVENT_REGISTRATION_CANCELLED,
        registration=registration,
        happened_at=now_utc,
        extra_payload={"reason": reason},
    )
    logger.info(
        "registration_cancelled",
        registration_id=str(registration.id),
        tournament_id=str(registration.tournament_id),
        participants=participants,
    )
    return CancelResult(
        registration=build_registration_snapshot(registration),
        participants=participants,
        idempotent_replay=False,
    )


async def transition(
    session: AsyncSession,
    *,
    registration_id: UUID,
    target_status: str,
    actor_id: int,
    now_utc: datetime,
    note: str | None = None,
) -> RegistrationSnapshot:
    if target_status not in REGISTRATION_STATUSES:
        raise ValidationError("unknown registration status", details=["status: unsupported value"])
    if target_status == REGISTRATION_STATUS_CANCELLED:
        result = await cancel(
            session,
            registration_id=registration_id,
            now_utc=now_utc,
            reason=note,
            actor_id=actor_id,
        )
        return result.registration

    registration = await RegistrationsRepo.get_by_id_for_update(session, registration_id)
    if registration is None:
        raise NotFoundError("registration not found")
    current_status = registration.registration_status
    if not registration.is_active or (current_status, target_status) not in REGISTRATION_STATUS_TRANSITIONS:
        raise InvalidStateError(f"cannot move registration from {current_status} to {target_status}")

    registration.registration_status = target_status
    if note:
        registration.admin_notes = [
            *(registration.admin_notes or []),
            build_admin_note(note=note, added_by=actor_id, now_utc=now_utc),
        ]
    registration.updated_at = now_utc
    await session.flush()

    logger.info(
        "registration_status_changed",
        registration_id=str(registration.id),
        from_status=current_status,
        to_status=target_status,
    )
    return build_registration_snapshot(registration)
