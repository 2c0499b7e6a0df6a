from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import datetime
from uuid import UUID, uuid4

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from tourney.db.models.tournaments import Tournament
from tourney.db.repo.registrations_repo import RegistrationsRepo
from tourney.db.repo.tournaments_repo import TournamentsRepo
from tourney.tournaments.access import assert_can_manage_tournament, assert_organizer
from tourney.tournaments.aggregator import participant_count, totals_for
from tourney.tournaments.constants import (
    SPORT_TYPES,
    TOURNAMENT_STATUS_COMPLETED,
    TOURNAMENT_STATUS_TRANSITIONS,
    TOURNAMENT_STATUS_UPCOMING,
    TOURNAMENT_STATUSES,
)
from tourney.tournaments.errors import InvalidStateError, NotFoundError, ValidationError
from tourney.tournaments.internal import build_tournament_snapshot
from tourney.tournaments.types import Actor, DeleteTournamentResult, TournamentSnapshot

logger = structlog.get_logger(__name__)

UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "sport_type",
        "status",
        "starts_at",
        "ends_at",
        "max_participants",
        "entry_fee",
        "description",
        "location",
        "rules",
        "prizes",
    }
)
# Derived or ownership fields; dropped from updates without error.
PROTECTED_FIELDS = frozenset(
    {"organizer_id", "participants", "total_revenue", "registrations", "is_active"}
)


def _normalize_prizes(prizes: Sequence[Mapping[str, object]] | None) -> list[dict[str, object]]:
    normalized: list[dict[str, object]] = []
    for index, prize in enumerate(prizes or ()):
        position = str(prize.get("position") or "").strip()
        amount = prize.get("amount")
        if not position or not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
            raise ValidationError("invalid prize", details=[f"prizes[{index}]: position and amount >= 0 required"])
        normalized.append({"position": position, "amount": amount})
    return normalized


def _normalize_rules(rules: Sequence[str] | None) -> list[str]:
    return [str(rule).strip() for rule in rules or () if str(rule).strip()]


def _validate_core_fields(
    *,
    name: str,
    sport_type: str,
    max_participants: int,
    entry_fee: int,
    starts_at: datetime,
    ends_at: datetime | None,
) -> None:
    errors: list[str] = []
    if not name.strip():
        errors.append("name: required")
    if sport_type not in SPORT_TYPES:
        errors.append("sport_type: unsupported value")
    if int(max_participants) < 1:
        errors.append("max_participants: must be >= 1")
    if int(entry_fee) < 0:
        errors.append("entry_fee: must be >= 0")
    if ends_at is not None and ends_at < starts_at:
        errors.append("ends_at: must not be before starts_at")
    if errors:
        raise ValidationError("invalid tournament", details=errors)


async def create_tournament(
    session: AsyncSession,
    *,
    actor: Actor,
    name: str,
    sport_type: str,
    starts_at: datetime,
    max_participants: int,
    entry_fee: int,
    now_utc: datetime,
    ends_at: datetime | None = None,
    description: str = "",
    location: str = "",
    rules: Sequence[str] | None = None,
    prizes: Sequence[Mapping[str, object]] | None = None,
) -> TournamentSnapshot:
    assert_organizer(actor)
    _validate_core_fields(
        name=name,
        sport_type=sport_type,
        max_participants=max_participants,
        entry_fee=entry_fee,
        starts_at=starts_at,
        ends_at=ends_at,
    )
    if starts_at.date() < now_utc.date():
        raise ValidationError("tournament date must be in the future", details=["starts_at: in the past"])

    tournament = await TournamentsRepo.create(
        session,
        tournament=Tournament(
            id=uuid4(),
            name=name.strip(),
            sport_type=sport_type,
            status=TOURNAMENT_STATUS_UPCOMING,
            starts_at=starts_at,
            ends_at=ends_at,
            max_participants=int(max_participants),
            entry_fee=int(entry_fee),
            organizer_id=actor.user_id,
            is_active=True,
            description=description.strip(),
            location=location.strip(),
            rules=_normalize_rules(rules),
            prizes=_normalize_prizes(prizes),
            created_at=now_utc,
            updated_at=now_utc,
        ),
    )
    logger.info(
        "tournament_created",
        tournament_id=str(tournament.id),
        organizer_id=actor.user_id,
        max_participants=int(max_participants),
    )
    return build_tournament_snapshot(tournament, await totals_for(session, tournament_id=tournament.id))


async def update_tournament(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    actor: Actor,
    changes: Mapping[str, object],
    now_utc: datetime,
) -> TournamentSnapshot:
    unknown = sorted(set(changes) - UPDATABLE_FIELDS - PROTECTED_FIELDS)
    if unknown:
        raise ValidationError("unknown fields", details=[f"{field}: not updatable" for field in unknown])
    updates = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}

    tournament = await TournamentsRepo.get_by_id_for_update(session, tournament_id)
    if tournament is None or not tournament.is_active:
        raise NotFoundError("tournament not found")
    assert_can_manage_tournament(tournament, actor)
    if tournament.status == TOURNAMENT_STATUS_COMPLETED:
        raise InvalidStateError("completed tournaments cannot be updated")

    next_status = updates.get("status", tournament.status)
    if next_status not in TOURNAMENT_STATUSES:
        raise ValidationError("unknown tournament status", details=["status: unsupported value"])
    if next_status != tournament.status and (tournament.status, next_status) not in TOURNAMENT_STATUS_TRANSITIONS:
        raise InvalidStateError(f"cannot move tournament from {tournament.status} to {next_status}")

    _validate_core_fields(
        name=str(updates.get("name", tournament.name)),
        sport_type=str(updates.get("sport_type", tournament.sport_type)),
        max_participants=int(updates.get("max_participants", tournament.max_participants)),
        entry_fee=int(updates.get("entry_fee", tournament.entry_fee)),
        starts_at=updates.get("starts_at", tournament.starts_at),
        ends_at=updates.get("ends_at", tournament.ends_at),
    )
    if "max_participants" in updates:
        current = await participant_count(session, tournament_id=tournament.id)
        if int(updates["max_participants"]) < current:
            raise ValidationError(
                "capacity below current participants",
                details=[f"max_participants: must be >= {current}"],
            )

    for field, value in updates.items():
        if field == "rules":
            value = _normalize_rules(value)
        elif field == "prizes":
            value = _normalize_prizes(value)
        elif field in {"name", "description", "location"}:
            value = str(value).strip()
        setattr(tournament, field, value)
    tournament.updated_at = now_utc
    await session.flush()

    logger.info(
        "tournament_updated",
        tournament_id=str(tournament.id),
        fields=sorted(updates),
        actor_id=actor.user_id,
    )
    return build_tournament_snapshot(tournament, await totals_for(session, tournament_id=tournament.id))


async def delete_tournament(
    session: AsyncSession,
    *,
    tournament_id: UUID,
    actor: Actor,
    now_utc: datetime,
) -> DeleteTournamentResult:
    tournament = await TournamentsRepo.get_by_id_for_update(session, tournament_id)
    if tournament is None or not tournament.is_active:
        raise NotFoundError("tournament not found")
    assert_can_manage_tournament(tournament, actor)

    if await RegistrationsRepo.exists_for_tournament(session, tournament_id=tournament.id):
        tournament.is_active = False
        tournament.updated_at = now_utc
        await session.flush()
        logger.info("tournament_deactivated", tournament_id=str(tournament_id), actor_id=actor.user_id)
        return DeleteTournamentResult(tournament_id=tournament_id, soft_deleted=True)

    await TournamentsRepo.delete(session, tournament=tournament)
    logger.info("tournament_deleted", tournament_id=str(tournament_id), actor_id=actor.user_id)
    return DeleteTournamentResult(tournament_id=tournament_id, soft_deleted=False)
