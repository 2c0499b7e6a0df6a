from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from tourney.tournaments import ledger
from tourney.tournaments.errors import (
    CapacityExceededError,
    DuplicateRegistrationError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)

NOW_UTC = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def _tournament(**overrides) -> SimpleNamespace:
    values = {
        "id": uuid4(),
        "is_active": True,
        "status": "upcoming",
        "max_participants": 2,
        "entry_fee": 500,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def _registration(**overrides) -> SimpleNamespace:
    values = {
        "id": uuid4(),
        "tournament_id": uuid4(),
        "user_id": 7,
        "registered_at": NOW_UTC,
        "payment_status": "pending",
        "registration_status": "pending",
        "payment_method": "card",
        "amount_paid": 0,
        "transaction_id": None,
        "paid_at": None,
        "profile": None,
        "has_full_profile": False,
        "is_active": True,
        "cancelled_at": None,
        "cancel_reason": None,
        "admin_notes": [],
        "updated_at": NOW_UTC,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class _Session:
    async def flush(self) -> None:
        return None


def _patch_register_path(
    monkeypatch,
    *,
    tournament: SimpleNamespace | None,
    existing: object | None = None,
    participants: int = 0,
) -> dict[str, object]:
    captured: dict[str, object] = {"events": []}

    async def _get_user(session, user_id: int):
        return SimpleNamespace(id=user_id)

    async def _lock_tournament(session, tournament_id):
        captured["locked_tournament_id"] = tournament_id
        return tournament

    async def _get_active_for_user(session, *, tournament_id, user_id):
        return existing

    async def _count_participants(session, *, tournament_id):
        return participants

    async def _create(session, *, registration):
        captured["registration"] = registration
        return registration

    async def _emit(session, *, event_type, registration, happened_at, extra_payload=None):
        captured["events"].append(event_type)

    monkeypatch.setattr(ledger.UsersRepo, "get_by_id", _get_user)
    monkeypatch.setattr(ledger.TournamentsRepo, "get_by_id_for_update", _lock_tournament)
    monkeypatch.setattr(ledger.RegistrationsRepo, "get_active_for_user", _get_active_for_user)
    monkeypatch.setattr(ledger.RegistrationsRepo, "count_participants", _count_participants)
    monkeypatch.setattr(ledger.RegistrationsRepo, "create", _create)
    monkeypatch.setattr(ledger, "emit_registration_event", _emit)
    return captured


@pytest.mark.asyncio
async def test_register_creates_pending_registration(monkeypatch) -> None:
    tournament = _tournament()
    captured = _patch_register_path(monkeypatch, tournament=tournament, participants=1)

    result = await ledger.register(
        _Session(),
        tournament_id=tournament.id,
        user_id=7,
        now_utc=NOW_UTC,
    )

    assert result.participants == 2
    assert result.max_participants == 2
    assert result.has_full_profile is False
    assert result.registration.registration_status == "pending"
    assert result.registration.payment_status == "pending"
    assert result.registration.amount_paid == 0
    assert captured["locked_tournament_id"] == tournament.id
    assert captured["events"] == ["registration_created"]


@pytest.mark.asyncio
async def test_register_with_completed_payment_confirms_and_charges_entry_fee(monkeypatch) -> None:
    tournament = _tournament(entry_fee=1500)
    _patch_register_path(monkeypatch, tournament=tournament)

    result = await ledger.register(
        _Session(),
        tournament_id=tournament.id,
        user_id=7,
        now_utc=NOW_UTC,
        payment_status="completed",
        transaction_id="txn-1",
    )

    assert result.registration.registration_status == "confirmed"
    assert result.registration.amount_paid == 1500
    assert result.registration.paid_at == NOW_UTC
    assert result.registration.transaction_id == "txn-1"


@pytest.mark.asyncio
async def test_register_rejects_existing_active_registration(monkeypatch) -> None:
    tournament = _tournament()
    captured = _patch_register_path(monkeypatch, tournament=tournament, existing=_registration())

    with pytest.raises(DuplicateRegistrationError):
        await ledger.register(_Session(), tournament_id=tournament.id, user_id=7, now_utc=NOW_UTC)

    assert "registration" not in captured
    assert captured["events"] == []


@pytest.mark.asyncio
async def test_register_rejects_when_tournament_is_full(monkeypatch) -> None:
    tournament = _tournament(max_participants=3)
    captured = _patch_register_path(monkeypatch, tournament=tournament, participants=3)

    with pytest.raises(CapacityExceededError):
        await ledger.register(_Session(), tournament_id=tournament.id, user_id=7, now_utc=NOW_UTC)

    assert "registration" not in captured


@pytest.mark.asyncio
@pytest.mark.parametrize("status", ["completed", "cancelled"])
async def test_register_rejects_closed_tournament(monkeypatch, status: str) -> None:
    tournament = _tournament(status=status)
    _patch_register_path(monkeypatch, tournament=tournament)

    with pytest.raises(InvalidStateError):
        await ledger.register(_Session(), tournament_id=tournament.id, user_id=7, now_utc=NOW_UTC)


@pytest.mark.asyncio
async def test_register_treats_soft_deleted_tournament_as_missing(monkeypatch) -> None:
    tournament = _tournament(is_active=False)
    _patch_register_path(monkeypatch, tournament=tournament)

    with pytest.raises(NotFoundError):
        await ledger.register(_Session(), tournament_id=tournament.id, user_id=7, now_utc=NOW_UTC)


@pytest.mark.asyncio
async def test_register_maps_unique_index_violation_to_duplicate(monkeypatch) -> None:
    tournament = _tournament()
    _patch_register_path(monkeypatch, tournament=tournament)

    async def _create(session, *, registration):
        raise IntegrityError("INSERT", {}, Exception("uq_tournament_registrations_active_tournament_user"))

    monkeypatch.setattr(ledger.RegistrationsRepo, "create", _create)

    with pytest.raises(DuplicateRegistrationError):
        await ledger.register(_Session(), tournament_id=tournament.id, user_id=7, now_utc=NOW_UTC)


@pytest.mark.asyncio
async def test_register_validates_input_before_touching_the_store(monkeypatch) -> None:
    async def _unexpected(*args, **kwargs):
        raise AssertionError("store must not be touched")

    monkeypatch.setattr(ledger.UsersRepo, "get_by_id", _unexpected)
    monkeypatch.setattr(ledger.TournamentsRepo, "get_by_id_for_update", _unexpected)

    with pytest.raises(ValidationError):
        await ledger.register(_Session(), tournament_id=uuid4(), user_id=None, now_utc=NOW_UTC)
    with pytest.raises(ValidationError):
        await ledger.register(
            _Session(),
            tournament_id=uuid4(),
            user_id=7,
            now_utc=NOW_UTC,
            payment_status="refunded",
        )
    with pytest.raises(ValidationError) as exc_info:
        await ledger.register(
            _Session(),
            tournament_id=uuid4(),
            user_id=7,
            now_utc=NOW_UTC,
            profile={"fullName": "Asha Rao"},
        )
    assert "phone: required" in exc_info.value.details


@pytest.mark.asyncio
async def test_register_rejects_unknown_user(monkeypatch) -> None:
    tournament = _tournament()
    _patch_register_path(monkeypatch, tournament=tournament)

    async def _missing_user(session, user_id: int):
        return None

    monkeypatch.setattr(ledger.UsersRepo, "get_by_id", _missing_user)

    with pytest.raises(NotFoundError):
        await ledger.register(_Session(), tournament_id=tournament.id, user_id=7, now_utc=NOW_UTC)


def _patch_registration_lock(monkeypatch, registration: SimpleNamespace | None) -> dict[str, object]:
    captured: dict[str, object] = {"events": []}

    async def _get(session, registration_id):
        return registration

    async def _lock_tournament(session, tournament_id):
        captured["locked_tournament_id"] = tournament_id
        return _tournament(id=tournament_id)

    async def _count_participants(session, *, tournament_id):
        return 4

    async def _emit(session, *, event_type, registration, happened_at, extra_payload=None):
        captured["events"].append((event_type, extra_payload))

    monkeypatch.setattr(ledger.RegistrationsRepo, "get_by_id", _get)
    monkeypatch.setattr(ledger.RegistrationsRepo, "get_by_id_for_update", _get)
    monkeypatch.setattr(ledger.TournamentsRepo, "get_by_id_for_update", _lock_tournament)
    monkeypatch.setattr(ledger.RegistrationsRepo, "count_participants", _count_participants)
    monkeypatch.setattr(ledger, "emit_registration_event", _emit)
    return captured


@pytest.mark.asyncio
async def test_mark_paid_confirms_registration(monkeypatch) -> None:
    registration = _registration()
    captured = _patch_registration_lock(monkeypatch, registration)

    result = await ledger.mark_paid(
        _Session(),
        registration_id=registration.id,
        amount_paid=750,
        now_utc=NOW_UTC,
        transaction_id="txn-9",
    )

    assert result.payment_status == "completed"
    assert result.registration_status == "confirmed"
    assert result.amount_paid == 750
    assert result.paid_at == NOW_UTC
    assert result.transaction_id == "txn-9"
    assert captured["events"] == [("registration_paid", None)]


@pytest.mark.asyncio
async def test_mark_paid_rejects_negative_amount(monkeypatch) -> None:
    _patch_registration_lock(monkeypatch, _registration())

    with pytest.raises(ValidationError):
        await ledger.mark_paid(_Session(), registration_id=uuid4(), amount_paid=-1, now_utc=NOW_UTC)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides",
    [
        {"payment_status": "completed", "registration_status": "confirmed"},
        {"registration_status": "cancelled", "is_active": False},
        {"registration_status": "completed"},
        {"registration_status": "waitlisted"},
    ],
)
async def test_mark_paid_rejects_non_payable_registration(monkeypatch, overrides: dict[str, object]) -> None:
    registration = _registration(**overrides)
    _patch_registration_lock(monkeypatch, registration)

    with pytest.raises(InvalidStateError):
        await ledger.mark_paid(
            _Session(),
            registration_id=registration.id,
            amount_paid=100,
            now_utc=NOW_UTC,
        )


@pytest.mark.asyncio
async def test_mark_paid_missing_registration(monkeypatch) -> None:
    _patch_registration_lock(monkeypatch, None)

    with pytest.raises(NotFoundError):
        await ledger.mark_paid(_Session(), registration_id=uuid4(), amount_paid=100, now_utc=NOW_UTC)


@pytest.mark.asyncio
async def test_cancel_deactivates_and_records_reason(monkeypatch) -> None:
    registration = _registration(registration_status="confirmed")
    captured = _patch_registration_lock(monkeypatch, registration)

    result = await ledger.cancel(
        _Session(),
        registration_id=registration.id,
        now_utc=NOW_UTC,
        reason="injury",
        actor_id=7,
    )

    assert result.idempotent_replay is False
    assert result.participants == 4
    assert result.registration.registration_status == "cancelled"
    assert result.registration.is_active is False
    assert result.registration.cancelled_at == NOW_UTC
    assert result.registration.cancel_reason == "injury"
    assert result.registration.admin_notes == [
        {
            "note": "Registration cancelled: injury",
            "added_by": 7,
            "added_at": NOW_UTC.isoformat(),
        }
    ]
    assert captured["locked_tournament_id"] == registration.tournament_id
    assert captured["events"] == [("registration_cancelled", {"reason": "injury"})]


@pytest.mark.asyncio
async def test_cancel_is_idempotent_for_cancelled_registration(monkeypatch) -> None:
    cancelled_at = datetime(2026, 3, 1, tzinfo=timezone.utc)
    registration = _registration(
        registration_status="cancelled",
        is_active=False,
        cancelled_at=cancelled_at,
    )
    captured = _patch_registration_lock(monkeypatch, registration)

    result = await ledger.cancel(_Session(), registration_id=registration.id, now_utc=NOW_UTC)

    assert result.idempotent_replay is True
    assert result.registration.cancelled_at == cancelled_at
    assert captured["events"] == []


@pytest.mark.asyncio
async def test_cancel_rejects_completed_registration(monkeypatch) -> None:
    registration = _registration(registration_status="completed", payment_status="completed")
    _patch_registration_lock(monkeypatch, registration)

    with pytest.raises(InvalidStateError):
        await ledger.cancel(_Session(), registration_id=registration.id, now_utc=NOW_UTC)


@pytest.mark.asyncio
async def test_transition_follows_state_machine(monkeypatch) -> None:
    registration = _registration(registration_status="confirmed")
    _patch_registration_lock(monkeypatch, registration)

    result = await ledger.transition(
        _Session(),
        registration_id=registration.id,
        target_status="completed",
        actor_id=1,
        now_utc=NOW_UTC,
        note="played all matches",
    )

    assert result.registration_status == "completed"
    assert result.admin_notes[-1]["note"] == "played all matches"
    assert result.admin_notes[-1]["added_by"] == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("current", "target"),
    [
        ("pending", "completed"),
        ("completed", "pending"),
        ("waitlisted", "confirmed"),
        ("confirmed", "pending"),
    ],
)
async def test_transition_rejects_disallowed_moves(monkeypatch, current: str, target: str) -> None:
    registration = _registration(registration_status=current)
    _patch_registration_lock(monkeypatch, registration)

    with pytest.raises(InvalidStateError):
        await ledger.transition(
            _Session(),
            registration_id=registration.id,
            target_status=target,
            actor_id=1,
            now_utc=NOW_UTC,
        )


@pytest.mark.asyncio
async def test_transition_to_cancelled_delegates_to_cancel(monkeypatch) -> None:
    registration = _registration()
    _patch_registration_lock(monkeypatch, registration)

    result = await ledger.transition(
        _Session(),
        registration_id=registration.id,
        target_status="cancelled",
        actor_id=1,
        now_utc=NOW_UTC,
        note="duplicate entry",
    )

    assert result.registration_status == "cancelled"
    assert result.is_active is False
    assert result.cancel_reason == "duplicate entry"


@pytest.mark.asyncio
async def test_transition_rejects_unknown_status(monkeypatch) -> None:
    _patch_registration_lock(monkeypatch, _registration())

    with pytest.raises(ValidationError):
        await ledger.transition(
            _Session(),
            registration_id=uuid4(),
            target_status="archived",
            actor_id=1,
            now_utc=NOW_UTC,
        )
