from __future__ import annotations

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from uuid import uuid4

import pytest

from tourney.tournaments import catalog
from tourney.tournaments.errors import (
    AuthorizationError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from tourney.tournaments.types import Actor, TournamentTotals

NOW_UTC = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
ORGANIZER = Actor(user_id=2, role="organizer")


def _tournament(**overrides) -> SimpleNamespace:
    values = {
        "id": uuid4(),
        "name": "Spring Cup",
        "sport_type": "Football",
        "status": "upcoming",
        "starts_at": NOW_UTC + timedelta(days=5),
        "ends_at": None,
        "max_participants": 16,
        "entry_fee": 1000,
        "organizer_id": ORGANIZER.user_id,
        "is_active": True,
        "description": "",
        "location": "Pune",
        "rules": [],
        "prizes": [],
        "created_at": NOW_UTC,
        "updated_at": NOW_UTC,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class _Session:
    async def flush(self) -> None:
        return None


def _patch_store(monkeypatch, tournament: SimpleNamespace | None, *, participants: int = 0) -> dict[str, object]:
    captured: dict[str, object] = {}

    async def _lock(session, tournament_id):
        return tournament

    async def _create(session, *, tournament):
        captured["created"] = tournament
        return tournament

    async def _delete(session, *, tournament):
        captured["deleted"] = tournament

    async def _exists(session, *, tournament_id):
        return captured.get("has_registrations", False)

    async def _participants(session, *, tournament_id):
        return participants

    async def _totals(session, *, tournament_id):
        return TournamentTotals(participants=participants, total_revenue=0)

    monkeypatch.setattr(catalog.TournamentsRepo, "get_by_id_for_update", _lock)
    monkeypatch.setattr(catalog.TournamentsRepo, "create", _create)
    monkeypatch.setattr(catalog.TournamentsRepo, "delete", _delete)
    monkeypatch.setattr(catalog.RegistrationsRepo, "exists_for_tournament", _exists)
    monkeypatch.setattr(catalog, "participant_count", _participants)
    monkeypatch.setattr(catalog, "totals_for", _totals)
    return captured


@pytest.mark.asyncio
async def test_create_tournament_starts_upcoming_and_normalizes_payload(monkeypatch) -> None:
    captured = _patch_store(monkeypatch, None)

    result = await catalog.create_tournament(
        _Session(),
        actor=ORGANIZER,
        name="  Spring Cup ",
        sport_type="Cricket",
        starts_at=NOW_UTC + timedelta(days=3),
        max_participants=8,
        entry_fee=2500,
        now_utc=NOW_UTC,
        rules=["No spikes", "  "],
        prizes=[{"position": "1st", "amount": 10000}],
    )

    created = captured["created"]
    assert created.status == "upcoming"
    assert created.is_active is True
    assert created.organizer_id == ORGANIZER.user_id
    assert result.name == "Spring Cup"
    assert result.rules == ["No spikes"]
    assert result.prizes == [{"position": "1st", "amount": 10000}]
    assert result.participants == 0


@pytest.mark.asyncio
async def test_create_tournament_allows_start_later_today(monkeypatch) -> None:
    _patch_store(monkeypatch, None)

    result = await catalog.create_tournament(
        _Session(),
        actor=ORGANIZER,
        name="Evening Open",
        sport_type="Tennis",
        starts_at=NOW_UTC - timedelta(hours=2),
        max_participants=4,
        entry_fee=0,
        now_utc=NOW_UTC,
    )

    assert result.status == "upcoming"


@pytest.mark.asyncio
async def test_create_tournament_rejects_past_date_and_bad_fields(monkeypatch) -> None:
    _patch_store(monkeypatch, None)

    with pytest.raises(ValidationError):
        await catalog.create_tournament(
            _Session(),
            actor=ORGANIZER,
            name="Old Cup",
            sport_type="Football",
            starts_at=NOW_UTC - timedelta(days=1),
            max_participants=4,
            entry_fee=0,
            now_utc=NOW_UTC,
        )
    with pytest.raises(ValidationError) as exc_info:
        await catalog.create_tournament(
            _Session(),
            actor=ORGANIZER,
            name="",
            sport_type="Chess",
            starts_at=NOW_UTC + timedelta(days=1),
            max_participants=0,
            entry_fee=-5,
            now_utc=NOW_UTC,
        )
    assert exc_info.value.details == [
        "name: required",
        "sport_type: unsupported value",
        "max_participants: must be >= 1",
        "entry_fee: must be >= 0",
    ]


@pytest.mark.asyncio
async def test_create_tournament_requires_organizer_role(monkeypatch) -> None:
    _patch_store(monkeypatch, None)

    with pytest.raises(AuthorizationError):
        await catalog.create_tournament(
            _Session(),
            actor=Actor(user_id=9, role="user"),
            name="Cup",
            sport_type="Football",
            starts_at=NOW_UTC + timedelta(days=1),
            max_participants=4,
            entry_fee=0,
            now_utc=NOW_UTC,
        )


@pytest.mark.asyncio
async def test_update_tournament_drops_protected_fields(monkeypatch) -> None:
    tournament = _tournament()
    _patch_store(monkeypatch, tournament)

    result = await catalog.update_tournament(
        _Session(),
        tournament_id=tournament.id,
        actor=ORGANIZER,
        changes={"name": "Summer Cup", "organizer_id": 99, "participants": 500},
        now_utc=NOW_UTC,
    )

    assert result.name == "Summer Cup"
    assert tournament.organizer_id == ORGANIZER.user_id


@pytest.mark.asyncio
async def test_update_tournament_rejects_capacity_below_participants(monkeypatch) -> None:
    tournament = _tournament(max_participants=16)
    _patch_store(monkeypatch, tournament, participants=10)

    with pytest.raises(ValidationError) as exc_info:
        await catalog.update_tournament(
            _Session(),
            tournament_id=tournament.id,
            actor=ORGANIZER,
            changes={"max_participants": 9},
            now_utc=NOW_UTC,
        )

    assert exc_info.value.details == ["max_participants: must be >= 10"]
    assert tournament.max_participants == 16


@pytest.mark.asyncio
async def test_update_tournament_enforces_lifecycle(monkeypatch) -> None:
    tournament = _tournament(status="upcoming")
    _patch_store(monkeypatch, tournament)

    with pytest.raises(InvalidStateError):
        await catalog.update_tournament(
            _Session(),
            tournament_id=tournament.id,
            actor=ORGANIZER,
            changes={"status": "completed"},
            now_utc=NOW_UTC,
        )

    result = await catalog.update_tournament(
        _Session(),
        tournament_id=tournament.id,
        actor=ORGANIZER,
        changes={"status": "ongoing"},
        now_utc=NOW_UTC,
    )
    assert result.status == "ongoing"


@pytest.mark.asyncio
async def test_update_tournament_rejects_completed_and_foreign_tournaments(monkeypatch) -> None:
    completed = _tournament(status="completed")
    _patch_store(monkeypatch, completed)
    with pytest.raises(InvalidStateError):
        await catalog.update_tournament(
            _Session(),
            tournament_id=completed.id,
            actor=ORGANIZER,
            changes={"name": "Renamed"},
            now_utc=NOW_UTC,
        )

    foreign = _tournament(organizer_id=77)
    _patch_store(monkeypatch, foreign)
    with pytest.raises(AuthorizationError):
        await catalog.update_tournament(
            _Session(),
            tournament_id=foreign.id,
            actor=ORGANIZER,
            changes={"name": "Renamed"},
            now_utc=NOW_UTC,
        )


@pytest.mark.asyncio
async def test_delete_tournament_soft_deletes_when_registrations_exist(monkeypatch) -> None:
    tournament = _tournament()
    captured = _patch_store(monkeypatch, tournament)
    captured["has_registrations"] = True

    result = await catalog.delete_tournament(
        _Session(),
        tournament_id=tournament.id,
        actor=ORGANIZER,
        now_utc=NOW_UTC,
    )

    assert result.soft_deleted is True
    assert tournament.is_active is False
    assert "deleted" not in captured


@pytest.mark.asyncio
async def test_delete_tournament_hard_deletes_without_registrations(monkeypatch) -> None:
    tournament = _tournament()
    captured = _patch_store(monkeypatch, tournament)

    result = await catalog.delete_tournament(
        _Session(),
        tournament_id=tournament.id,
        actor=Actor(user_id=1, role="admin"),
        now_utc=NOW_UTC,
    )

    assert result.soft_deleted is False
    assert captured["deleted"] is tournament


@pytest.mark.asyncio
async def test_delete_tournament_missing(monkeypatch) -> None:
    _patch_store(monkeypatch, None)

    with pytest.raises(NotFoundError):
        await catalog.delete_tournament(
            _Session(),
            tournament_id=uuid4(),
            actor=ORGANIZER,
            now_utc=NOW_UTC,
        )
