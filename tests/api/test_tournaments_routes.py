from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace
from uuid import uuid4

import pytest

from tests.api.route_fixtures import (
    FakeSessionLocal,
    api_client,
    gateway_settings,
    identity_headers,
)
from tourney.api.routes import tournaments
from tourney.tournaments.errors import (
    CapacityExceededError,
    DuplicateRegistrationError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from tourney.tournaments.types import (
    Pagination,
    RegisterResult,
    RegistrationSnapshot,
    TournamentPage,
    TournamentSnapshot,
)

NOW_UTC = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


def _tournament_snapshot(**overrides) -> TournamentSnapshot:
    values: dict[str, object] = {
        "tournament_id": uuid4(),
        "name": "Spring Cup",
        "sport_type": "Football",
        "status": "upcoming",
        "starts_at": NOW_UTC,
        "ends_at": None,
        "max_participants": 16,
        "entry_fee": 1000,
        "organizer_id": 2,
        "is_active": True,
        "description": "",
        "location": "Pune",
        "rules": ["Fair play"],
        "prizes": [{"position": "1st", "amount": 5000}],
        "participants": 3,
        "total_revenue": 2000,
        "created_at": NOW_UTC,
    }
    values.update(overrides)
    return TournamentSnapshot(**values)


def _registration_snapshot(tournament_id, **overrides) -> RegistrationSnapshot:
    values: dict[str, object] = {
        "registration_id": uuid4(),
        "tournament_id": tournament_id,
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
    }
    values.update(overrides)
    return RegistrationSnapshot(**values)


@pytest.fixture
def fake_sessions(monkeypatch) -> FakeSessionLocal:
    sessions = FakeSessionLocal()
    monkeypatch.setattr(tournaments, "get_settings", lambda: gateway_settings())
    monkeypatch.setattr(tournaments, "SessionLocal", sessions)
    return sessions


@pytest.mark.asyncio
async def test_list_tournaments_returns_derived_totals(monkeypatch, fake_sessions) -> None:
    snapshot = _tournament_snapshot()
    captured: dict[str, object] = {}

    async def _list(session, *, page, limit, status, sport_type):
        captured.update(page=page, limit=limit, status=status, sport_type=sport_type)
        return TournamentPage(
            items=[snapshot],
            pagination=Pagination(current_page=2, total_pages=3, total_count=21, has_next=True, has_prev=True),
        )

    monkeypatch.setattr(tournaments.service, "list_tournaments", _list)

    async with api_client() as client:
        response = await client.get(
            "/api/tournaments",
            params={"page": 2, "limit": 10, "sport_type": "Football"},
            headers=identity_headers(user_id=None, role=None),
        )

    assert response.status_code == 200
    payload = response.json()
    assert captured == {"page": 2, "limit": 10, "status": None, "sport_type": "Football"}
    assert payload["pagination"] == {
        "current_page": 2,
        "total_pages": 3,
        "total_count": 21,
        "has_next": True,
        "has_prev": True,
    }
    assert payload["tournaments"][0]["id"] == str(snapshot.tournament_id)
    assert payload["tournaments"][0]["participants"] == 3
    assert payload["tournaments"][0]["total_revenue"] == 2000
    assert payload["tournaments"][0]["prizes"] == [{"position": "1st", "amount": 5000}]


@pytest.mark.asyncio
async def test_register_uses_gateway_identity(monkeypatch, fake_sessions) -> None:
    tournament_id = uuid4()
    captured: dict[str, object] = {}

    async def _register(session, **kwargs):
        captured["session"] = session
        captured.update(kwargs)
        return RegisterResult(
            registration=_registration_snapshot(tournament_id),
            participants=4,
            max_participants=16,
            has_full_profile=False,
        )

    monkeypatch.setattr(tournaments.service, "register", _register)

    async with api_client() as client:
        response = await client.post(
            f"/api/tournaments/{tournament_id}/register",
            json={"payment_method": "upi"},
            headers=identity_headers(user_id=7, role="user"),
        )

    assert response.status_code == 201
    assert response.json()["participants"] == 4
    assert response.json()["registration"]["registration_status"] == "pending"
    assert captured["session"] is fake_sessions.session
    assert captured["tournament_id"] == tournament_id
    assert captured["user_id"] == 7
    assert captured["payment_status"] == "pending"
    assert captured["payment_method"] == "upi"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("error", "status_code", "detail"),
    [
        (DuplicateRegistrationError(), 409, {"code": "E_ALREADY_REGISTERED"}),
        (CapacityExceededError(), 409, {"code": "E_TOURNAMENT_FULL"}),
        (InvalidStateError("closed"), 409, {"code": "E_INVALID_STATE"}),
        (NotFoundError("missing"), 404, {"code": "E_NOT_FOUND"}),
        (
            ValidationError("missing", details=["phone: required"]),
            422,
            {"code": "E_VALIDATION", "errors": ["phone: required"]},
        ),
    ],
)
async def test_register_maps_domain_errors(
    monkeypatch,
    fake_sessions,
    error: Exception,
    status_code: int,
    detail: dict[str, object],
) -> None:
    async def _register(session, **kwargs):
        raise error

    monkeypatch.setattr(tournaments.service, "register", _register)

    async with api_client() as client:
        response = await client.post(
            f"/api/tournaments/{uuid4()}/register",
            json={},
            headers=identity_headers(),
        )

    assert response.status_code == status_code
    assert response.json() == {"detail": detail}


@pytest.mark.asyncio
async def test_get_tournament_not_found(monkeypatch, fake_sessions) -> None:
    async def _get(session, *, tournament_id):
        raise NotFoundError("tournament not found")

    monkeypatch.setattr(tournaments.service, "get_tournament", _get)

    async with api_client() as client:
        response = await client.get(f"/api/tournaments/{uuid4()}", headers=identity_headers())

    assert response.status_code == 404
    assert response.json() == {"detail": {"code": "E_NOT_FOUND"}}


@pytest.mark.asyncio
async def test_tournament_stats_returns_snapshot_and_recent(monkeypatch, fake_sessions) -> None:
    snapshot = SimpleNamespace(
        total_tournaments=4,
        active_tournaments=3,
        completed_tournaments=1,
        upcoming_tournaments=2,
        total_users=10,
        active_users=9,
        total_revenue=25_000,
        this_month_revenue=8_000,
        average_participants=3,
        total_registrations=10,
        last_updated=NOW_UTC,
    )
    captured: dict[str, object] = {}

    async def _get_global_stats(session, *, now_utc):
        return snapshot

    async def _recent(session, *, limit):
        captured["limit"] = limit
        return [_tournament_snapshot()]

    monkeypatch.setattr(tournaments.stats_reporter, "get_global_stats", _get_global_stats)
    monkeypatch.setattr(tournaments.service, "list_recent_tournaments", _recent)

    async with api_client() as client:
        response = await client.get("/api/tournaments/stats", headers=identity_headers(user_id=1, role="admin"))

    assert response.status_code == 200
    payload = response.json()
    assert payload["stats"]["total_revenue"] == 25_000
    assert payload["stats"]["average_participants"] == 3
    assert len(payload["recent_tournaments"]) == 1
    assert captured["limit"] == 10
