from __future__ import annotations

from tourney.db.models.tournaments import Tournament
from tourney.tournaments.constants import USER_ROLE_ADMIN, USER_ROLE_ORGANIZER
from tourney.tournaments.errors import AuthorizationError
from tourney.tournaments.types import Actor


def is_admin(actor: Actor) -> bool:
    return actor.role == USER_ROLE_ADMIN


def assert_admin(actor: Actor) -> None:
    if not is_admin(actor):
        raise AuthorizationError("admin access required")


def assert_organizer(actor: Actor) -> None:
    if actor.role not in {USER_ROLE_ORGANIZER, USER_ROLE_ADMIN}:
        raise AuthorizationError("organizer access required")


def assert_can_manage_tournament(tournament: Tournament, actor: Actor) -> None:
    if is_admin(actor):
        return
    if actor.role == USER_ROLE_ORGANIZER and int(tournament.organizer_id) == actor.user_id:
        return
    raise AuthorizationError("only the tournament organizer can manage it")
