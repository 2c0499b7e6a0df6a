from tourney.tournaments.catalog import create_tournament, delete_tournament, update_tournament
from tourney.tournaments.ledger import cancel, mark_paid, register, transition
from tourney.tournaments.queries import (
    assert_can_cancel_registration,
    get_registration,
    get_tournament,
    list_organizer_tournaments,
    list_recent_tournaments,
    list_registrations,
    list_tournament_registrations,
    list_tournaments,
    list_user_registrations,
)

__all__ = [
    "assert_can_cancel_registration",
    "cancel",
    "create_tournament",
    "delete_tournament",
    "get_registration",
    "get_tournament",
    "list_organizer_tournaments",
    "list_recent_tournaments",
    "list_registrations",
    "list_tournament_registrations",
    "list_tournaments",
    "list_user_registrations",
    "mark_paid",
    "register",
    "transition",
    "update_tournament",
]
