from tourney.db.models.admin_stats import AdminStatsSnapshot
from tourney.db.models.outbox_events import OutboxEvent
from tourney.db.models.tournament_registrations import TournamentRegistration
from tourney.db.models.tournaments import Tournament
from tourney.db.models.users import User

__all__ = [
    "AdminStatsSnapshot",
    "OutboxEvent",
    "Tournament",
    "TournamentRegistration",
    "User",
]
