from tourney.db.repo.admin_stats_repo import AdminStatsRepo
from tourney.db.repo.outbox_events_repo import OutboxEventsRepo
from tourney.db.repo.registrations_repo import RegistrationsRepo
from tourney.db.repo.stats_repo import StatsRepo
from tourney.db.repo.tournaments_repo import TournamentsRepo
from tourney.db.repo.users_repo import UsersRepo

__all__ = [
    "AdminStatsRepo",
    "OutboxEventsRepo",
    "RegistrationsRepo",
    "StatsRepo",
    "TournamentsRepo",
    "UsersRepo",
]
