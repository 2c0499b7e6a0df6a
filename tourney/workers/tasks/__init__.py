from tourney.workers.tasks.admin_stats import run_admin_stats_refresh

__all__ = [
    "run_admin_stats_refresh",
]
