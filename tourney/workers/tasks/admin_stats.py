from __future__ import annotations

from datetime import datetime, timezone

import structlog

from tourney.core.config import get_settings
from tourney.db.session import SessionLocal
from tourney.services.stats_reporter import refresh_global_stats
from tourney.workers.asyncio_runner import run_async_job
from tourney.workers.celery_app import celery_app

logger = structlog.get_logger(__name__)


async def run_admin_stats_refresh_async() -> dict[str, object]:
    now_utc = datetime.now(timezone.utc)
    async with SessionLocal.begin() as session:
        snapshot = await refresh_global_stats(session, now_utc=now_utc)
        result: dict[str, object] = {
            "generated_at": now_utc.isoformat(),
            "total_tournaments": int(snapshot.total_tournaments),
            "total_registrations": int(snapshot.total_registrations),
            "total_revenue": int(snapshot.total_revenue),
        }
    logger.info("admin_stats_refresh_finished", **result)
    return result


@celery_app.task(name="tourney.workers.tasks.admin_stats.run_admin_stats_refresh")
def run_admin_stats_refresh() -> dict[str, object]:
    return run_async_job(run_admin_stats_refresh_async(), job_name="admin_stats_refresh")


celery_app.conf.beat_schedule = celery_app.conf.beat_schedule or {}
celery_app.conf.beat_schedule.update(
    {
        "admin-stats-refresh": {
            "task": "tourney.workers.tasks.admin_stats.run_admin_stats_refresh",
            "schedule": float(get_settings().stats_refresh_interval_seconds),
            "options": {"queue": "q_low"},
        },
    }
)
