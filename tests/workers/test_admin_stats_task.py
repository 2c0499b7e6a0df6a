import pytest

from tourney.workers import asyncio_runner
from tourney.workers.celery_app import celery_app
from tourney.workers.tasks import admin_stats


@pytest.fixture(autouse=True)
def _no_engine_dispose(monkeypatch) -> list[str]:
    calls: list[str] = []

    async def fake_dispose() -> None:
        calls.append("dispose")

    monkeypatch.setattr(asyncio_runner, "dispose_engine", fake_dispose)
    return calls


def test_run_admin_stats_refresh_task_wrapper(monkeypatch) -> None:
    async def fake_async() -> dict[str, object]:
        return {"total_tournaments": 4, "total_revenue": 2500}

    monkeypatch.setattr(admin_stats, "run_admin_stats_refresh_async", fake_async)

    result = admin_stats.run_admin_stats_refresh()
    assert result == {"total_tournaments": 4, "total_revenue": 2500}


def test_run_async_job_disposes_pool_around_job(_no_engine_dispose) -> None:
    async def job() -> int:
        _no_engine_dispose.append("job")
        return 7

    assert asyncio_runner.run_async_job(job(), job_name="unit") == 7
    assert _no_engine_dispose == ["dispose", "job", "dispose"]


def test_run_async_job_propagates_failure_after_dispose(_no_engine_dispose) -> None:
    async def job() -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        asyncio_runner.run_async_job(job(), job_name="unit")
    assert _no_engine_dispose == ["dispose", "dispose"]


def test_admin_stats_refresh_is_scheduled() -> None:
    entry = celery_app.conf.beat_schedule["admin-stats-refresh"]

    assert entry["task"] == "tourney.workers.tasks.admin_stats.run_admin_stats_refresh"
    assert entry["schedule"] >= 30.0
    assert entry["options"] == {"queue": "q_low"}
