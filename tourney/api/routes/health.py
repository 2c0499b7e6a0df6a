from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Mapping
from typing import Any

import structlog
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from redis.asyncio import Redis
from sqlalchemy import text

from tourney.core.config import get_settings
from tourney.db.session import SessionLocal
from tourney.workers.celery_app import celery_app

router = APIRouter(tags=["health"])
logger = structlog.get_logger(__name__)

CELERY_PING_TIMEOUT_SECONDS = 1.0

Check = dict[str, Any]


def _failed(error: str) -> Check:
    return {"status": "failed", "error": error}


def _log_failure(dependency: str, exc: Exception) -> None:
    # Exception text is never logged here.
    logger.warning("health_check_failed", dependency=dependency, error_type=type(exc).__name__)


async def _check_database() -> Check:
    try:
        async with SessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except Exception as exc:
        _log_failure("database", exc)
        return _failed("database_unavailable")
    return {"status": "ok"}


async def _check_redis() -> Check:
    client = Redis.from_url(get_settings().redis_url)
    try:
        pong = await client.ping()
    except Exception as exc:
        _log_failure("redis", exc)
        return _failed("redis_unavailable")
    finally:
        await client.aclose()
    return {"status": "ok"} if pong is True else _failed("redis_unexpected_ping_response")


def _check_celery_worker_sync() -> Check:
    try:
        inspector = celery_app.control.inspect(timeout=CELERY_PING_TIMEOUT_SECONDS)
        replies = inspector.ping() if inspector is not None else None
    except Exception as exc:
        _log_failure("celery", exc)
        return _failed("celery_unavailable")
    if inspector is None:
        return _failed("celery_inspector_unavailable")
    if not replies:
        return _failed("celery_no_workers")
    return {"status": "ok", "workers": len(replies)}


async def _check_celery_worker() -> Check:
    return await asyncio.to_thread(_check_celery_worker_sync)


async def _run_checks(probes: Mapping[str, Awaitable[Check]]) -> tuple[bool, dict[str, Check]]:
    results = await asyncio.gather(*probes.values())
    checks = dict(zip(probes, results))
    return all(check.get("status") == "ok" for check in checks.values()), checks


def _report(*, passed: bool, checks: dict[str, Check], passed_label: str, failed_label: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_200_OK if passed else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": passed_label if passed else failed_label, "checks": checks},
    )


@router.get("/health")
async def health() -> JSONResponse:
    passed, checks = await _run_checks(
        {
            "database": _check_database(),
            "redis": _check_redis(),
            "celery": _check_celery_worker(),
        }
    )
    return _report(passed=passed, checks=checks, passed_label="ok", failed_label="degraded")


@router.get("/ready")
async def ready() -> JSONResponse:
    # Workers only run the stats refresh; the API serves without them.
    passed, checks = await _run_checks({"database": _check_database(), "redis": _check_redis()})
    return _report(passed=passed, checks=checks, passed_label="ready", failed_label="not_ready")


@router.get("/live")
async def live() -> dict[str, str]:
    return {"status": "live"}
