from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable
from typing import TypeVar

import structlog

from tourney.db.session import dispose_engine

logger = structlog.get_logger(__name__)

T = TypeVar("T")


async def _run_job(job_name: str, awaitable: Awaitable[T]) -> T:
    # asyncpg connections are bound to the loop that opened them.
    await dispose_engine()
    started_at = time.monotonic()
    try:
        result = await awaitable
    except Exception:
        logger.exception("worker_job_failed", job=job_name)
        raise
    finally:
        await dispose_engine()
    logger.info(
        "worker_job_finished",
        job=job_name,
        duration_ms=int((time.monotonic() - started_at) * 1000),
    )
    return result


def run_async_job(awaitable: Awaitable[T], *, job_name: str) -> T:
    """Run one coroutine on a fresh event loop with a clean DB pool around it."""
    return asyncio.run(_run_job(job_name, awaitable))
