"""
notestack: Database Engine and Bootstrap
==========================================

What:  Async SQLAlchemy engine/session factories plus the two startup steps
       the notes API runs before serving: wait for the database, then make
       sure the `notes` table exists.
How:   The engine is built from Settings by the lifespan handler and handed
       to SqlNoteStore; nothing here lives at module level.

Connection Pooling:
    pool_size / max_overflow come from settings (defaults 5 + 5).
    pool_pre_ping validates pooled connections before use.
    pool_recycle=3600 recycles connections every hour.

Startup Probe:
    SELECT 1, retried with exponential backoff and jitter until it succeeds
    or STARTUP_DEADLINE seconds have elapsed. Exhaustion raises StartupError;
    the service never starts against a database it could not reach.
"""

import asyncio
import logging
import time

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    stop_after_delay,
    wait_exponential_jitter,
)

from notestack.config import Settings
from notestack.exceptions import StartupError

logger = logging.getLogger(__name__)

# Lower bound for one probe attempt once the deadline is nearly spent
MIN_ATTEMPT_TIMEOUT = 0.1


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Its metadata is what ensure_schema() creates at startup.
    """
    pass


# ── Engine / Session Factories ────────────────────────────────────────────

def create_engine(settings: Settings) -> AsyncEngine:
    """
    Create the async engine for the configured DATABASE_URL.

    Raises:
        StartupError: DATABASE_URL is missing or cannot be parsed.
    """
    try:
        url = settings.require_database_url()
    except ValueError as e:
        raise StartupError(message=str(e)) from e

    try:
        return create_async_engine(
            url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
            echo=settings.log_level == "DEBUG",
        )
    except (SQLAlchemyError, ValueError) as e:
        # URL parse errors and unknown dialects
        raise StartupError(
            message="Could not configure the database engine",
            context={"error_type": type(e).__name__},
        ) from e


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Session factory used by SqlNoteStore.

    expire_on_commit=False keeps returned rows readable after commit.
    """
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


# ── Bootstrap Steps ───────────────────────────────────────────────────────

async def _ping(engine: AsyncEngine) -> None:
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def wait_for_database(
    engine: AsyncEngine,
    deadline: float,
    backoff_initial: float,
    backoff_max: float,
) -> int:
    """
    Block until the database answers SELECT 1, or give up at the deadline.

    Each attempt is bounded by the time left before the deadline (at least
    MIN_ATTEMPT_TIMEOUT), so a hung TCP connect cannot stall startup past it.

    Args:
        engine: Engine to probe.
        deadline: Total seconds allowed for all attempts.
        backoff_initial: First wait between attempts.
        backoff_max: Cap for the exponential wait.

    Returns:
        Number of attempts it took.

    Raises:
        StartupError: The database never became reachable.
    """
    attempts = 0
    try:
        async for attempt in AsyncRetrying(
            stop=stop_after_delay(deadline),
            wait=wait_exponential_jitter(
                initial=backoff_initial,
                max=backoff_max,
                jitter=backoff_initial,
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=False,
        ):
            with attempt:
                attempts = attempt.retry_state.attempt_number
                # Same clock stop_after_delay measures against
                elapsed = time.monotonic() - attempt.retry_state.start_time
                remaining = deadline - elapsed
                await asyncio.wait_for(
                    _ping(engine), timeout=max(remaining, MIN_ATTEMPT_TIMEOUT)
                )
    except RetryError as e:
        last = e.last_attempt.exception() if e.last_attempt else None
        logger.error(
            "Database unreachable after %d attempts in %.1fs: %s",
            attempts,
            deadline,
            last,
        )
        raise StartupError(
            message="Database did not become ready before the startup deadline",
            context={"attempts": attempts, "deadline": deadline},
        ) from e

    logger.info("Database reachable after %d attempt(s)", attempts)
    return attempts


async def ensure_schema(engine: AsyncEngine) -> None:
    """
    Create every table registered on Base.metadata if it does not exist yet.

    Raises:
        StartupError: The DDL failed.
    """
    # Registers Note on Base.metadata
    from notestack.models import note  # noqa: F401

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except (SQLAlchemyError, OSError) as e:
        logger.error("Schema creation failed: %s", e)
        raise StartupError(
            message="Could not create the notes table",
            context={"error_type": type(e).__name__},
        ) from e
    logger.info("Schema ready: %s", ", ".join(sorted(Base.metadata.tables)))


async def dispose_engine(engine: AsyncEngine) -> None:
    """Close all pooled connections (application shutdown)."""
    await engine.dispose()
