"""Database engine, session factory and connection lifecycle."""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from accounts.common.config import settings
from accounts.common.exceptions import ServiceUnavailableException

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()


class Database:
    """Owns the engine and tracks whether the store is reachable.

    The engine is created eagerly but no connection is opened until
    ``connect()`` succeeds. Sessions are refused until then.
    """

    def __init__(
        self,
        url: str,
        max_attempts: int = 5,
        backoff_seconds: float = 1.0,
        backoff_max_seconds: float = 10.0,
        **engine_kwargs,
    ):
        self.url = url
        self.max_attempts = max_attempts
        self.backoff_seconds = backoff_seconds
        self.backoff_max_seconds = backoff_max_seconds
        self.engine = create_async_engine(url, future=True, **engine_kwargs)
        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        self.is_ready = False

    async def connect(self) -> None:
        """Wait for the store, then create tables.

        Raises:
            DBAPIError: If the store is still unreachable after the last attempt
        """
        attempt_number = 0
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(
                multiplier=self.backoff_seconds,
                max=self.backoff_max_seconds,
            ),
            retry=retry_if_exception_type((DBAPIError, OSError)),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                attempt_number += 1
                logger.info(f"Connecting to database (attempt {attempt_number}/{self.max_attempts})")
                async with self.engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))

        await self.create_all()
        self.is_ready = True
        logger.info("Database is connected")

    async def create_all(self) -> None:
        """Initialize database tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        """Close database connections."""
        self.is_ready = False
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session, rolling back on uncaught exceptions.

        Each usecase is responsible for its own transaction boundaries.
        """
        if not self.is_ready:
            raise ServiceUnavailableException("database is not ready")

        async with self.session_maker() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise


database = Database(
    settings.database_url,
    max_attempts=settings.db_connect_max_attempts,
    backoff_seconds=settings.db_connect_backoff_seconds,
    backoff_max_seconds=settings.db_connect_backoff_max_seconds,
    echo=settings.debug,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions."""
    async with database.session() as session:
        yield session
