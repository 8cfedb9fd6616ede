"""Database Session Manager — async connection pool with automatic rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Engine isolation level comes from settings (SERIALIZABLE in production)
    - Serialization failures, deadlocks and unique-key races map to TransactionConflictError
    - Any other integrity violation (NOT NULL, FK, CHECK) is a DatabaseError, never retried
    - All other SQLAlchemy exceptions map to DatabaseError (core/errors.py)
    - Connection pool uses pool_pre_ping for stale connection detection

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
      (ADR: no global import side effects)
    - expire_on_commit=False: prevents lazy-load issues in async context
    - A unique violation is a conflict, not a failure: the claim inserts race on
      unique keys, and a re-run turns the race into a clean rejection
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from app.core.errors import DatabaseError, TransactionConflictError

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATEs: serialization_failure, deadlock_detected
_RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})
_UNIQUE_VIOLATION = "23505"
# SQLite reports constraint kinds only in the message text
_SQLITE_UNIQUE_MESSAGE = "UNIQUE constraint failed"


def _sqlstate(error: DBAPIError) -> str | None:
    orig = error.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


def is_unique_violation(error: IntegrityError) -> bool:
    return (
        _sqlstate(error) == _UNIQUE_VIOLATION
        or _SQLITE_UNIQUE_MESSAGE in str(error.orig)
    )


def is_transaction_conflict(error: DBAPIError) -> bool:
    """True when the failed transaction can be safely re-run."""
    if isinstance(error, IntegrityError):
        return is_unique_violation(error)
    return _sqlstate(error) in _RETRYABLE_SQLSTATES


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 20,
        max_overflow: int = 10,
        isolation_level: str | None = "SERIALIZABLE",
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow,
                pool_recycle=3600,
            )
        if isolation_level:
            engine_kwargs["isolation_level"] = isolation_level
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except DBAPIError as e:
            await session.rollback()
            if is_transaction_conflict(e):
                logger.warning(f"DB transaction conflict: {e}")
                raise TransactionConflictError("Concurrent write conflict")
            if isinstance(e, IntegrityError):
                logger.error(f"DB integrity error: {e}")
                raise DatabaseError("Integrity constraint violated", "commit")
            if isinstance(e, OperationalError):
                logger.error(f"DB operational error: {e}")
                raise DatabaseError("Connection or operational error", "execute")
            logger.error(f"DB driver error: {e}")
            raise DatabaseError("Database driver error", "query")
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown")
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness checks)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


def get_db_manager() -> DatabaseSessionManager:
    """FastAPI dependency for the session manager."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    return db_manager
