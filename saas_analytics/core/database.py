"""Database configuration and session management.

Features:
- SQLite by default, pooled connections for other backends
- Slow query logging
- Indexes for the per-company platform record reads
"""

import logging
import time
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import Index, create_engine, event, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from saas_analytics.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

is_sqlite = settings.database_url.startswith("sqlite")
is_memory = is_sqlite and ":memory:" in settings.database_url

# Ensure data directory exists
if is_sqlite and not is_memory:
    db_path = settings.database_url.replace("sqlite:///", "")
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

engine_args: dict[str, Any] = {}

if is_sqlite:
    # Platform fetches read from worker threads
    engine_args["connect_args"] = {"check_same_thread": False}
    if is_memory:
        engine_args["poolclass"] = StaticPool
else:
    engine_args.update({
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_timeout": settings.database_pool_timeout,
        "pool_pre_ping": True,  # Verify connections before using
        "pool_recycle": 3600,   # Recycle connections after 1 hour
    })

engine = create_engine(settings.database_url, **engine_args)


@event.listens_for(engine, "before_cursor_execute")
def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Capture query start time for performance monitoring."""
    conn.info.setdefault("query_start_time", []).append(time.perf_counter())


@event.listens_for(engine, "after_cursor_execute")
def after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    """Log slow queries based on configured threshold."""
    start_time = conn.info["query_start_time"].pop()
    total_time = (time.perf_counter() - start_time) * 1000  # Convert to ms

    if total_time > settings.slow_query_threshold_ms:
        logger.warning(
            f"Slow query detected ({total_time:.2f}ms): {statement[:200]}..."
        )


if is_sqlite:
    # WAL lets the per-platform readers run alongside sync writers
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        """Set SQLite pragmas for concurrent reads."""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """Context manager for database sessions (for sync jobs and scripts)."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """Initialize database tables."""
    # Import models to register them with Base
    from saas_analytics import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    _create_indexes()


def _create_indexes() -> None:
    """Create database indexes for common query patterns."""
    indexes = [
        # Platform users - read per company and platform on every correlation
        Index("idx_platform_users_company_platform", "platform_users", "company_id", "platform"),
        Index("idx_platform_users_email", "platform_users", "email"),
        # Seat costs
        Index("idx_platform_seat_costs_company", "platform_seat_costs", "company_id"),
    ]

    with engine.connect() as conn:
        for index in indexes:
            try:
                index.create(conn, checkfirst=True)
            except Exception as e:
                logger.debug(f"Index creation skipped (may already exist): {e}")
        conn.commit()


def get_db_stats(db: Session) -> dict[str, Any]:
    """Get database statistics for health reporting."""
    stats = {}

    for table in ("platform_users", "platform_seat_costs"):
        try:
            result = db.execute(text(f"SELECT COUNT(*) FROM {table}"))
            stats[f"{table}_count"] = result.scalar()
        except Exception:
            stats[f"{table}_count"] = None

    return stats
