import logging

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base

from perf_review.core.config import settings

logger = logging.getLogger(__name__)

DATABASE_URL = settings.database_url


def _create_engine(url: str):
    """PostgreSQL in deployments, SQLite for local runs and tests."""
    if url.startswith("postgresql"):
        return create_engine(url, pool_pre_ping=True)

    sqlite_engine = create_engine(url, connect_args={"check_same_thread": False})

    # SQLite ignores FOREIGN KEY clauses unless asked per connection
    @event.listens_for(sqlite_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return sqlite_engine


engine = _create_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """
    Request-scoped session. Services decide when to commit; the session is
    always closed here.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Register the review models and create any missing tables."""
    from perf_review.models import (  # noqa: F401
        user, department, performance_review, approval_history, system_setting
    )
    Base.metadata.create_all(bind=engine)
    logger.info(f"Schema ready ({len(Base.metadata.tables)} tables)")
