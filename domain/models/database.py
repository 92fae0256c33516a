"""
Database configuration and session management.
"""

import logging
from datetime import datetime, timezone
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from app.config import settings

logger = logging.getLogger("mealcount.database")

# Create SQLAlchemy Base
Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware current time used for store-assigned timestamps"""
    return datetime.now(timezone.utc)


def build_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine; in-memory SQLite shares one connection across threads."""
    if url in ("sqlite://", "sqlite:///:memory:"):
        return create_engine(
            url,
            echo=echo,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, echo=echo, future=True, pool_pre_ping=True)


def build_session_factory(bind: Engine) -> sessionmaker:
    """Session factory whose objects stay readable after commit"""
    return sessionmaker(bind=bind, future=True, expire_on_commit=False)


# Create engine
engine = build_engine(settings.database_url, echo=settings.db_echo)

# Create session factory
SessionLocal = build_session_factory(engine)


def init_database(bind: Engine = None):
    """Initialize database schema"""
    # Import models so they register on Base.metadata
    from domain.models import registration, class_info, audit, user, announcement  # noqa: F401

    target = bind or engine
    with target.begin() as conn:
        Base.metadata.create_all(bind=conn)
        logger.info("Database tables created successfully")


def get_db_session():
    """Get database session (for FastAPI dependency injection)"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
