from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from typing import Generator
import redis
from .config import settings


def create_db_engine(database_url: str) -> Engine:
    """Create the engine for a database URL.

    SQLite connections wait on a locked database for as long as a booking
    transaction is allowed to wait on a locked PostgreSQL row.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={
                "check_same_thread": False,
                "timeout": settings.BOOKING_LOCK_TIMEOUT_MS / 1000,
            },
        )

    return create_engine(
        database_url,
        pool_size=5,
        max_overflow=10,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=1800,  # Recycle connections after 30 minutes
        pool_pre_ping=True,
    )


engine = create_db_engine(settings.get_database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Connections are opened lazily, on the first command
redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)

# Database dependency
def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_session_factory() -> sessionmaker:
    """Get the session factory that booking transactions open sessions from."""
    return SessionLocal

# Redis dependency
def get_redis():
    """Get Redis client."""
    return redis_client

# Database initialization
def init_db(bind: Engine = engine):
    """Initialize database tables."""
    # Register every model on Base.metadata
    from ..models import appointment, slot, user  # noqa: F401

    Base.metadata.create_all(bind=bind)
