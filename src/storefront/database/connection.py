"""
Database connection and session management.
"""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from storefront.utils.config import get_settings
from storefront.utils.logger import get_logger

logger = get_logger(__name__)


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL.

    PostgreSQL gets a pooled engine with pre-ping; SQLite connections are
    shared across threads for the threadpool FastAPI runs sync handlers in.
    """
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=echo,
        )

    return create_engine(
        database_url,
        pool_size=20,
        max_overflow=10,
        pool_pre_ping=True,
        echo=echo,
    )


_settings = get_settings()
DATABASE_URL = _settings.database_url

engine = build_engine(DATABASE_URL, echo=_settings.database_echo)

# Session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency yielding a request-scoped session.

    Usage:
        @router.get("/items")
        def get_items(db: Session = Depends(get_db)):
            ...
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Session context manager for scripts and the CLI.

    Usage:
        with get_db_context() as db:
            user = db.query(User).first()
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db(bind: Engine = None):
    """Create all tables."""
    from storefront.database.models import Base

    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables created successfully")


def drop_db(bind: Engine = None):
    """Drop all tables (use with caution!)."""
    from storefront.database.models import Base

    logger.warning("Dropping all database tables...")
    Base.metadata.drop_all(bind=bind or engine)
    logger.warning("All database tables dropped")
