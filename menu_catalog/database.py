from contextlib import contextmanager
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from menu_catalog.config.catalog_config import settings

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_catalog_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine, enabling WAL and foreign keys on SQLite."""
    is_sqlite = url.startswith('sqlite')
    engine = create_engine(
        url,
        connect_args={'check_same_thread': False} if is_sqlite else {},
        echo=echo,
        pool_pre_ping=True,
    )

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            if ':memory:' not in url:
                cursor.execute("PRAGMA journal_mode=WAL")
                cursor.execute("PRAGMA synchronous=NORMAL")
            cursor.execute("PRAGMA busy_timeout=5000")
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


engine = create_catalog_engine(settings.database_url, settings.sql_echo)
SessionLocal = sessionmaker(bind=engine)


def get_db():
    """Yield a session and always close it"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session):
    """
    Run a unit of work: commit on success, roll back and re-raise on failure.

    Usage:
        with transaction(db):
            restaurant = repo.get_by_id(restaurant_id)
            restaurant.change_status(RestaurantStatus.CLOSED, actor)
            repo.save(restaurant)
    """
    try:
        yield db
        db.commit()
    except Exception:
        logger.debug("Rolling back catalog transaction", exc_info=True)
        db.rollback()
        raise
