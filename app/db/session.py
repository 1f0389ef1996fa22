# app/db/session.py
import logging
import threading

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import settings

logger = logging.getLogger(__name__)


def process_database_url(url: str) -> str:
    """Normalize DATABASE_URL for SQLAlchemy."""
    if not url:
        return "sqlite://"

    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)

    if url.startswith("postgresql://") and "sslmode=" not in url:
        if "localhost" not in url and "127.0.0.1" not in url:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}sslmode=require"

    return url


def build_engine(url: str):
    url = process_database_url(url)
    engine_kwargs = dict(pool_pre_ping=True)
    connect_args = {}

    if url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        # An in-memory database only exists on one connection
        if url in ("sqlite://", "sqlite:///:memory:"):
            engine_kwargs["poolclass"] = StaticPool
    elif url.startswith("postgresql"):
        engine_kwargs.update({
            "pool_size": 5,
            "max_overflow": 10,
            "pool_timeout": 30,
            "pool_recycle": 1800,
        })

    return create_engine(url, connect_args=connect_args, echo=False, **engine_kwargs)


DATABASE_URL = process_database_url(settings.DATABASE_URL)
engine = build_engine(DATABASE_URL)
logger.info("Database engine created (%s)", engine.url.get_backend_name())

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

# Held around commits, rollbacks and session close. The in-memory SQLite
# engine hands every thread the same connection, so one request's rollback
# must not land inside another request's transaction.
write_lock = threading.RLock()


def close_session(db) -> None:
    with write_lock:
        db.close()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        close_session(db)
