"""Database connection and session management."""

import logging
from contextlib import contextmanager

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import sessionmaker, Session as OrmSession

from ..settings import APP_DIR
from .models import Base

logger = logging.getLogger(__name__)

# ── paths ────────────────────────────────────────────────────────────────────

DB_PATH = APP_DIR / "rollcall.db"

# ── engine & session factory (created lazily) ─────────────────────────────

_engine = None
_SessionFactory = None


def _get_engine():
    global _engine
    if _engine is None:
        APP_DIR.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(
            f"sqlite:///{DB_PATH}",
            connect_args={"check_same_thread": False},
            echo=False,
        )
    return _engine


def _get_session_factory():
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_get_engine(), expire_on_commit=False)
    return _SessionFactory


# ── public API ────────────────────────────────────────────────────────────


def configure_engine(url: str) -> None:
    """Override the database connection URL (tests use in-memory SQLite)."""
    global _engine, _SessionFactory
    _SessionFactory = None
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    _engine = create_engine(url, connect_args=connect_args, echo=False)
    logger.debug("Database engine configured for %s", _engine.url.render_as_string(hide_password=True))


def _run_migrations(engine) -> None:
    """Schema migrations for databases created by older versions.

    Runs after ``create_all`` so fresh installs already have every column.
    Each migration is idempotent.
    """
    insp = inspect(engine)
    table_names = set(insp.get_table_names())

    with engine.connect() as conn:
        # ── M1: message_type on records ─────────────────────────────────
        if "records" in table_names:
            columns = {c["name"] for c in insp.get_columns("records")}
            if "message_type" not in columns:
                logger.info("Migrating: adding records.message_type")
                conn.execute(text(
                    "ALTER TABLE records ADD COLUMN message_type VARCHAR(32)"
                ))

        # ── M2: group membership on students ────────────────────────────
        if "students" in table_names:
            columns = {c["name"] for c in insp.get_columns("students")}
            if "group_id" not in columns:
                logger.info("Migrating: adding students.group_id")
                conn.execute(text(
                    "ALTER TABLE students ADD COLUMN group_id INTEGER"
                ))

        conn.commit()


def init_db() -> None:
    """Create all tables and run migrations."""
    engine = _get_engine()
    Base.metadata.create_all(engine)
    _run_migrations(engine)


@contextmanager
def get_session():
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    factory = _get_session_factory()
    session: OrmSession = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
