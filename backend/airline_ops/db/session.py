import importlib.util
import logging
from typing import Dict, Tuple

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from airline_ops.core.config import settings

logger = logging.getLogger(__name__)


def normalize_database_url(url: str) -> str:
    """Point plain postgres URLs at the psycopg (v3) driver when psycopg2 is absent.

    SQLAlchemy loads psycopg2 for 'postgresql://'; only 'psycopg' is a dependency here.
    """
    psycopg2_present = importlib.util.find_spec("psycopg2") is not None
    if psycopg2_present or not url.startswith(("postgres://", "postgresql://")) or "+psycopg" in url:
        return url
    # Normalize legacy prefix 'postgres://' -> 'postgresql://'
    if url.startswith("postgres://"):
        url = "postgresql://" + url[len("postgres://"):]
    return url.replace("postgresql://", "postgresql+psycopg://", 1)


def _install_sqlite_transactions(engine: Engine) -> None:
    """Let SQLAlchemy own BEGIN so every transaction takes the write lock up front.

    pysqlite's implicit deferred BEGIN lets two writers deadlock on lock upgrade;
    BEGIN IMMEDIATE makes them queue on the busy timeout instead.
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_session_factory(
    db_url: str,
    *,
    echo: bool = False,
    busy_timeout: float | None = None,
) -> Tuple[Engine, sessionmaker[Session]]:
    """Return an engine/session factory pair for the given database URL."""
    db_url = normalize_database_url(db_url)
    kwargs: Dict[str, object] = {"echo": echo}
    if db_url.startswith("sqlite"):
        timeout = settings.sqlite_busy_timeout if busy_timeout is None else busy_timeout
        kwargs["connect_args"] = {"check_same_thread": False, "timeout": timeout}
        if db_url.endswith(":memory:") or db_url.endswith("://"):
            kwargs["poolclass"] = StaticPool
    engine = create_engine(db_url, **kwargs)
    if db_url.startswith("sqlite"):
        _install_sqlite_transactions(engine)
    logger.debug("Created engine for %s", engine.url.render_as_string(hide_password=True))
    session_factory = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    return engine, session_factory


engine, SessionLocal = create_session_factory(settings.database_url)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
