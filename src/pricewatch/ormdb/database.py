"""Engine and session management for the alert store."""

from typing import Any, Dict, Optional

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config.logging import get_logger
from ..config.settings import Settings, get_settings

logger = get_logger(__name__)

Base = declarative_base()

_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def _is_sqlite(database_url: str) -> bool:
    return make_url(database_url).get_backend_name() == "sqlite"


def _is_sqlite_memory(database_url: str) -> bool:
    return _is_sqlite(database_url) and make_url(database_url).database in (
        None,
        "",
        ":memory:",
    )


def _apply_sqlite_pragmas(dbapi_connection, connection_record):
    """WAL mode so API reads do not block on a monitoring run's deletes."""
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.execute("PRAGMA busy_timeout=30000")
    finally:
        cursor.close()


def _engine_options(database_url: str, settings: Settings) -> Dict[str, Any]:
    options: Dict[str, Any] = {
        "echo": settings.database_echo_sql,
        "pool_pre_ping": settings.database_pool_pre_ping,
    }

    if _is_sqlite(database_url):
        options["connect_args"] = {"check_same_thread": False, "timeout": 30}
        if _is_sqlite_memory(database_url):
            # An in-memory database only exists on the connection that made it
            options["poolclass"] = StaticPool
        # File databases use the default pool, one connection per session
    else:
        options["pool_recycle"] = settings.database_pool_recycle
        options["pool_size"] = 5
        options["max_overflow"] = 10

    return options


def create_engine_from_settings(settings: Optional[Settings] = None) -> Engine:
    """Build the engine for the configured alert store."""
    settings = settings or get_settings()
    database_url = settings.get_database_url()

    engine = create_engine(database_url, **_engine_options(database_url, settings))
    if _is_sqlite(database_url):
        event.listen(engine, "connect", _apply_sqlite_pragmas)

    logger.info(
        "Database engine created",
        backend=engine.url.get_backend_name(),
        echo_sql=settings.database_echo_sql,
    )
    return engine


def get_engine() -> Engine:
    """Return the process-wide engine, creating it on first use."""
    global _engine

    if _engine is None:
        _engine = create_engine_from_settings()

    return _engine


def get_session_factory() -> sessionmaker:
    """Return the process-wide session factory, creating it on first use."""
    global _SessionLocal

    if _SessionLocal is None:
        # Alerts are handed out as detached snapshots after commit
        _SessionLocal = sessionmaker(
            bind=get_engine(), autoflush=False, expire_on_commit=False
        )

    return _SessionLocal


def get_session_sync() -> Session:
    """Open a new session; the caller closes it."""
    return get_session_factory()()


def create_tables() -> None:
    """Create the alert and profile tables if they do not exist."""
    from . import models  # noqa: F401

    Base.metadata.create_all(bind=get_engine())
    logger.info("Database tables ready", tables=sorted(Base.metadata.tables))


def check_database_health() -> dict:
    """
    Run a trivial query against the alert store.

    Returns:
        dict with ``status`` ('healthy' or 'unhealthy') and ``connectivity``
    """
    try:
        with get_session_sync() as session:
            session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("Database health check failed", error=str(e), exc_info=True)
        return {"status": "unhealthy", "connectivity": False, "error": str(e)}

    return {"status": "healthy", "connectivity": True}


def get_database_url() -> str:
    """Get the configured database URL."""
    return get_settings().get_database_url()
