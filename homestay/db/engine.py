"""
SQLAlchemy engine singleton with production-ready connection pooling.

PostgreSQL gets a pooled engine with a per-statement timeout. SQLite (used by
the test-suite and local development) is configured so that every
transaction starts with ``BEGIN IMMEDIATE``: writers are serialized, which
gives booking creation the same read-then-insert atomicity that the
listing row lock provides on PostgreSQL.
"""

from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url

from homestay.config import DATABASE_URL, DB_STATEMENT_TIMEOUT_MS

if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set.")


def _configure_sqlite(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        # Hand transaction control to SQLAlchemy so BEGIN IMMEDIATE can be emitted
        dbapi_connection.isolation_level = None
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    @event.listens_for(engine, "begin")
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(url: str, statement_timeout_ms: int = DB_STATEMENT_TIMEOUT_MS) -> Engine:
    """
    Build an engine for the given URL with dialect-appropriate settings.

    Args:
        url: SQLAlchemy database URL
        statement_timeout_ms: Upper bound for a single statement (PostgreSQL)
            or for waiting on the write lock (SQLite)

    Returns:
        Engine: configured SQLAlchemy engine
    """
    backend = make_url(url).get_backend_name()

    if backend == "sqlite":
        engine = create_engine(
            url,
            future=True,
            connect_args={
                "check_same_thread": False,
                "timeout": statement_timeout_ms / 1000,
            },
        )
        _configure_sqlite(engine)
        return engine

    connect_args: dict[str, Any] = {}
    if backend == "postgresql":
        connect_args["options"] = f"-c statement_timeout={statement_timeout_ms}"

    return create_engine(
        url,
        future=True,
        # Connection pool settings
        pool_size=10,  # Number of connections to maintain in the pool
        max_overflow=20,  # Additional connections when pool is exhausted
        pool_pre_ping=True,  # Verify connections before using (detect stale connections)
        pool_recycle=3600,  # Recycle connections after 1 hour
        connect_args=connect_args,
        echo=False,
    )


engine: Engine = create_db_engine(DATABASE_URL)


def check_engine_health() -> bool:
    """
    Check if database engine is healthy and connections are working.

    This function is used by the /ready endpoint to verify database
    connectivity before allowing traffic to the service.

    Returns:
        bool: True if database is reachable and healthy, False otherwise
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
