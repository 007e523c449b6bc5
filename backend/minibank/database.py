"""Database connection and session management."""
from collections.abc import Generator
from contextlib import contextmanager
import logging
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from minibank.config import get_settings
from minibank.services.errors import ConstraintViolationError, LockTimeoutError, PersistenceError

logger = logging.getLogger(__name__)
settings = get_settings()

# SQLSTATE for lock_not_available (PostgreSQL lock_timeout expiry).
PG_LOCK_NOT_AVAILABLE = "55P03"


def normalize_database_url(raw_url: str) -> str:
    """Point bare PostgreSQL URLs at the psycopg 3 driver."""
    if raw_url.startswith("postgres://"):
        raw_url = "postgresql://" + raw_url[len("postgres://"):]

    parsed_url = make_url(raw_url)
    if parsed_url.drivername == "postgresql":
        parsed_url = parsed_url.set(drivername="postgresql+psycopg")
    return parsed_url.render_as_string(hide_password=False)


def _configure_sqlite(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def set_sqlite_pragmas(dbapi_connection, connection_record) -> None:
        # pysqlite must not emit its own BEGIN; do_begin below owns it.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON;")
        cursor.close()

    @event.listens_for(engine, "begin")
    def do_begin(conn) -> None:
        # SQLite has no FOR UPDATE. Taking the write lock at BEGIN serializes
        # competing writers instead.
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(
    database_url: str,
    *,
    echo: bool = False,
    pool_size: int | None = None,
    max_overflow: int | None = None,
    pool_timeout: int | None = None,
    lock_timeout_ms: int | None = None,
    **engine_kwargs: Any,
) -> Engine:
    """Build the process-wide engine (and its connection pool) for a URL."""
    url = normalize_database_url(database_url)
    backend = make_url(url).get_backend_name()
    connect_args = dict(engine_kwargs.pop("connect_args", {}))

    if backend == "sqlite":
        # Sessions are used from FastAPI's worker threads.
        connect_args.setdefault("check_same_thread", False)
        if lock_timeout_ms:
            connect_args.setdefault("timeout", lock_timeout_ms / 1000)
    else:
        pool_options = {
            "pool_size": pool_size,
            "max_overflow": max_overflow,
            "pool_timeout": pool_timeout,
        }
        for key, value in pool_options.items():
            if value is not None:
                engine_kwargs.setdefault(key, value)
        engine_kwargs.setdefault("pool_pre_ping", True)
        if backend == "postgresql" and lock_timeout_ms:
            connect_args.setdefault("options", f"-c lock_timeout={int(lock_timeout_ms)}")

    engine = create_engine(url, connect_args=connect_args, echo=echo, **engine_kwargs)
    if backend == "sqlite":
        _configure_sqlite(engine)
    return engine


engine = create_db_engine(
    settings.database_url,
    echo=settings.debug,
    pool_size=settings.database_pool_size,
    max_overflow=settings.database_max_overflow,
    pool_timeout=settings.database_pool_timeout,
    lock_timeout_ms=settings.lock_timeout_ms,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def _is_lock_timeout(exc: OperationalError) -> bool:
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate == PG_LOCK_NOT_AVAILABLE:
        return True
    return "database is locked" in str(orig)


def translate_db_error(exc: SQLAlchemyError) -> PersistenceError:
    """Map a SQLAlchemy error onto the persistence error reported to clients."""
    if isinstance(exc, IntegrityError):
        return ConstraintViolationError()
    if isinstance(exc, OperationalError) and _is_lock_timeout(exc):
        return LockTimeoutError()
    return PersistenceError()


@contextmanager
def atomic(db: Session) -> Generator[Session, None, None]:
    """Run the enclosed block as a single transaction on ``db``.

    Commits when the block finishes, rolls back on any exception. Storage
    errors come out as ``PersistenceError`` subclasses; domain errors raised
    inside the block propagate unchanged after the rollback.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        error = translate_db_error(exc)
        if isinstance(error, ConstraintViolationError):
            logger.warning(f"Write rejected by constraint: {exc.orig}")
        elif isinstance(error, LockTimeoutError):
            logger.warning("Timed out waiting for a row lock")
        else:
            logger.exception("Database transaction failed")
        raise error from exc
    except Exception:
        db.rollback()
        raise


def get_db() -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_database_connection() -> None:
    """Fail startup when the database cannot be reached."""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        raise RuntimeError("Database is unreachable; refusing to start.") from exc
