"""
Conexión a base de datos (SQLAlchemy)

Este módulo centraliza TODAS las formas de acceso a la base de datos:
- Engine y session factory configurados desde settings
- Scopes de transacción explícitos (commit o rollback una sola vez)
- Reintentos con backoff exponencial para fallos transitorios

Author: DSW
Updated: 2025-10-17
"""
import time
import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TypeVar

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from .config import settings
from .exceptions import InternalError

logger = logging.getLogger(__name__)

T = TypeVar("T")


# ============================================================================
# SQLAlchemy Configuration
# ============================================================================

def _serialize_sqlite_transactions(engine: Engine) -> None:
    """
    Make every SQLite transaction take the write lock up front

    pysqlite only emits BEGIN before the first write, so reads that guard
    a later write (stock, order status) would run outside any lock.
    BEGIN IMMEDIATE serialises whole units of work instead.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(connection):
        connection.exec_driver_sql("BEGIN IMMEDIATE")


def create_db_engine(database_url: Optional[str] = None, **overrides) -> Engine:
    """
    Build an engine for the configured database

    Server databases run at settings.DB_ISOLATION_LEVEL so that stock
    checks and decrements inside one unit of work see a serial ordering.
    SQLite has no row locks: its transactions start with BEGIN IMMEDIATE
    and so run one at a time.

    Args:
        database_url: SQLAlchemy URL (defaults to settings.DATABASE_URL)
        **overrides: extra keyword arguments for create_engine

    Returns:
        SQLAlchemy Engine
    """
    url = database_url or settings.DATABASE_URL
    options = {
        "pool_pre_ping": True,  # Verificar conexión antes de usar
    }

    is_sqlite = url.startswith("sqlite")
    if is_sqlite:
        # SQLite connections are shared across request threads
        options["connect_args"] = {"check_same_thread": False}
    else:
        options["isolation_level"] = settings.DB_ISOLATION_LEVEL
        options["pool_size"] = settings.DB_POOL_SIZE
        options["max_overflow"] = settings.DB_MAX_OVERFLOW

    options.update(overrides)
    engine = create_engine(url, **options)
    if is_sqlite:
        _serialize_sqlite_transactions(engine)
    return engine


# SQLAlchemy Engine
engine = create_db_engine()

# Session Factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

# Base para modelos
Base = declarative_base()


def get_session_factory() -> sessionmaker:
    """
    FastAPI dependency returning the session factory used by services

    Usage:
        @router.get("/orders")
        def list_orders(session_factory: sessionmaker = Depends(get_session_factory)):
            ...
    """
    return SessionLocal


def init_db(bind: Optional[Engine] = None) -> None:
    """Create all tables registered on Base"""
    # Import models so they register with Base.metadata
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


# ============================================================================
# Transaction scopes
# ============================================================================

@contextmanager
def transaction(session_factory: Optional[sessionmaker] = None) -> Iterator[Session]:
    """
    Open one session, commit once on success, roll back on any error

    The session is the transaction handle: repositories receive it and
    perform every read and write through it.

    Example:
        with transaction() as session:
            order = order_repository.find_by_id(session, order_id)
            session.delete(order)
    """
    factory = session_factory or SessionLocal
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def run_in_transaction(
    work: Callable[[Session], T],
    session_factory: Optional[sessionmaker] = None,
    max_retries: Optional[int] = None,
    retry_delay: Optional[float] = None,
) -> T:
    """
    Run work(session) as a single unit of work with automatic retry

    Retries the whole unit when the database reports a transient failure
    (serialization conflict, lock timeout, dropped connection). Domain
    exceptions raised by work are never retried: the transaction is rolled
    back and the exception propagates unchanged.

    Args:
        work: callable receiving the transaction session
        session_factory: session factory (default: SessionLocal)
        max_retries: maximum attempts (default: settings.DB_TRANSACTION_RETRIES)
        retry_delay: initial delay between retries in seconds

    Returns:
        Whatever work returns

    Raises:
        InternalError: If all retry attempts fail
    """
    attempts = max_retries if max_retries is not None else settings.DB_TRANSACTION_RETRIES
    delay = retry_delay if retry_delay is not None else settings.DB_RETRY_DELAY
    attempts = max(attempts, 1)

    last_error = None

    for attempt in range(1, attempts + 1):
        try:
            with transaction(session_factory) as session:
                return work(session)

        except OperationalError as e:
            last_error = e
            logger.warning(f"Transaction failed on attempt {attempt}/{attempts}: {e.orig}")

            # Don't retry on last attempt
            if attempt < attempts:
                # Exponential backoff
                wait = delay * (2 ** (attempt - 1))
                logger.info(f"Retrying transaction in {wait:.2f} seconds...")
                time.sleep(wait)

        except SQLAlchemyError as e:
            # Integrity or programming errors will not succeed on retry
            logger.error(f"Transaction aborted by database error: {e}", exc_info=True)
            raise InternalError("Database error") from e

    logger.error(f"All {attempts} transaction attempts failed")
    raise InternalError("Transaction failed after all retries") from last_error
