import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from src.wallet.domain.exceptions import StorageError
from src.wallet.store.rw_lock import ReadWriteLock

logger = logging.getLogger(__name__)


class ReadSession:
    """
    Connection handle that only exists while the shared lock is held.
    Store primitives accept a session instead of a raw connection,
    so they cannot be reached without going through WalletDatabase.
    """

    def __init__(self, conn: Connection):
        self._conn = conn
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    @property
    def connection(self) -> Connection:
        if not self._active:
            raise RuntimeError("wallet session used after its lock was released")
        return self._conn

    def _expire(self) -> None:
        self._active = False


class WriteSession(ReadSession):
    """
    Handle held under the exclusive lock, inside one storage transaction.
    """
    pass


def create_wallet_engine(dsn: str, busy_timeout_ms: int = 30000) -> Engine:
    url = make_url(dsn)
    if url.get_backend_name() != "sqlite":
        return create_engine(dsn, pool_pre_ping=True, future=True)

    in_memory = url.database in (None, "", ":memory:")
    kwargs = {
        "future": True,
        "connect_args": {"check_same_thread": False, "timeout": busy_timeout_ms / 1000.0},
    }
    if in_memory:
        # every checkout must see the same in-memory database
        kwargs["poolclass"] = StaticPool
    engine = create_engine(dsn, **kwargs)

    @event.listens_for(engine, "connect")
    def _configure_sqlite(dbapi_conn, _record):
        cursor = dbapi_conn.cursor()
        cursor.execute(f"PRAGMA busy_timeout={int(busy_timeout_ms)}")
        if not in_memory:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


class WalletDatabase:
    """
    Embedded database handle plus the process-wide balance lock.
    read() and write() are the only ways to obtain a session.
    """

    def __init__(self, engine: Engine, lock: Optional[ReadWriteLock] = None):
        self.engine = engine
        self.lock = lock or ReadWriteLock()

    @classmethod
    def from_dsn(cls, dsn: str, busy_timeout_ms: int = 30000) -> "WalletDatabase":
        return cls(create_wallet_engine(dsn, busy_timeout_ms))

    @contextmanager
    def read(self) -> Iterator[ReadSession]:
        with self.lock.shared():
            session: Optional[ReadSession] = None
            try:
                with self.engine.connect() as conn:
                    session = ReadSession(conn)
                    yield session
            except (SQLAlchemyError, OverflowError) as exc:
                raise StorageError(f"wallet read failed: {exc}") from exc
            finally:
                if session is not None:
                    session._expire()

    @contextmanager
    def write(self) -> Iterator[WriteSession]:
        """
        Exclusive lock plus a single transaction.
        Commits when the block exits normally, rolls back on any exception.
        """
        with self.lock.exclusive():
            session: Optional[WriteSession] = None
            try:
                with self.engine.begin() as conn:
                    session = WriteSession(conn)
                    yield session
            except (SQLAlchemyError, OverflowError) as exc:
                logger.error(f"Wallet transaction rolled back: {exc}")
                raise StorageError(f"wallet write failed: {exc}") from exc
            finally:
                if session is not None:
                    session._expire()

    def dispose(self) -> None:
        self.engine.dispose()


def require_write(session: ReadSession) -> WriteSession:
    if not isinstance(session, WriteSession):
        raise RuntimeError("operation requires a write session")
    if not session.active:
        raise RuntimeError("wallet session used after its lock was released")
    return session
