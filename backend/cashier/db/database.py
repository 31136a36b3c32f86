import logging

from sqlalchemy import event, text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.orm import DeclarativeBase

from cashier.config import Settings

logger = logging.getLogger(__name__)

# PostgreSQL "lock_not_available", raised when lock_timeout expires
LOCK_NOT_AVAILABLE = "55P03"
# PostgreSQL "deadlock_detected", carts locking shared products in opposite order
DEADLOCK_DETECTED = "40P01"


# SQLAlchemy Base for ORM models
class Base(DeclarativeBase):
    pass


def get_async_url(url: str, db_type: str) -> str:
    """Convert database URL to async SQLAlchemy format."""
    if "+" in url.split("://", 1)[0]:
        return url
    if db_type == "postgresql":
        return url.replace("postgresql://", "postgresql+asyncpg://")
    elif db_type == "sqlite":
        return url.replace("sqlite://", "sqlite+aiosqlite://")
    return url


def is_lock_timeout(exc: DBAPIError) -> bool:
    """True when a lock wait failed in a way the client can simply retry.

    Covers an expired lock timeout and a deadlock victim.
    """
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code in (LOCK_NOT_AVAILABLE, DEADLOCK_DETECTED):
        return True
    message = str(orig).lower()
    return "database is locked" in message or "lock timeout" in message or "deadlock detected" in message


def _configure_sqlite(engine: AsyncEngine) -> None:
    """Make every SQLite transaction take the write lock up front.

    SQLite has no SELECT ... FOR UPDATE, so a checkout that read stock under a
    deferred transaction could race another writer. BEGIN IMMEDIATE serialises
    writers at begin, and the connection timeout bounds the wait.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, _connection_record):
        # disable the driver's own BEGIN so ours is the only one emitted
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


class Database:
    """Owns the async engine and the session factory for one application."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.db_type = settings.database_type
        self.engine: AsyncEngine | None = None
        self.session_factory: async_sessionmaker[AsyncSession] | None = None

    async def connect(self):
        """Create database engine."""
        if self.engine:
            return

        options = {"echo": self.settings.db_echo}
        if self.db_type == "sqlite":
            options["connect_args"] = {"timeout": self.settings.lock_timeout_ms / 1000}
        else:
            options["pool_size"] = self.settings.db_pool_size
            options["max_overflow"] = self.settings.db_max_overflow

        self.engine = create_async_engine(
            get_async_url(self.settings.database_url, self.db_type),
            **options
        )
        if self.db_type == "sqlite":
            _configure_sqlite(self.engine)

        self.session_factory = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)
        logger.info(f"Connected to {self.db_type} database")

    async def disconnect(self):
        """Close database engine."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None

    async def create_all(self):
        """Create any missing tables."""
        from cashier import models  # noqa: F401  registers tables on Base.metadata

        if not self.engine:
            await self.connect()

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    def session(self) -> AsyncSession:
        if not self.session_factory:
            raise RuntimeError("Database is not connected")
        return self.session_factory()

    async def apply_lock_timeout(self, session: AsyncSession):
        """Bound row-lock waits for the current transaction.

        SQLite gets the same bound from the connection timeout.
        """
        if self.db_type == "postgresql":
            await session.execute(text(f"SET LOCAL lock_timeout = '{int(self.settings.lock_timeout_ms)}ms'"))

    def snapshot_options(self) -> dict:
        """Execution options giving multi-statement reads one consistent snapshot."""
        if self.db_type == "postgresql":
            return {"isolation_level": "REPEATABLE READ"}
        return {}
