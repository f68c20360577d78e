"""Async database engine and session factory."""

from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from fittrack.core.config import get_settings

settings = get_settings()

engine_options: dict = {"echo": settings.debug}
if not settings.is_sqlite:
    engine_options.update(
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
    )

engine = create_async_engine(settings.async_database_url, **engine_options)


def enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    """SQLite ignores ON DELETE rules unless foreign keys are switched on per connection.

    The driver's own transaction handling is switched off as well; `begin_sqlite_transaction`
    emits BEGIN instead, so SAVEPOINTs nest inside the session's transaction.
    """
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def begin_sqlite_transaction(conn) -> None:
    conn.exec_driver_sql("BEGIN")


def configure_sqlite(sync_engine) -> None:
    event.listen(sync_engine, "connect", enable_sqlite_foreign_keys)
    event.listen(sync_engine, "begin", begin_sqlite_transaction)


if settings.is_sqlite:
    configure_sqlite(engine.sync_engine)

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that yields an async DB session."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
