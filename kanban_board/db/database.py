from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from kanban_board.core import get_settings
from kanban_board.core.errors import BoardError, TransactionError
from kanban_board.logs import debug_logger

settings = get_settings()


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores ON DELETE clauses unless every connection opts in"""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    new_engine = create_async_engine(database_url, echo=echo, future=True)
    enable_sqlite_foreign_keys(new_engine)
    return new_engine


# Process-wide engine and connection pool
engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

async_session_factory = async_sessionmaker(
    engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


# Dependency for FastAPI
async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def atomic(db: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """One all-or-nothing unit of work on the given session.

    Commits when the block finishes, rolls everything back on any failure.
    Board errors propagate unchanged; store errors surface as TransactionError.
    """
    try:
        yield db
        await db.commit()
    except BoardError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        debug_logger.log_exception("Transaction rolled back")
        raise TransactionError(f"Storage failure: {e.__class__.__name__}") from e


def ensure_sqlite_directory(database_url: str) -> None:
    url = make_url(database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)


async def init_db():
    ensure_sqlite_directory(settings.DATABASE_URL)
    async with engine.begin() as conn:
        # Import here to avoid circular imports
        from kanban_board.db.models import Base
        await conn.run_sync(Base.metadata.create_all)
