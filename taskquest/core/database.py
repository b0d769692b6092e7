"""Database connection and session management."""

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from .config import settings


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """
    Включить проверку внешних ключей для каждого нового SQLite соединения.

    Без PRAGMA foreign_keys SQLite игнорирует ON DELETE CASCADE,
    и связи task_tags остались бы после удаления задачи или тега.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_engine_for_url(url: str, echo: bool = False) -> AsyncEngine:
    """
    Async engine для URL.

    Каждая сессия должна получать своё соединение: rollback одной
    сессии не должен откатывать чужие незакоммиченные записи.
    Поэтому общий StaticPool только для SQLite :memory: (иначе у каждого
    соединения была бы своя пустая БД). Файловый SQLite использует
    обычный пул, PostgreSQL - NullPool.
    """
    if not url.startswith("sqlite"):
        return create_async_engine(url, echo=echo, poolclass=NullPool)

    options: dict = {"connect_args": {"check_same_thread": False}}
    if make_url(url).database in (None, "", ":memory:"):
        options["poolclass"] = StaticPool

    sqlite_engine = create_async_engine(url, echo=echo, **options)
    enable_sqlite_foreign_keys(sqlite_engine)
    return sqlite_engine


engine = create_engine_for_url(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

# Create session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def init_db():
    """Initialize database (create all tables)."""
    from ..models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_db():
    """Drop all tables (use with caution!)."""
    from ..models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
