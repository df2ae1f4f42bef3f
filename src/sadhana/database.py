from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from sadhana.config import get_settings


def _enable_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def configure_engine(bind: AsyncEngine) -> AsyncEngine:
    """SQLite leaves foreign keys unenforced unless asked on every connection."""
    if bind.dialect.name == "sqlite":
        event.listen(bind.sync_engine, "connect", _enable_foreign_keys)
    return bind


settings = get_settings()

engine = configure_engine(create_async_engine(settings.db_url, echo=settings.debug))

async_session = async_sessionmaker(engine, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def init_db(bind: AsyncEngine = engine) -> None:
    # Tables for every model imported so far; sadhana.models must be loaded first
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session() as session:
        yield session
