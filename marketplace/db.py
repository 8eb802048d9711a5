# marketplace/db.py
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from .tables import Base


def _sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite leaves foreign keys unenforced unless asked, per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Store:
    """Engine plus session factory for one database.

    Built once per application and handed around explicitly; there is no
    module-level engine.
    """

    def __init__(self, database_url: str, echo: bool = False):
        kwargs = {"echo": echo}
        if not database_url.startswith("sqlite"):
            kwargs.update(pool_size=5, max_overflow=10, pool_pre_ping=True)
        self.url = database_url
        self.engine = create_async_engine(database_url, **kwargs)
        if database_url.startswith("sqlite"):
            event.listen(self.engine.sync_engine, "connect", _sqlite_foreign_keys)
        self.sessionmaker = async_sessionmaker(self.engine, expire_on_commit=False)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.sessionmaker() as session:
            yield session

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def ping(self) -> int:
        async with self.engine.connect() as conn:
            result = await conn.execute(text("select 1"))
            return result.scalar_one()

    async def dispose(self) -> None:
        await self.engine.dispose()
