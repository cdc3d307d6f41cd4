"""
Database session managers, one for synchronous and one for asynchronous access.
"""

from sqlalchemy import URL, Engine, event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel, create_engine


def enforce_sqlite_foreign_keys(engine: Engine):
    """
    SQLite ships with foreign key enforcement switched off; turn it on for
    every new connection so that link tables cannot reference missing rows.
    """

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class SyncSessionManager:
    """
    A manager for synchronous sessions, mostly used for table creation by
    the command line tools:

    manager = SyncSessionManager(conn_url)
    manager.create_all()

    with manager.session() as conn:
        user = conn.get(User, user_id)
    """

    connection_url: URL
    engine: Engine
    session: sessionmaker

    def __init__(self, connection_url: URL, echo: bool = False):
        self.connection_url = connection_url
        self.engine = create_engine(self.connection_url, echo=echo)
        self.session = sessionmaker(self.engine)

        if self.engine.dialect.name == "sqlite":
            enforce_sqlite_foreign_keys(self.engine)

    def create_all(self):
        """
        Create every table registered on `SQLModel.metadata`. There are no
        migrations; this is the only schema management we do.
        """
        # Registers the tables on the metadata.
        from agora.database.meta import ALL_TABLES  # noqa: F401

        with self.engine.begin() as conn:
            SQLModel.metadata.create_all(conn)

    def drop_all(self):
        """
        Drop every table. This deletes all forum content and is only
        useful in tests.
        """
        with self.engine.begin() as conn:
            SQLModel.metadata.drop_all(conn)


class AsyncSessionManager:
    """
    A manager for asynchronous sessions. Every service function takes one of
    the sessions it hands out:

    manager = AsyncSessionManager(conn_url)

    async with manager.session() as conn:
        async with conn.begin():
            post = await posts_service.read_by_id(post_id=post_id, conn=conn)
    """

    connection_url: URL
    engine: AsyncEngine
    session: async_sessionmaker

    def __init__(self, connection_url: URL, echo: bool = False):
        self.connection_url = connection_url
        self.engine = create_async_engine(self.connection_url, echo=echo)
        self.session = async_sessionmaker(self.engine, expire_on_commit=False)

        if self.engine.dialect.name == "sqlite":
            enforce_sqlite_foreign_keys(self.engine.sync_engine)

    async def create_all(self):
        from agora.database.meta import ALL_TABLES  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def drop_all(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)
