import contextlib
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from hive.main.logging import get_logger

logger = get_logger(__name__)


class DatabaseSessionManager:
    """Owns the engine and session factory.

    There is no module level instance: whoever runs the process (the FastAPI
    lifespan, the arq worker, the CLI) creates one, calls ``init`` and ``close``,
    and hands it to the code that needs sessions.
    """

    def __init__(self):
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    def init(self, host: str, **engine_kwargs):
        if self._engine is not None:
            logger.debug("Database already initialized, skipping reinitialization")
            return

        if host.startswith("postgresql"):
            engine_kwargs.setdefault("pool_size", 20)
            engine_kwargs.setdefault("max_overflow", 10)

        self._engine = create_async_engine(host, **engine_kwargs)
        self._sessionmaker = async_sessionmaker(
            bind=self._engine,
            expire_on_commit=False,
        )
        logger.debug("Database engine created")

    async def close(self):
        if self._engine is None:
            logger.debug("DatabaseSessionManager already closed or not initialized")
            return
        await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        logger.debug("DatabaseSessionManager closed")

    @contextlib.asynccontextmanager
    async def connect(self) -> AsyncIterator[AsyncConnection]:
        if self._engine is None:
            raise Exception("DatabaseSessionManager is not initialized")

        async with self._engine.begin() as connection:
            try:
                yield connection
            except Exception:
                await connection.rollback()
                raise

    @contextlib.asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        if self._sessionmaker is None:
            raise Exception("DatabaseSessionManager is not initialized")

        session = self._sessionmaker()
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def get_sessionmanager(request: Request) -> DatabaseSessionManager:
    return request.app.state.sessionmanager


async def get_session_with_transaction(request: Request):
    async with get_sessionmanager(request).session() as session, session.begin():
        yield session


async def get_session(request: Request):
    async with get_sessionmanager(request).session() as session:
        yield session
