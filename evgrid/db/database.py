from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class Database:
    """Engine and session factory for one store, opened and closed by the app lifespan."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine = create_async_engine(url, echo=echo)
        self.session_factory = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_tables(self):
        # Import registers the mapped tables on Base.metadata
        from evgrid.db import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def dispose(self):
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncSession:
    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
