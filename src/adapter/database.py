"""
Storage handle.

Owns the async engine and the session factory for one application instance.
"""

import logging

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

# Registers the tables on SQLModel.metadata
import src.domain.entities  # noqa: F401

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, uri: str, echo: bool = False):
        self.uri = uri
        self.engine = create_async_engine(uri, echo=echo, future=True)
        self.session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def create_all(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database tables ensured")

    async def dispose(self) -> None:
        await self.engine.dispose()
