"""Async database engine and session factories.

The stores take a session factory in their constructor; ``async_session``
is the one bound to the configured database and is what they default to.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from .config import settings


def make_session_factory(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


engine: AsyncEngine = create_async_engine(settings.database_url, echo=False)
async_session = make_session_factory(engine)


async def init_db(bind: AsyncEngine = engine) -> None:
    """Create any missing tables on ``bind``."""
    from . import models  # noqa: F401  registers the tables on the metadata

    async with bind.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
