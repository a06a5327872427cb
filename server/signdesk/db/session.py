from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from signdesk import models  # noqa: F401
from signdesk.core.config import Settings, get_settings
from signdesk.core.logging import get_logger
from signdesk.db.base import Base

logger = get_logger(__name__)


def build_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(settings.database_url, echo=False, pool_pre_ping=True)


engine = build_engine(get_settings())
async_session_factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def init_models() -> None:
    """Create the ``documents`` and ``settings`` tables if they are missing."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def lifespan(app: object) -> AsyncIterator[None]:  # noqa: ARG001
    await init_models()
    logger.info("application.startup", database=engine.url.render_as_string(hide_password=True))
    yield
    await engine.dispose()
    logger.info("application.shutdown")


async def get_session() -> AsyncIterator[AsyncSession]:
    async with async_session_factory() as session:
        yield session
