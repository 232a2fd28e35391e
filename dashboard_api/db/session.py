"""Database session and engine setup for the dashboard API."""
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from dashboard_api.settings import settings

Base = declarative_base()

engine = create_async_engine(settings.database_url, echo=False, future=True)
async_session_factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async SQLAlchemy session for request handlers."""
    async with async_session_factory() as session:
        yield session


async def create_schema() -> None:
    """Create every table on the configured engine; local runs without Alembic."""
    # Import for side effect: registers the models on Base.metadata.
    import dashboard_api.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
