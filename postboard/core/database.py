from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncGenerator, Optional

from sqlalchemy import case
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import Column, DateTime, Field, SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from postboard.core.config import settings
from postboard.core.logger import get_logger

logger = get_logger("database")


class Database:
    def __init__(self, db_url: Optional[str] = None, echo: Optional[bool] = None):
        self.url = db_url or settings.DATABASE_URL
        self.engine: AsyncEngine = create_async_engine(
            self.url,
            echo=settings.DATABASE_ECHO if echo is None else echo,
            future=True,
        )

    async def connect(self) -> None:
        """Open one connection to make sure the database is reachable."""
        async with self.get_session() as session:
            await session.exec(select(1))
        logger.info("Database connection established: %s", self.engine.url.render_as_string(hide_password=True))

    async def disconnect(self) -> None:
        await self.engine.dispose()

    async def create_all(self) -> None:
        # Registers the tables on SQLModel.metadata
        import postboard.apps.posts.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def drop_all(self) -> None:
        import postboard.apps.posts.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, Any]:
        async with AsyncSession(self.engine, expire_on_commit=False) as session:
            yield session


class BaseModel(SQLModel):
    """Base model with identity and audit timestamps."""

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(), nullable=False)
    )
    updated_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime(), nullable=False)
    )


def stamp_created(obj: BaseModel, now: Optional[datetime] = None) -> None:
    """Set both timestamps before the first insert."""
    now = now or settings.get_now()
    obj.created_at = now
    obj.updated_at = now


def stamp_updated(obj: BaseModel, now: Optional[datetime] = None) -> None:
    """Refresh updated_at before an update is written; it never moves backwards."""
    now = now or settings.get_now()
    previous = [t for t in (obj.created_at, obj.updated_at) if t is not None]
    obj.updated_at = max([now, *previous])


def updated_at_expression(model: Any, now: Optional[datetime] = None) -> Any:
    """SQL value for updated_at in a bulk UPDATE; it never moves backwards."""
    now = now or settings.get_now()
    return case((model.updated_at > now, model.updated_at), else_=now)
