"""
Database connection management for the catalog API.

Owns the async SQLAlchemy engine and the session factory that every unit of
work draws its session from.
"""

from typing import Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .config import settings
from .domain.entities import Base
from .identity import models as identity_models  # noqa: F401  registers identity tables
from .logging_config import get_logger
from .persistence.audit import AuditingSession
from .persistence.unit_of_work import UnitOfWork

logger = get_logger(__name__)


def _safe_url(url: str) -> str:
    if "@" in url:
        return url.split("@")[0].split("://")[0] + "://...@" + url.split("@")[1]
    return url


class DatabaseManager:
    """
    Manages the async engine and session factory.

    Attributes:
        engine: Async SQLAlchemy engine, None until connected
        session_factory: Factory producing auditing async sessions
    """

    def __init__(self, database_url: Optional[str] = None) -> None:
        """Initialize database manager."""
        self.database_url = database_url
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    async def connect(self) -> None:
        """
        Create the engine and session factory.

        Uses ``settings.DATABASE_URL`` unless a URL was passed at construction.
        """
        if self.engine is not None:
            return

        url = self.database_url or settings.DATABASE_URL
        logger.info("Connecting to database", url=_safe_url(url))
        self.engine = create_async_engine(url, echo=settings.DATABASE_ECHO, future=True)
        self.session_factory = async_sessionmaker(
            self.engine,
            expire_on_commit=False,
            sync_session_class=AuditingSession,
        )

    async def create_all(self) -> None:
        """Create every mapped table that does not exist yet."""
        if self.engine is None:
            await self.connect()
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema ensured")

    async def disconnect(self) -> None:
        """Dispose of the engine."""
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            logger.info("Database engine disposed")

    async def ping(self) -> bool:
        """Return True when a trivial query succeeds."""
        if self.engine is None:
            return False
        async with self.engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            return result.scalar() == 1

    def unit_of_work(self, actor: Optional[str] = None) -> UnitOfWork:
        """
        Create a unit of work for one request.

        Args:
            actor: Id of the authenticated caller, "System" when None

        Raises:
            RuntimeError: If the manager is not connected
        """
        if self.session_factory is None:
            raise RuntimeError("Database is not connected")
        return UnitOfWork(self.session_factory, actor=actor)


# Global database manager instance
db_manager = DatabaseManager()
