"""Async unit of work over one SQLAlchemy session."""

from types import TracebackType
from typing import Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..domain.entities import SYSTEM_ACTOR
from ..repositories import ProductRepository


class UnitOfWork:
    """
    One request-scoped set of staged mutations.

    Commits on a clean exit from ``async with`` and rolls back when the block
    raises. Instances must not be shared between concurrent requests.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        actor: Optional[str] = None,
    ) -> None:
        self._session_factory = session_factory
        self.actor = actor or SYSTEM_ACTOR
        self._session: Optional[AsyncSession] = None

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("UnitOfWork session not started")
        return self._session

    async def __aenter__(self) -> "UnitOfWork":
        self._session = self._session_factory()
        self._session.info["actor"] = self.actor
        self.products = ProductRepository(self._session)
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if self._session is None:
            return
        try:
            if exc_type is not None:
                await self._session.rollback()
            else:
                await self._session.commit()
        finally:
            await self._session.close()
            self._session = None
