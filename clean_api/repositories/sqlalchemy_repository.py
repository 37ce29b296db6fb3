"""
SQLAlchemy implementation of the repository contracts.

Works against an ``AsyncSession`` owned by the unit of work.
"""

from typing import List, Optional, Type

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import flag_modified

from ..domain.entities import Product
from ..domain.exceptions import BadRequestError
from ..logging_config import get_logger
from .interfaces import IGenericRepository, IProductRepository, T

logger = get_logger(__name__)


class GenericRepository(IGenericRepository[T]):
    """Generic SQLAlchemy repository for audited entities."""

    model: Type[T]

    def __init__(self, session: AsyncSession, model: Optional[Type[T]] = None):
        """
        Initialize repository.

        Args:
            session: Session of the current unit of work
            model: Mapped entity class, defaults to the subclass ``model``
        """
        self._session = session
        if model is not None:
            self.model = model

    async def _flush(self) -> None:
        try:
            await self._session.flush()
        except IntegrityError as e:
            logger.warning("Integrity violation on flush", entity=self.model.__name__, error=str(e.orig))
            raise BadRequestError(
                f"{self.model.__name__} conflicts with an existing record"
            ) from e

    async def get_all(self) -> List[T]:
        result = await self._session.execute(select(self.model).order_by(self.model.id))
        entities = list(result.scalars().all())
        for entity in entities:
            self._session.expunge(entity)
        return entities

    async def get_by_id(self, entity_id: int) -> Optional[T]:
        result = await self._session.execute(
            select(self.model).where(self.model.id == entity_id)
        )
        entity = result.scalar_one_or_none()
        if entity is not None:
            self._session.expunge(entity)
        return entity

    async def create(self, entity: T) -> T:
        self._session.add(entity)
        # Flushing assigns the primary key without committing the transaction.
        await self._flush()
        logger.debug("Staged entity for insert", entity=self.model.__name__, entity_id=entity.id)
        return entity

    async def update(self, entity: T) -> T:
        attached = await self._session.merge(entity)
        # Full replacement: the row counts as modified even if no column changed.
        flag_modified(attached, "date_modified")
        await self._flush()
        logger.debug("Staged entity for update", entity=self.model.__name__, entity_id=attached.id)
        return attached

    async def delete(self, entity: T) -> None:
        attached = await self._session.merge(entity)
        await self._session.delete(attached)
        logger.debug("Staged entity for delete", entity=self.model.__name__, entity_id=attached.id)


class ProductRepository(GenericRepository[Product], IProductRepository):
    """Product repository."""

    model = Product

    async def is_sku_unique(self, sku: str) -> bool:
        result = await self._session.execute(
            select(func.count()).select_from(Product).where(Product.sku == sku)
        )
        return result.scalar_one() == 0
