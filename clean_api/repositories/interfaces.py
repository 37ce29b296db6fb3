"""
Repository interfaces (Abstract Base Classes).

Defines the persistence contract used by the application layer,
independent of the underlying storage mechanism. None of these methods
commit; committing belongs to the unit of work.
"""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

from ..domain.entities import BaseEntity, Product

T = TypeVar("T", bound=BaseEntity)


class IGenericRepository(ABC, Generic[T]):
    """
    Generic CRUD contract over one entity type.

    Read methods return detached entities; changes to them are only
    persisted through :meth:`update`.
    """

    @abstractmethod
    async def get_all(self) -> List[T]:
        """
        Fetch every entity, read-only.

        Returns:
            List of detached entities
        """
        pass

    @abstractmethod
    async def get_by_id(self, entity_id: int) -> Optional[T]:
        """
        Fetch one entity by primary key, read-only.

        Args:
            entity_id: Primary key

        Returns:
            Detached entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, entity: T) -> T:
        """
        Stage an entity for insert and assign its identifier.

        Args:
            entity: New entity

        Returns:
            The staged entity with its generated id
        """
        pass

    @abstractmethod
    async def update(self, entity: T) -> T:
        """
        Stage a full replacement of an existing entity.

        Args:
            entity: Entity carrying the replacement values

        Returns:
            The session-attached entity
        """
        pass

    @abstractmethod
    async def delete(self, entity: T) -> None:
        """
        Stage an entity for removal.

        Args:
            entity: Entity to remove
        """
        pass


class IProductRepository(IGenericRepository[Product]):
    """Product-specific repository contract."""

    @abstractmethod
    async def is_sku_unique(self, sku: str) -> bool:
        """
        Check whether no product uses the given SKU yet.

        Args:
            sku: Stock keeping unit code

        Returns:
            True if no product carries this SKU
        """
        pass
