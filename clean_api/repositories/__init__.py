"""Repository contracts and their SQLAlchemy implementations."""

from .interfaces import IGenericRepository, IProductRepository
from .sqlalchemy_repository import GenericRepository, ProductRepository

__all__ = [
    "IGenericRepository",
    "IProductRepository",
    "GenericRepository",
    "ProductRepository",
]
