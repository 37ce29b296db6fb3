"""Domain layer: entities and domain exceptions."""

from .entities import Base, BaseEntity, Product
from .exceptions import (
    BadRequestError,
    CleanApiException,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)

__all__ = [
    "Base",
    "BaseEntity",
    "Product",
    "CleanApiException",
    "BadRequestError",
    "NotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
]
