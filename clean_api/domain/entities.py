"""
Domain entities for the catalog API.

Defines the SQLAlchemy declarative base, the audited base entity shared by
every catalog table, and the Product entity.
"""

from typing import Any

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, Numeric, String
from sqlalchemy.orm import declarative_base

Base: Any = declarative_base()

SYSTEM_ACTOR = "System"


class BaseEntity(Base):
    """
    Abstract base for audited entities.

    The audit columns are written by the persistence layer when a unit of
    work flushes; application code never assigns them.

    Attributes:
        id: Integer primary key
        date_created: UTC timestamp of the first save
        created_by: Actor that created the row
        date_modified: UTC timestamp of the last update
        modified_by: Actor that last updated the row
    """

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)
    date_created = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(String(450), nullable=True)
    date_modified = Column(DateTime(timezone=True), nullable=True)
    modified_by = Column(String(450), nullable=True)


class Product(BaseEntity):
    """
    Catalog product.

    Price and stock constraints are enforced by the command validators,
    not by the table definition.
    """

    __tablename__ = "products"

    name = Column(String(200), nullable=False)
    description = Column(String(500), nullable=False, default="")
    price = Column(Numeric(18, 2), nullable=False, default=0)
    stock_quantity = Column(Integer, nullable=False, default=0)
    sku = Column(String(50), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_products_sku", "sku", unique=True),
        Index("ix_products_name", "name"),
        Index("ix_products_is_active", "is_active"),
    )

    def __repr__(self) -> str:
        return f"Product(id={self.id}, name={self.name!r}, sku={self.sku!r})"
