"""
Mapping between entities and DTO/command shapes.

Server-controlled fields are never copied from client payloads.
"""

from typing import Any, Dict, Iterable, List, Optional, Set

from ..domain.entities import Product
from .schemas import ProductDto, ProductPayload

# Fields owned by the server: identity, audit stamps and the creation timestamp
PRODUCT_IGNORED_FIELDS: Set[str] = {
    "id",
    "date_created",
    "created_by",
    "date_modified",
    "modified_by",
    "created_at",
}


def apply_dict_updates(
    entity: object,
    update_data: Dict[str, Any],
    excluded_attrs: Optional[Set[str]] = None,
) -> None:
    """
    Apply key-value pairs from a dictionary to an ORM entity.

    Args:
        entity: Target entity
        update_data: Dictionary of fields and values to copy
        excluded_attrs: Attribute names to skip
    """
    excluded_attrs = excluded_attrs or set()
    for key, value in update_data.items():
        if key in excluded_attrs:
            continue
        if hasattr(entity, key):
            setattr(entity, key, value)


def map_payload_to_product(payload: ProductPayload, product: Optional[Product] = None) -> Product:
    """
    Copy a create/update payload onto a product.

    Args:
        payload: Command carrying client-controlled fields
        product: Existing product to overwrite, a new one when None

    Returns:
        The populated product
    """
    target = product if product is not None else Product()
    apply_dict_updates(target, payload.model_dump(), PRODUCT_IGNORED_FIELDS)
    return target


def map_product_to_dto(product: Product) -> ProductDto:
    return ProductDto.model_validate(product)


def map_products_to_dtos(products: Iterable[Product]) -> List[ProductDto]:
    return [map_product_to_dto(product) for product in products]
