"""
Product commands, queries, validation rules and their handlers.

Each handler validates, maps, calls the repository and maps back. None of
them commit; the request's unit of work does.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import BaseModel, Field, StringConstraints

from ..domain.exceptions import BadRequestError, NotFoundError
from ..logging_config import get_logger
from ..metrics import track_product_command
from ..repositories import IProductRepository
from .mapping import map_payload_to_product, map_product_to_dto, map_products_to_dtos
from .mediator import RequestHandler, handles
from .schemas import (
    CreateProductCommand,
    DeleteProductCommand,
    GetAllProductsQuery,
    GetProductByIdQuery,
    ProductDto,
    UpdateProductCommand,
)
from .validation import validate_command

logger = get_logger(__name__)

NAME_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 500
SKU_MAX_LENGTH = 50

INVALID_PRODUCT = "Invalid Product"


# ==================== VALIDATION RULES ====================


class ProductRules(BaseModel):
    """Field rules shared by create and update commands."""

    name: Annotated[
        str,
        StringConstraints(strip_whitespace=True, min_length=1, max_length=NAME_MAX_LENGTH),
        Field(title="Name"),
    ]
    description: Optional[str] = Field(None, max_length=DESCRIPTION_MAX_LENGTH, title="Description")
    price: Decimal = Field(gt=0, title="Price")
    stock_quantity: int = Field(ge=0, title="Stock Quantity")
    sku: Optional[str] = Field(None, max_length=SKU_MAX_LENGTH, title="SKU")


class UpdateProductRules(ProductRules):
    """Update rules: the shared rules plus a positive id."""

    id: int = Field(gt=0, title="Id")


# ==================== HANDLERS ====================


class CreateProductCommandHandler(RequestHandler[CreateProductCommand, int]):
    def __init__(self, repository: IProductRepository):
        self._repository = repository

    async def handle(self, request: CreateProductCommand) -> int:
        try:
            validate_command(ProductRules, request, INVALID_PRODUCT)
        except BadRequestError:
            track_product_command("create", success=False)
            raise

        product = map_payload_to_product(request)
        product.created_at = datetime.now(timezone.utc)

        await self._repository.create(product)

        track_product_command("create", success=True)
        logger.info("Product created", product_id=product.id, sku=product.sku)
        return product.id


class GetAllProductsQueryHandler(RequestHandler[GetAllProductsQuery, List[ProductDto]]):
    def __init__(self, repository: IProductRepository):
        self._repository = repository

    async def handle(self, request: GetAllProductsQuery) -> List[ProductDto]:
        products = await self._repository.get_all()
        return map_products_to_dtos(products)


class GetProductByIdQueryHandler(RequestHandler[GetProductByIdQuery, ProductDto]):
    def __init__(self, repository: IProductRepository):
        self._repository = repository

    async def handle(self, request: GetProductByIdQuery) -> ProductDto:
        product = await self._repository.get_by_id(request.id)
        if product is None:
            raise NotFoundError("Product", request.id)
        return map_product_to_dto(product)


class UpdateProductCommandHandler(RequestHandler[UpdateProductCommand, None]):
    def __init__(self, repository: IProductRepository):
        self._repository = repository

    async def handle(self, request: UpdateProductCommand) -> None:
        try:
            validate_command(UpdateProductRules, request, INVALID_PRODUCT)
        except BadRequestError:
            track_product_command("update", success=False)
            raise

        product = await self._repository.get_by_id(request.id)
        if product is None:
            track_product_command("update", success=False)
            raise NotFoundError("Product", request.id)

        map_payload_to_product(request, product)
        await self._repository.update(product)

        track_product_command("update", success=True)
        logger.info("Product updated", product_id=request.id)


class DeleteProductCommandHandler(RequestHandler[DeleteProductCommand, None]):
    def __init__(self, repository: IProductRepository):
        self._repository = repository

    async def handle(self, request: DeleteProductCommand) -> None:
        product = await self._repository.get_by_id(request.id)
        if product is None:
            track_product_command("delete", success=False)
            raise NotFoundError("Product", request.id)

        await self._repository.delete(product)

        track_product_command("delete", success=True)
        logger.info("Product deleted", product_id=request.id)


handles(CreateProductCommand, lambda uow: CreateProductCommandHandler(uow.products))
handles(GetAllProductsQuery, lambda uow: GetAllProductsQueryHandler(uow.products))
handles(GetProductByIdQuery, lambda uow: GetProductByIdQueryHandler(uow.products))
handles(UpdateProductCommand, lambda uow: UpdateProductCommandHandler(uow.products))
handles(DeleteProductCommand, lambda uow: DeleteProductCommandHandler(uow.products))
