"""
Product catalog router.

Reads are anonymous; writes require the Administrator or Manager role. Every
endpoint only builds a command or query and hands it to the mediator.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from ..application import Mediator
from ..application.schemas import (
    CreatedResponse,
    CreateProductCommand,
    DeleteProductCommand,
    ErrorResponse,
    GetAllProductsQuery,
    GetProductByIdQuery,
    ProductDto,
    UpdateProductCommand,
)
from ..dependencies import ADMINISTRATOR, MANAGER, get_mediator, require_roles
from ..domain.exceptions import BadRequestError

router = APIRouter(
    prefix="/api/products",
    tags=["Products"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)

can_manage_products = require_roles(ADMINISTRATOR, MANAGER)
can_delete_products = require_roles(ADMINISTRATOR)


@router.get("", response_model=List[ProductDto], summary="List products")
async def get_products(mediator: Mediator = Depends(get_mediator)):
    return await mediator.send(GetAllProductsQuery())


@router.get("/{id}", response_model=ProductDto, summary="Get a product")
async def get_product(id: int, mediator: Mediator = Depends(get_mediator)):
    """
    Fetch one product.

    Raises:
        NotFoundError: If no product has this id (404)
    """
    return await mediator.send(GetProductByIdQuery(id=id))


@router.post(
    "",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
    dependencies=[Depends(can_manage_products)],
)
async def create_product(
    command: CreateProductCommand,
    response: Response,
    mediator: Mediator = Depends(get_mediator),
):
    product_id = await mediator.send(command)
    response.headers["Location"] = f"{router.prefix}/{product_id}"
    return CreatedResponse(id=product_id)


@router.put(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Update a product",
    dependencies=[Depends(can_manage_products)],
)
async def update_product(
    id: int,
    command: UpdateProductCommand,
    mediator: Mediator = Depends(get_mediator),
):
    """
    Replace a product's client-controlled fields.

    The id in the route must match the id in the body.
    """
    if command.id != id:
        raise BadRequestError("ID mismatch")

    await mediator.send(command)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product",
    dependencies=[Depends(can_delete_products)],
)
async def delete_product(id: int, mediator: Mediator = Depends(get_mediator)):
    await mediator.send(DeleteProductCommand(id=id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
