"""FastAPI endpoints for the Catalogue domain."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.catalogue.api.schemas import (
    CreateProductRequest,
    ProductResponse,
    StatusResponse,
    UpdateProductRequest,
)
from storefront.catalogue.product.listing import get_product, list_brands, list_products
from storefront.catalogue.product.management import CreateProduct, DeleteProduct, UpdateProduct
from storefront.identity.access import Actor
from storefront.identity.api.dependencies import current_actor
from storefront.shared.payload import encode

product_router = APIRouter(prefix="/products", tags=["products"])
admin_router = APIRouter(prefix="/admin/products", tags=["admin"])


# --- Browsing ---


@product_router.get("", response_model=list[ProductResponse])
async def browse_products(brand: str | None = None, actor: Actor = Depends(current_actor)) -> list[ProductResponse]:
    return [ProductResponse(**details) for details in list_products(brand=brand)]


@product_router.get("/brands", response_model=list[str])
async def brands(actor: Actor = Depends(current_actor)) -> list[str]:
    return list_brands()


@product_router.get("/{product_id}", response_model=ProductResponse)
async def product(product_id: int, actor: Actor = Depends(current_actor)) -> ProductResponse:
    return ProductResponse(**get_product(product_id))


# --- Administration ---


@admin_router.post("", status_code=201, response_model=ProductResponse)
async def create_product(body: CreateProductRequest, actor: Actor = Depends(current_actor)) -> ProductResponse:
    command = CreateProduct(
        name=body.name,
        brand=body.brand,
        category=body.category,
        price=body.price,
        discount=body.discount,
        description=body.description,
        image_url=body.image_url,
        size_stocks=encode(body.size_stocks),
        stock=body.stock,
        **actor.stamp(),
    )
    number = current_domain.process(command, asynchronous=False)
    return ProductResponse(**get_product(number))


@admin_router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int, body: UpdateProductRequest, actor: Actor = Depends(current_actor)
) -> ProductResponse:
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        brand=body.brand,
        category=body.category,
        price=body.price,
        discount=body.discount,
        description=body.description,
        image_url=body.image_url,
        sizes=encode(body.sizes),
        **actor.stamp(),
    )
    current_domain.process(command, asynchronous=False)
    return ProductResponse(**get_product(product_id))


@admin_router.delete("/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: int, actor: Actor = Depends(current_actor)) -> StatusResponse:
    current_domain.process(DeleteProduct(product_id=product_id, **actor.stamp()), asynchronous=False)
    return StatusResponse()
