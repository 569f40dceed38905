"""FastAPI routes for the Menu domain — products."""

from fastapi import APIRouter, Depends

from bootstrap import Container, get_container
from menu.api.schemas import (
    AddProductRequest,
    ProductIdResponse,
    ProductResponse,
    StatusResponse,
    UpdateProductRequest,
)
from menu.product.management import AddProduct, RemoveProduct, UpdateProduct
from menu.product.product import parse_category

product_router = APIRouter(prefix="/product", tags=["products"])


@product_router.post("", status_code=201, response_model=ProductIdResponse)
def add_product(body: AddProductRequest, container: Container = Depends(get_container)) -> ProductIdResponse:
    command = AddProduct(**body.model_dump())
    product_id = container.product_management.add_product(command)
    return ProductIdResponse(product_id=product_id)


@product_router.get("", response_model=list[ProductResponse])
def list_products(container: Container = Depends(get_container)) -> list[ProductResponse]:
    products = container.product_management.list_products()
    return [ProductResponse.model_validate(product) for product in products]


@product_router.get("/category/{category}", response_model=list[ProductResponse])
def list_products_by_category(category: str, container: Container = Depends(get_container)) -> list[ProductResponse]:
    products = container.product_management.list_products(parse_category(category))
    return [ProductResponse.model_validate(product) for product in products]


@product_router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: str, container: Container = Depends(get_container)) -> ProductResponse:
    return ProductResponse.model_validate(container.product_management.get_product(product_id))


@product_router.put("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: str, body: UpdateProductRequest, container: Container = Depends(get_container)
) -> ProductResponse:
    command = UpdateProduct(product_id=product_id, **body.model_dump())
    product = container.product_management.update_product(command)
    return ProductResponse.model_validate(product)


@product_router.delete("/{product_id}", response_model=StatusResponse)
def remove_product(product_id: str, container: Container = Depends(get_container)) -> StatusResponse:
    container.product_management.remove_product(RemoveProduct(product_id=product_id))
    return StatusResponse(status="removed")
