"""Product management — commands and handler."""

from decimal import Decimal

import structlog
from pydantic import BaseModel, Field

from menu.product.errors import ProductNotFound
from menu.product.product import Product, ProductCategory
from menu.product.repository import ProductRepository

logger = structlog.get_logger(__name__)


class AddProduct(BaseModel):
    name: str
    category: ProductCategory
    unit_price: Decimal
    quantity_on_hand: int = 0
    description: str | None = None


class UpdateProduct(BaseModel):
    product_id: str
    name: str | None = None
    category: ProductCategory | None = None
    unit_price: Decimal | None = None
    quantity_on_hand: int | None = None
    description: str | None = None


class RemoveProduct(BaseModel):
    product_id: str = Field(min_length=1)


class ProductManagementHandler:
    def __init__(self, products: ProductRepository) -> None:
        self.products = products

    def add_product(self, command: AddProduct) -> str:
        product = Product.create(
            name=command.name,
            category=command.category,
            unit_price=command.unit_price,
            quantity_on_hand=command.quantity_on_hand,
            description=command.description,
        )
        self.products.add(product)
        logger.info("Product added", product_id=product.id, category=product.category)
        return product.id

    def update_product(self, command: UpdateProduct) -> Product:
        product = self.get_product(command.product_id)
        product.revise(**command.model_dump(exclude={"product_id"}))
        self.products.add(product)
        return product

    def remove_product(self, command: RemoveProduct) -> None:
        self.get_product(command.product_id)
        self.products.delete(command.product_id)
        logger.info("Product removed", product_id=command.product_id)

    def get_product(self, product_id: str) -> Product:
        product = self.products.find(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        return product

    def list_products(self, category: ProductCategory | None = None) -> list[Product]:
        if category is None:
            return self.products.list_all()
        return self.products.find_by_category(category)
