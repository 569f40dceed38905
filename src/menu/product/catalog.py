"""Catalog lookup used by order pricing."""

from typing import Protocol

from menu.product.product import Product
from menu.product.repository import ProductRepository


class Catalog(Protocol):
    def find_product(self, product_id: str) -> Product | None: ...


class MenuCatalog:
    """Resolves product ids against the menu as it is right now."""

    def __init__(self, products: ProductRepository) -> None:
        self.products = products

    def find_product(self, product_id: str) -> Product | None:
        return self.products.find(product_id)
