"""Repository for the Product aggregate."""

from protean.exceptions import ObjectNotFoundError

from menu.product.product import Product, ProductCategory
from shared.domain import quickbite


@quickbite.repository(part_of=Product)
class ProductRepository:
    """``add()`` and ``get()`` come from Protean; ``get()`` raises when the id is unknown."""

    def find(self, product_id: str) -> Product | None:
        try:
            return self.get(product_id)
        except ObjectNotFoundError:
            return None

    def list_all(self) -> list[Product]:
        products = self._dao.query.all().items
        return sorted(products, key=lambda product: product.created_at)

    def find_by_category(self, category: ProductCategory) -> list[Product]:
        products = self._dao.query.filter(category=category.value).all().items
        return sorted(products, key=lambda product: product.created_at)

    def delete(self, product_id: str) -> None:
        product = self.find(product_id)
        if product is not None:
            self._dao.delete(product)
