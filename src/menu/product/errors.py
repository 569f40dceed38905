from shared.errors import ObjectNotFoundError


class ProductNotFound(ObjectNotFoundError):
    def __init__(self, product_ids: list[str] | str) -> None:
        if isinstance(product_ids, str):
            product_ids = [product_ids]
        self.product_ids = list(product_ids)
        super().__init__({"product_id": [f"Product '{pid}' does not exist" for pid in self.product_ids]})
