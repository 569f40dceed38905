"""Pricing engine — turns requested items into priced line items.

Every requested product must resolve against the catalog. A single unknown
product rejects the whole request with ``ProductNotFound`` (naming all the
missing ids), so an order's value always covers exactly the items charged.

All arithmetic is ``Decimal``. Quantities arriving as floats or strings are
accepted only when they denote a positive whole number.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, Field

from menu.product.catalog import Catalog
from menu.product.errors import ProductNotFound
from ordering.order.errors import EmptyOrder, InvalidQuantity
from ordering.order.order import OrderLineItem, sum_line_totals


class RequestedItem(BaseModel):
    product_id: str = Field(min_length=1)
    quantity: int | str | float | Decimal
    note: str | None = None


@dataclass(frozen=True)
class PricedItems:
    items: list[OrderLineItem]
    total: Decimal


def _whole_quantity(product_id: str, raw) -> int:
    if isinstance(raw, bool):
        raise InvalidQuantity({"quantity": [f"Quantity for '{product_id}' must be a positive whole number"]})
    try:
        quantity = Decimal(str(raw))
    except InvalidOperation:
        quantity = None
    if quantity is None or not quantity.is_finite() or quantity != quantity.to_integral_value() or quantity < 1:
        raise InvalidQuantity({"quantity": [f"Quantity for '{product_id}' must be a positive whole number"]})
    return int(quantity)


class PricingEngine:
    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog

    def price(self, requested_items: list[RequestedItem]) -> PricedItems:
        if not requested_items:
            raise EmptyOrder()

        items: list[OrderLineItem] = []
        missing: list[str] = []
        for requested in requested_items:
            quantity = _whole_quantity(requested.product_id, requested.quantity)
            product = self.catalog.find_product(requested.product_id)
            if product is None:
                missing.append(requested.product_id)
                continue
            items.append(
                OrderLineItem(
                    product_id=product.id,
                    name=product.name,
                    category=product.category,
                    quantity=quantity,
                    unit_price=product.unit_price,
                    note=requested.note,
                )
            )

        if missing:
            raise ProductNotFound(missing)

        return PricedItems(items=items, total=sum_line_totals(items))
