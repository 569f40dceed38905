"""Product aggregate — an item on the menu.

Orders never hold a live reference to a Product: at order time the pricing
engine copies the product's name, category and unit price into the line item.
Later edits to the menu do not touch orders that were already placed.
"""

from decimal import Decimal
from enum import Enum

from protean import atomic_change, invariant
from protean.fields import DateTime, Integer, String

from shared.domain import quickbite, utcnow
from shared.errors import ValidationError
from shared.money import check_amount, format_amount, to_amount


class ProductCategory(Enum):
    SNACK = "Snack"
    SIDE = "Side"
    DRINK = "Drink"
    DESSERT = "Dessert"


@quickbite.aggregate
class Product:
    name = String(required=True, max_length=255)
    category = String(required=True, choices=ProductCategory)
    unit_price = String(required=True, max_length=20)
    quantity_on_hand = Integer(default=0, min_value=0)
    description = String(max_length=1000)
    created_at = DateTime(default=utcnow)
    updated_at = DateTime()

    @invariant.post
    def unit_price_must_be_a_valid_amount(self):
        check_amount("unit_price", self.unit_price)

    @classmethod
    def create(cls, name, category, unit_price, quantity_on_hand=0, description=None):
        return cls(
            name=name,
            category=parse_category(category).value,
            unit_price=format_amount(unit_price),
            quantity_on_hand=quantity_on_hand,
            description=description,
        )

    def price(self) -> Decimal:
        return to_amount(self.unit_price)

    def revise(self, name=None, category=None, unit_price=None, quantity_on_hand=None, description=None):
        """Apply a partial update; fields left out keep their value."""
        with atomic_change(self):
            if name is not None:
                self.name = name
            if category is not None:
                self.category = parse_category(category).value
            if unit_price is not None:
                self.unit_price = format_amount(unit_price)
            if quantity_on_hand is not None:
                self.quantity_on_hand = quantity_on_hand
            if description is not None:
                self.description = description
            self.updated_at = utcnow()


def parse_category(value: "ProductCategory | str") -> ProductCategory:
    """Accept a category by value (``Snack``) or by name (``SNACK``), any case."""
    if isinstance(value, ProductCategory):
        return value
    wanted = str(value).strip().lower()
    for category in ProductCategory:
        if wanted in (category.value.lower(), category.name.lower()):
            return category
    raise ValidationError({"category": [f"'{value}' is not a valid product category"]})
