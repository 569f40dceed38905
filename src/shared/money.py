"""Money amounts.

Aggregates store amounts as decimal strings such as ``"29.90"``. Protean has
no decimal field and a float would drift, so amounts only ever become
numbers as ``Decimal``.
"""

from decimal import Decimal, InvalidOperation

from shared.errors import ValidationError


def to_amount(value) -> Decimal:
    """Read a stored or submitted amount as ``Decimal``."""
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError({"amount": [f"'{value}' is not a valid amount"]}) from None
    if not amount.is_finite():
        raise ValidationError({"amount": [f"'{value}' is not a valid amount"]})
    return amount


def format_amount(value) -> str:
    return str(to_amount(value))


def check_amount(field: str, value, max_places: int = 2) -> None:
    """Raise unless ``value`` is a non-negative amount with at most ``max_places`` decimals."""
    try:
        amount = to_amount(value)
    except ValidationError:
        raise ValidationError({field: [f"'{value}' is not a valid amount"]}) from None
    if amount < 0:
        raise ValidationError({field: ["Amount cannot be negative"]})
    if amount.as_tuple().exponent < -max_places:
        raise ValidationError({field: [f"Amount cannot have more than {max_places} decimal places"]})
