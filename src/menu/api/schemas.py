"""Pydantic request/response schemas for the Menu API.

These are external contracts (anti-corruption layer), separate from the
internal management commands.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from menu.product.product import ProductCategory


class AddProductRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    category: ProductCategory
    unit_price: Decimal = Field(ge=0)
    quantity_on_hand: int = Field(default=0, ge=0)
    description: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "X-Burger",
                    "category": "Snack",
                    "unit_price": "14.95",
                    "quantity_on_hand": 20,
                    "description": "Beef patty, cheese and bun",
                }
            ]
        }
    }


class UpdateProductRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    category: ProductCategory | None = None
    unit_price: Decimal | None = Field(default=None, ge=0)
    quantity_on_hand: int | None = Field(default=None, ge=0)
    description: str | None = None


class ProductIdResponse(BaseModel):
    product_id: str


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    category: ProductCategory
    unit_price: Decimal
    quantity_on_hand: int
    description: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class StatusResponse(BaseModel):
    status: str = "ok"
