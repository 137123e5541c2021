"""
Pydantic models for cart state and rendered cart rows.
"""
from pydantic import BaseModel, Field, TypeAdapter, field_serializer, field_validator
from typing import List, Optional, Union
from decimal import Decimal

from storefront_cart.exceptions import ValidationError
from storefront_cart.pricing import round_price


def normalize_name(name: str) -> str:
    """Identity form of a product name: surrounding whitespace removed"""
    return name.strip()


class LineItem(BaseModel):
    """One row in the cart"""
    name: str = Field(..., description="Product name, which is also its identity")
    price: Decimal = Field(..., ge=0, description="Unit price in base currency")
    quantity: int = Field(1, ge=1, description="Units held")

    @property
    def normalized_name(self) -> str:
        return normalize_name(self.name)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def matches(self, name: str) -> bool:
        """Whether this item is the product called ``name``"""
        return self.normalized_name == normalize_name(name)

    @field_validator("price")
    @classmethod
    def bound_price(cls, v: Decimal) -> Decimal:
        try:
            return round_price(v)
        except ValidationError as e:
            raise ValueError(e.message)

    @field_serializer("price", when_used="json")
    def serialize_price(self, price: Decimal) -> Union[int, float]:
        # Persisted prices are plain JSON numbers
        if price == price.to_integral_value():
            return int(price)
        return float(price)


_ITEMS_ADAPTER = TypeAdapter(List[LineItem])


class Cart(BaseModel):
    """Ordered cart contents, first-added item first"""
    items: List[LineItem] = Field(default_factory=list, description="Line items in insertion order")

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def subtotal(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal("0"))

    def find(self, name: str) -> Optional[LineItem]:
        for item in self.items:
            if item.matches(name):
                return item
        return None

    def to_storage(self) -> str:
        """Serialize to the persisted JSON array"""
        return _ITEMS_ADAPTER.dump_json(self.items).decode("utf-8")

    @classmethod
    def from_storage(cls, raw: str) -> "Cart":
        """
        Parse the persisted JSON array.

        Raises:
            pydantic.ValidationError: If the value is not a valid item list
        """
        return cls(items=_ITEMS_ADAPTER.validate_json(raw))


class CartRow(BaseModel):
    """A line item as shown in the cart list"""
    name: str = Field(..., description="Product name as stored")
    unit_price: str = Field(..., description="Formatted unit price")
    quantity: int = Field(..., description="Units held")
    line_total: str = Field(..., description="Formatted price times quantity")
    remove_payload: str = Field(..., description="Name sent back by the remove control")
    image_url: str = Field(..., description="Product thumbnail")
