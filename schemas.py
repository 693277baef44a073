"""
Database Schemas for the e-commerce admin dashboard

Each Pydantic model represents a collection in MongoDB. Stored documents keep
the camelCase field names the dashboard reads (e.g. customerName), mapped to
snake_case attributes through aliases.
"""
import math
import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ORDER_STATUSES = ("pending", "confirmed", "cancelled", "shipped")

ORDERS_COLLECTION = "orders"
TOOLS_COLLECTION = "tools"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class OrderItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: Optional[str] = Field(None, alias="productId", description="Referenced tool id")
    name: str
    price: float = Field(..., ge=0, description="Unit price at order time")
    quantity: int = Field(1, ge=1)
    image: Optional[str] = None

    def subtotal(self) -> float:
        return self.price * self.quantity


class Order(BaseModel):
    """
    Orders placed by customers
    Collection: "orders"
    """
    model_config = ConfigDict(populate_by_name=True)

    customer_name: str = Field(..., alias="customerName")
    customer_email: str = Field(..., alias="customerEmail")
    phone: Optional[str] = None
    shipping_address: str = Field(..., alias="shippingAddress")
    transaction_code: Optional[str] = Field(
        None, alias="Mpesatransactioncode", description="Payment transaction code"
    )
    status: str = Field("pending", description="pending|confirmed|cancelled|shipped")
    items: List[OrderItem] = Field(default_factory=list)
    total: float = Field(..., ge=0)
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    def items_total(self) -> float:
        """Sum of line subtotals. The stored total is not forced to match it."""
        return round(sum(item.subtotal() for item in self.items), 2)


class Tool(BaseModel):
    """
    Tools (products) in the inventory
    Collection: "tools"
    """
    name: str = Field(..., description="Display name")
    brand: Optional[str] = None
    category: Optional[str] = None
    quantity: int = Field(1, ge=0, description="Units in stock")
    description: Optional[str] = None
    price: float = Field(..., ge=0, description="Unit price")
    color: List[str] = Field(default_factory=list, description="Available colors")
    image: List[str] = Field(default_factory=list, description="Image URLs, first is the cover")


class OrderStatusUpdate(BaseModel):
    status: Optional[str] = None


class ToolUpdate(BaseModel):
    """Fields submitted by the edit-tool form."""
    name: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    quantity: int = Field(1, ge=0)
    description: Optional[str] = None
    price: float
    color: List[str] = Field(default_factory=list)
    image: List[str] = Field(default_factory=list)

    @field_validator("quantity", mode="before")
    @classmethod
    def parse_quantity(cls, value):
        # Absent, unparseable or negative input falls back to 1. An explicit
        # "0" stays 0 so a tool can be marked out of stock.
        if isinstance(value, int):
            quantity = value
        else:
            match = _LEADING_INT.match(str(value)) if value is not None else None
            if match is None:
                return 1
            quantity = int(match.group(1))
        return quantity if quantity >= 0 else 1

    @field_validator("price", mode="before")
    @classmethod
    def parse_price(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError("price is required")
        price = float(value)
        if math.isnan(price) or math.isinf(price) or price < 0:
            raise ValueError(f"price must be a non-negative number, got {value!r}")
        return price

    def to_update(self) -> dict:
        # Text fields left out of the form keep their stored values
        return self.model_dump(exclude_none=True)
