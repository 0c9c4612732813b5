from pydantic import ConfigDict, Field
from datetime import date
from typing import Optional

from app.schemas.types import CamelModel, IdStr


class Customer(CamelModel):
    """
    Customer record as supplied by the data-access layer.

    Read-only input to the rule engine. Only total_spent, purchase_count,
    last_purchase_date and tags take part in segment evaluation; name and
    email are display fields.
    """

    model_config = ConfigDict(frozen=True)

    id: IdStr
    name: str = ""
    email: Optional[str] = None
    total_spent: float = Field(0, ge=0)
    purchase_count: int = Field(0, ge=0)
    last_purchase_date: date
    tags: frozenset[str] = Field(default_factory=frozenset)


class CustomerListResponse(CamelModel):
    """Paginated customer list response."""
    items: list[Customer]
    total: int
    page: int
    page_size: int


class OrderItem(CamelModel):
    """Line item on an order."""
    id: IdStr
    name: str
    price: float = Field(..., ge=0)
    quantity: int = Field(..., ge=1)


class Order(CamelModel):
    """Customer order. Display-only, not consumed by segmentation."""

    model_config = ConfigDict(frozen=True)

    id: IdStr
    customer_id: IdStr
    order_date: date = Field(..., alias="date")
    amount: float = Field(..., ge=0)
    items: tuple[OrderItem, ...] = ()


class OrderListResponse(CamelModel):
    """Paginated order list response, newest first."""
    items: list[Order]
    total: int
    page: int
    page_size: int
