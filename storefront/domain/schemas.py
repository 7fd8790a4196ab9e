# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List
from decimal import Decimal
from datetime import datetime

from storefront.domain.order_status import OrderStatus


class ItemIn(BaseModel):
    """Schema dla dodawania produktu do koszyka."""

    product_id: int = Field(..., gt=0, description="ID produktu (musi byc > 0)")
    quantity: int = Field(..., ge=1, le=100, description="Ilosc produktu (1-100)")


class QuantityIn(BaseModel):
    """Schema dla zmiany ilosci, 0 usuwa pozycje."""

    quantity: int = Field(..., ge=0, le=100, description="Nowa ilosc (0-100)")


class CartLineOut(BaseModel):
    product_id: int
    quantity: int
    unit_price: Decimal
    display_name: str
    image_ref: str | None = None


class CartOut(BaseModel):
    """Schema dla koszyka (response)."""

    lines: List[CartLineOut]
    total: Decimal
    line_count: int

    model_config = ConfigDict(from_attributes=True)


class OrderItemIn(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., ge=1)


class OrderCreate(BaseModel):
    """Schema dla tworzenia zamowienia."""

    items: List[OrderItemIn] = Field(..., min_length=1, max_length=50)


class OrderStatusIn(BaseModel):
    status: OrderStatus


class OrderOut(BaseModel):
    id: int
    customer_id: int
    order_date: datetime
    status: OrderStatus
    total: Decimal


class OrderLineOut(BaseModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    unit_price: Decimal


class PlacedOrderOut(BaseModel):
    """Zamowienie razem z pozycjami (response)."""

    order: OrderOut
    lines: List[OrderLineOut]


class PaginationOut(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_prev_page: bool


class OrderListOut(BaseModel):
    orders: List[PlacedOrderOut]
    pagination: PaginationOut


class OrderStatsOut(BaseModel):
    total_orders: int
    pending_orders: int
    total_revenue: Decimal
    orders_today: int
