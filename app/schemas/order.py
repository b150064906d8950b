# app/schemas/order.py
from datetime import datetime
from decimal import Decimal

from sqlmodel import SQLModel


class SoldRead(SQLModel):
    """
    Representation of a single sold line item.
    """

    id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    line_total: Decimal


class OrderWithSoldRead(SQLModel):
    """
    Full order view returned by a successful checkout.
    """

    id: int
    user_id: int
    payment: Decimal
    created_at: datetime
    items: list[SoldRead]
