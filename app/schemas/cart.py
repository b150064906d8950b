# app/schemas/cart.py
from decimal import Decimal

from sqlmodel import SQLModel


class CartLineRead(SQLModel):
    """
    Read model for a single cart line, including line_total.
    """

    product_id: int
    product_name: str
    description: str | None = None
    unit_price: Decimal
    quantity: int
    line_total: Decimal


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartLineRead]
    total_quantity: int
    total_price: Decimal
