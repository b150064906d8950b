# app/models/order.py
from datetime import datetime, timezone
from decimal import Decimal

from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Completed checkout.

    Written once, inside the checkout transaction, and never updated.
    `payment` is the sum of the sold line totals at checkout time.
    """

    __tablename__ = "orders"

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    user_id: int = Field(
        foreign_key="users.id",
        index=True,
    )

    payment: Decimal = Field(
        max_digits=12,
        decimal_places=2,
        description="Total paid for this order",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Checkout timestamp (UTC)",
    )


class Sold(SQLModel, table=True):
    """
    Line item inside an order: one row per distinct product checked out.
    """

    __tablename__ = "sold"

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    order_id: int | None = Field(
        default=None,
        foreign_key="orders.id",
        index=True,
    )

    product_id: int = Field(
        foreign_key="products.id",
        index=True,
    )

    quantity: int = Field(
        gt=0,
        description="Quantity sold (>=1)",
    )

    # Price read from the store during checkout, not the cart snapshot
    unit_price: Decimal = Field(
        max_digits=10,
        decimal_places=2,
        description="Unit price at time of sale",
    )
