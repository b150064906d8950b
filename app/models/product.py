# app/models/product.py
from decimal import Decimal

from sqlmodel import SQLModel, Field


class Product(SQLModel, table=True):
    """
    Catalog entry and authoritative stock level.

    Columns:
      - id, name, description, price, quantity, version

    `version` is bumped on every stock write. Checkout uses it as the
    optimistic concurrency token when decrementing `quantity`.
    """

    __tablename__ = "products"

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    name: str = Field(
        max_length=255,
        index=True,
        description="Display name of the product",
    )

    description: str | None = Field(
        default=None,
        description="Optional long description",
    )

    price: Decimal = Field(
        default=Decimal("0.00"),
        ge=0,
        max_digits=10,
        decimal_places=2,
        description="Unit price",
    )

    quantity: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    version: int = Field(
        default=1,
        description="Incremented on every stock write",
    )
