# app/models/user.py
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Registered customer.

    Registration and credentials are owned elsewhere; this service only
    reads users to attach them to orders. Inactive users cannot check out.
    """

    __tablename__ = "users"

    id: int | None = Field(
        default=None,
        primary_key=True,
    )

    email: str = Field(
        unique=True,
        index=True,
    )

    username: str = Field(
        min_length=5,
        unique=True,
        index=True,
    )

    name: str
    last_name: str

    active: bool = Field(
        default=True,
        description="Inactive accounts are rejected at checkout",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
