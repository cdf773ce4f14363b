"""Common schemas used across the application."""

from decimal import Decimal
from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

# Money: non-negative, 2 decimal places. Space: non-negative, 3 places.
Money = Annotated[Decimal, Field(ge=0, max_digits=18, decimal_places=2)]
SquareMeters = Annotated[Decimal, Field(ge=0, max_digits=18, decimal_places=3)]
Percent = Annotated[Decimal, Field(ge=0, le=100, max_digits=5, decimal_places=2)]


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic paginated response wrapper.

    Usage:
        response_model=PaginatedResponse[ShipmentSummary]

    Returns:
        {
            "items": [...],
            "total": 150,
            "limit": 50,
            "offset": 0
        }
    """
    items: list[T]
    total: int
    limit: int
    offset: int


class NamedRef(BaseModel):
    """Compact reference to a related row (supplier, item type)."""
    id: str
    name: str

    model_config = {"from_attributes": True}


def not_null(value, field: str):
    """An explicit null is not a valid update for `field`."""
    if value is None:
        raise ValueError(f"{field} cannot be null")
    return value
