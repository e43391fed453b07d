from typing import Generic, TypeVar
from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic paginated response schema."""

    items: list[T]
    total: int = Field(..., description="Number of items matching the filters")
    page: int = Field(..., description="Page number (1-indexed)")
    page_size: int
