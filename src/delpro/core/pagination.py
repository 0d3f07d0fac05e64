from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginationResult(BaseModel, Generic[T]):
    """Page of items plus the counters a client needs to request the next one."""

    items: list[T] = Field(..., description="Items on this page")
    total: int = Field(..., description="Total number of matching items", ge=0)
    limit: int = Field(..., description="Page size requested", ge=1)
    offset: int = Field(..., description="Number of items skipped", ge=0)

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.items) < self.total
