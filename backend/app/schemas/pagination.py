from typing import Generic, List, TypeVar

from pydantic import BaseModel, Field, computed_field

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class PaginatedResponse(BaseModel, Generic[T]):
    """
    One page of a list endpoint, e.g. ``GET /api/projects?skip=20&limit=20``.

    ``has_more`` is serialized so a client can render "load more" without
    doing the arithmetic itself.
    """

    total: int = Field(..., ge=0)
    skip: int = Field(..., ge=0)
    limit: int = Field(..., ge=1, le=MAX_PAGE_SIZE)
    items: List[T]

    @computed_field
    @property
    def has_more(self) -> bool:
        return self.skip + len(self.items) < self.total


__all__ = ["PaginatedResponse", "DEFAULT_PAGE_SIZE", "MAX_PAGE_SIZE"]
