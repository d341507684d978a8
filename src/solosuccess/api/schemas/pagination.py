"""Pagination schemas for API responses."""

from typing import Generic, TypeVar
from pydantic import BaseModel, Field

from solosuccess.infrastructure.database.repositories.base import PaginatedResult


# Type variable for generic paginated items
T = TypeVar("T")


class PaginationParams(BaseModel):
    """
    Query parameters for pagination.

    Example:
        ```python
        @router.get("/goals")
        async def list_goals(pagination: Pagination):
            ...
        ```
    """

    model_config = {"str_strip_whitespace": True}

    page: int = Field(
        default=1,
        ge=1,
        description="Page number (1-indexed)",
        examples=[1, 2, 10]
    )
    page_size: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Number of items per page (max 100)",
        examples=[20, 50, 100]
    )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class PaginationMeta(BaseModel):
    """Pagination metadata included in paginated responses."""

    page: int = Field(..., ge=1, description="Current page number (1-indexed)")
    page_size: int = Field(..., ge=1, description="Items per page")
    total: int = Field(..., ge=0, description="Total number of items across all pages")
    total_pages: int = Field(..., ge=0, description="Total number of pages")
    has_next: bool = Field(..., description="Whether there is a next page")
    has_prev: bool = Field(..., description="Whether there is a previous page")

    @classmethod
    def from_result(cls, result: PaginatedResult) -> "PaginationMeta":
        return cls(
            page=result.page,
            page_size=result.page_size,
            total=result.total,
            total_pages=result.total_pages,
            has_next=result.has_next,
            has_prev=result.has_prev,
        )


class PaginatedResponse(BaseModel, Generic[T]):
    """
    Standard paginated response wrapper.

    Example Response:
        ```json
        {
            "items": [{"id": "...", "title": "Launch your first offer"}],
            "pagination": {
                "page": 1,
                "page_size": 20,
                "total": 1,
                "total_pages": 1,
                "has_next": false,
                "has_prev": false
            }
        }
        ```
    """

    items: list[T] = Field(..., description="List of items for current page")
    pagination: PaginationMeta = Field(..., description="Pagination metadata")

    @classmethod
    def build(cls, result: PaginatedResult, item_model: type[BaseModel]):
        return cls(
            items=[item_model.model_validate(item) for item in result.items],
            pagination=PaginationMeta.from_result(result),
        )
