"""
API models and schemas for the FastAPI application.
"""

import math
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from storage.models import Book


class SortBy(str, Enum):
    """Sort options for book listings."""
    TITLE = "title"
    AUTHOR = "author"
    GENRE = "genre"
    PUBLISHED_DATE = "publishedDate"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"


class SortOrder(str, Enum):
    """Sort order options."""
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortOrder":
        """Only an explicit 'asc' sorts ascending."""
        return cls.ASC if value == cls.ASC.value else cls.DESC


class CamelModel(BaseModel):
    """Base for response models serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaginationInfo(CamelModel):
    """Pagination metadata for a page of books."""
    current_page: int = Field(..., description="Current page number")
    total_pages: int = Field(..., description="Total number of pages")
    total_books: int = Field(..., description="Total number of books")
    books_per_page: int = Field(..., description="Number of books per page")
    has_next_page: bool = Field(..., description="Whether there is a next page")
    has_prev_page: bool = Field(..., description="Whether there is a previous page")
    next_page: Optional[int] = Field(None, description="Next page number, if any")
    prev_page: Optional[int] = Field(None, description="Previous page number, if any")

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationInfo":
        total_pages = math.ceil(total / limit)
        has_next = page < total_pages
        has_prev = page > 1
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_books=total,
            books_per_page=limit,
            has_next_page=has_next,
            has_prev_page=has_prev,
            next_page=page + 1 if has_next else None,
            prev_page=page - 1 if has_prev else None
        )


class SortingInfo(CamelModel):
    """Sort settings echoed back with a listing."""
    sort_by: SortBy = Field(..., description="Sort field")
    sort_order: SortOrder = Field(..., description="Sort order")


class BookListData(CamelModel):
    """Payload of a book listing."""
    books: List[Book] = Field(..., description="List of books")
    pagination: PaginationInfo
    sorting: SortingInfo


class SuccessResponse(BaseModel):
    """Envelope for successful responses."""
    success: bool = True
    message: str = Field(..., description="Outcome summary")
    data: Dict[str, Any] = Field(default_factory=dict, description="Response payload")


class ErrorResponse(BaseModel):
    """Error response model."""
    message: str = Field(..., description="Error summary")
    error: Optional[str] = Field(None, description="Error description")
    details: Optional[str] = Field(None, description="Additional error details")
    errors: Optional[List[str]] = Field(None, description="Per-field error messages")


class FallbackErrorResponse(BaseModel):
    """Body produced by the fallback error handler."""
    message: str = Field(..., description="Error message")
    stack: Optional[str] = Field(None, description="Stack trace outside production")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Database connection status")
