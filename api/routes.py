"""
Book resource routes.
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import APIRouter, Body, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from pymongo import ASCENDING, DESCENDING

from api.models import BookListData, PaginationInfo, SortBy, SortingInfo, SortOrder, SuccessResponse
from storage.exceptions import NotFoundError, ParameterError
from storage.repository import BookRepository

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/books", tags=["Books"])

REQUIRED_FIELDS = ("title", "author", "genre", "publishedDate")
MAX_LIMIT = 100
# Largest page whose skip offset still fits in a BSON int64
MAX_PAGE = (2 ** 63 - 1) // MAX_LIMIT


def get_repository(request: Request) -> BookRepository:
    """Repository built at startup and held on the application state."""
    return request.app.state.repository


def _respond(message: str, data: Dict[str, Any], status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=SuccessResponse(message=message, data=data).model_dump()
    )


def _parse_int(value: str) -> Optional[int]:
    """
    Plain ASCII digits only; rejects signs, underscores and whitespace.

    Digit strings longer than any valid page come back as MAX_PAGE + 1.
    """
    if not (value.isascii() and value.isdigit()):
        return None
    digits = value.lstrip("0") or "0"
    if len(digits) > len(str(MAX_PAGE)):
        return MAX_PAGE + 1
    return int(digits)


def parse_page(value: Optional[str]) -> int:
    """Page number from the query string; defaults to 1."""
    if value is None:
        return 1
    page = _parse_int(value)
    if page is None or page < 1:
        raise ParameterError("Page number must be greater than 0", error="Invalid page parameter")
    if page > MAX_PAGE:
        raise ParameterError(f"Page number cannot exceed {MAX_PAGE}", error="Invalid page parameter")
    return page


def parse_limit(value: Optional[str]) -> int:
    """Page size from the query string; defaults to 10, bounded to [1, 100]."""
    if value is None:
        return 10
    limit = _parse_int(value)
    if limit is None or limit < 1 or limit > MAX_LIMIT:
        raise ParameterError(f"Limit must be between 1 and {MAX_LIMIT}", error="Invalid limit parameter")
    return limit


def parse_sort_by(value: Optional[str]) -> SortBy:
    """Sort field from the query string; only known book fields are accepted."""
    if value is None or value == "":
        return SortBy.CREATED_AT
    try:
        return SortBy(value)
    except ValueError:
        allowed = ", ".join(option.value for option in SortBy)
        raise ParameterError(f"sortBy must be one of: {allowed}", error="Invalid sortBy parameter")


@router.get("")
async def get_books(
    page: Optional[str] = Query(None, description="Page number (starts from 1)"),
    limit: Optional[str] = Query(None, description="Items per page (1-100)"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="Sort field"),
    sort_order: Optional[str] = Query(None, alias="sortOrder", description="'asc' for ascending, otherwise descending"),
    repository: BookRepository = Depends(get_repository)
):
    """
    Get books with sorting and pagination.

    - **page**: Page number (starts from 1)
    - **limit**: Items per page (1-100)
    - **sortBy**: Sort field (title, author, genre, publishedDate, createdAt, updatedAt)
    - **sortOrder**: asc or desc
    """
    page_number = parse_page(page)
    page_size = parse_limit(limit)
    sort_field = parse_sort_by(sort_by)
    order = SortOrder.parse(sort_order)
    logger.debug("Listing books", page=page_number, limit=page_size, sort_by=sort_field.value, sort_order=order.value)

    books, total = await repository.list(
        page_number,
        page_size,
        sort_field.value,
        ASCENDING if order == SortOrder.ASC else DESCENDING
    )

    data = BookListData(
        books=books,
        pagination=PaginationInfo.build(page_number, page_size, total),
        sorting=SortingInfo(sort_by=sort_field, sort_order=order)
    )
    return _respond("Books retrieved successfully", data.model_dump(by_alias=True, mode="json"))


@router.get("/{book_id}")
async def get_book(book_id: str, repository: BookRepository = Depends(get_repository)):
    """
    Get a single book by ID.

    - **book_id**: MongoDB ObjectId of the book
    """
    BookRepository.parse_id(book_id)
    book = await repository.find_by_id(book_id)
    if book is None:
        raise NotFoundError(book_id)
    return _respond("Book retrieved successfully", {"book": book.model_dump(by_alias=True, mode="json")})


@router.post("/add", status_code=status.HTTP_201_CREATED)
async def add_book(
    payload: Optional[Dict[str, Any]] = Body(None),
    repository: BookRepository = Depends(get_repository)
):
    """Create a book. title, author, genre and publishedDate are required."""
    payload = payload or {}
    missing = [field for field in REQUIRED_FIELDS if not payload.get(field)]
    if missing:
        raise ParameterError(
            "Required fields are missing",
            error="Invalid book data",
            errors=[f"{field} is required" for field in missing]
        )

    book = await repository.create(payload)
    return _respond(
        "Book added successfully!",
        {"book": book.model_dump(by_alias=True, mode="json")},
        status_code=status.HTTP_201_CREATED
    )


@router.put("/{book_id}")
async def update_book(
    book_id: str,
    payload: Optional[Dict[str, Any]] = Body(None),
    repository: BookRepository = Depends(get_repository)
):
    """Update some or all fields of a book."""
    BookRepository.parse_id(book_id)
    if not payload:
        raise ParameterError("No update data provided", error="Request body cannot be empty")

    book = await repository.update_by_id(book_id, payload)
    if book is None:
        raise NotFoundError(book_id)
    return _respond("Book updated successfully", {"book": book.model_dump(by_alias=True, mode="json")})


@router.delete("/{book_id}")
async def delete_book(book_id: str, repository: BookRepository = Depends(get_repository)):
    """Delete a book and report what was removed."""
    BookRepository.parse_id(book_id)
    book = await repository.delete_by_id(book_id)
    if book is None:
        raise NotFoundError(book_id)
    return _respond("Book deleted successfully", {"deletedBook": book.summary()})
