"""
Error taxonomy shared by the repository and the HTTP layer.
Each error carries the HTTP status it maps to and the fields of the error envelope.
"""

from typing import List, Optional


class BookstoreError(Exception):
    """Base class for errors that are reported to the client as-is."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error: Optional[str] = None,
        details: Optional[str] = None,
        errors: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error = error
        self.details = details
        self.errors = errors


class ParameterError(BookstoreError):
    """Invalid query parameter or request body shape."""
    status_code = 400


class InvalidIdError(BookstoreError):
    """Identifier is not a well-formed ObjectId."""
    status_code = 400

    def __init__(self, book_id: str):
        super().__init__(
            "Invalid book ID format",
            error="The provided ID is not a valid MongoDB ObjectId",
            details="Book ID must be a 24-character hexadecimal string"
        )
        self.book_id = book_id


class NotFoundError(BookstoreError):
    """No book stored under the given identifier."""
    status_code = 404

    def __init__(self, book_id: str):
        super().__init__(
            "Book not found",
            error=f"No book found with ID: {book_id}",
            details="Please check the book ID and try again"
        )
        self.book_id = book_id


class BookValidationError(BookstoreError):
    """One or more book fields violate their constraints."""
    status_code = 400

    def __init__(self, messages: List[str]):
        super().__init__(
            "Validation failed",
            error="Book data failed validation",
            details="Please check the following fields: " + ", ".join(messages),
            errors=messages
        )


class UnexpectedError(BookstoreError):
    """Failure with no more specific classification."""
    status_code = 500
