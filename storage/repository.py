"""
Book repository: CRUD operations on the books collection.
"""

from typing import Any, Dict, List, Optional, Tuple, Type

import structlog
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import BaseModel, ValidationError
from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from .exceptions import BookValidationError, InvalidIdError, UnexpectedError
from .models import Book, BookCreate, BookUpdate, utc_now, validation_messages

logger = structlog.get_logger(__name__)


class BookRepository:
    """Owns persisted Book records in a MongoDB collection."""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    @staticmethod
    def parse_id(book_id: str) -> ObjectId:
        """
        Convert a client-supplied identifier to an ObjectId.

        Raises:
            InvalidIdError: if the identifier is not a 24-character hex string
        """
        if not isinstance(book_id, str) or not ObjectId.is_valid(book_id):
            raise InvalidIdError(book_id)
        return ObjectId(book_id)

    @staticmethod
    def _validate(model: Type[BaseModel], fields: Dict[str, Any]) -> Dict[str, Any]:
        """Validate fields against a model and return them keyed by their stored names."""
        try:
            validated = model.model_validate(fields)
        except ValidationError as e:
            raise BookValidationError(validation_messages(e))
        return validated.model_dump(by_alias=True, exclude_unset=True)

    async def create(self, fields: Dict[str, Any]) -> Book:
        """
        Validate and insert a new book.

        Args:
            fields: Book fields keyed by their wire names

        Returns:
            The stored Book with its generated id and timestamps
        """
        document = self._validate(BookCreate, fields)
        now = utc_now()
        document["createdAt"] = now
        document["updatedAt"] = now

        try:
            result = await self.collection.insert_one(document)
        except PyMongoError as e:
            logger.error("Failed to insert book", title=document["title"], error=str(e))
            raise UnexpectedError("Error adding book", error=str(e)) from e

        document["_id"] = result.inserted_id
        logger.info("Book created", book_id=str(result.inserted_id), title=document["title"])
        return Book.from_document(document)

    async def find_by_id(self, book_id: str) -> Optional[Book]:
        """Return the book stored under book_id, or None."""
        object_id = self.parse_id(book_id)
        try:
            document = await self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error("Failed to get book by ID", book_id=book_id, error=str(e))
            raise UnexpectedError("Error fetching book", error=str(e)) from e

        if document is None:
            return None
        return Book.from_document(document)

    async def list(
        self,
        page: int,
        limit: int,
        sort_field: str = "createdAt",
        sort_direction: int = DESCENDING
    ) -> Tuple[List[Book], int]:
        """
        Get one page of books in the requested order.

        Args:
            page: Page number, starting at 1
            limit: Page size
            sort_field: Stored field name to sort on
            sort_direction: pymongo.ASCENDING or pymongo.DESCENDING

        Returns:
            The books on the page and the total number of books
        """
        skip = (page - 1) * limit
        try:
            cursor = self.collection.find({}).sort([(sort_field, sort_direction)]).skip(skip).limit(limit)
            documents = await cursor.to_list(length=limit)
            total = await self.collection.count_documents({})
        except PyMongoError as e:
            logger.error("Failed to list books", page=page, limit=limit, sort_field=sort_field, error=str(e))
            raise UnexpectedError("Error retrieving books", error=str(e)) from e

        return [Book.from_document(document) for document in documents], total

    async def update_by_id(self, book_id: str, fields: Dict[str, Any]) -> Optional[Book]:
        """
        Apply a partial update; only the supplied fields are validated and written.

        Returns:
            The updated Book, or None if no book has this id
        """
        object_id = self.parse_id(book_id)
        changes = self._validate(BookUpdate, fields)
        changes["updatedAt"] = utc_now()

        try:
            document = await self.collection.find_one_and_update(
                {"_id": object_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER
            )
        except PyMongoError as e:
            logger.error("Failed to update book", book_id=book_id, error=str(e))
            raise UnexpectedError("Error updating book", error=str(e)) from e

        if document is None:
            return None
        logger.info("Book updated", book_id=book_id, fields=sorted(changes))
        return Book.from_document(document)

    async def delete_by_id(self, book_id: str) -> Optional[Book]:
        """Remove a book and return the deleted record, or None."""
        object_id = self.parse_id(book_id)
        try:
            document = await self.collection.find_one_and_delete({"_id": object_id})
        except PyMongoError as e:
            logger.error("Failed to delete book", book_id=book_id, error=str(e))
            raise UnexpectedError("Error deleting book", error=str(e)) from e

        if document is None:
            return None
        logger.info("Book deleted", book_id=book_id)
        return Book.from_document(document)
