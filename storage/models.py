"""
Pydantic models for book records.
Implements the Book schema, its field rules and the input models used for create and update.
"""

from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic import ValidationError
from pydantic.alias_generators import to_camel, to_snake


REQUIRED_MESSAGES = {
    "title": "Title is required",
    "author": "Author is required",
    "genre": "Genre is required",
    "published_date": "Published date is required",
}

FIELD_LABELS = {
    "title": "Title",
    "author": "Author name",
    "genre": "Genre",
    "published_date": "Published date",
}

MAX_LENGTHS = {
    "title": 200,
    "author": 100,
    "genre": 50,
}


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def clean_text(field_name: str, value: Any) -> str:
    """Trim a text field and check it against its length bounds."""
    if value is None:
        raise ValueError(REQUIRED_MESSAGES[field_name])
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str):
        raise ValueError(f"{FIELD_LABELS[field_name]} must be a string")

    value = value.strip()
    if not value:
        raise ValueError(REQUIRED_MESSAGES[field_name])

    max_length = MAX_LENGTHS[field_name]
    if len(value) > max_length:
        raise ValueError(f"{FIELD_LABELS[field_name]} cannot exceed {max_length} characters")
    return value


def parse_published_date(value: Any) -> datetime:
    """
    Coerce a published date to an aware UTC datetime and reject future dates.

    Accepts ISO-8601 date or datetime strings and date/datetime objects.
    Naive values are taken as UTC.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(REQUIRED_MESSAGES["published_date"])

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        except ValueError:
            raise ValueError("Published date must be a valid date")
    else:
        raise ValueError("Published date must be a valid date")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    else:
        # Offsets at the edge of the datetime range have no UTC equivalent
        try:
            parsed = parsed.astimezone(timezone.utc)
        except (ValueError, OverflowError):
            raise ValueError("Published date must be a valid date")

    if parsed > utc_now():
        raise ValueError("Published date cannot be in the future")
    return parsed


def validation_messages(exc: ValidationError) -> List[str]:
    """Flatten a pydantic ValidationError into one message per failing field."""
    messages = []
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "body"
        field_name = to_snake(field)
        if error["type"] == "missing":
            messages.append(REQUIRED_MESSAGES.get(field_name, f"{field} is required"))
        elif error["type"] == "value_error":
            messages.append(str(error["ctx"]["error"]))
        else:
            messages.append(f"Invalid {field}: {error['msg']}")
    return messages


class BookCreate(BaseModel):
    """Fields required to create a book."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    genre: str = Field(..., description="Book genre")
    published_date: datetime = Field(..., description="Publication date")

    @field_validator('title', 'author', 'genre', mode='before')
    @classmethod
    def validate_text(cls, v, info: ValidationInfo):
        """Trim and bound-check text fields."""
        return clean_text(info.field_name, v)

    @field_validator('published_date', mode='before')
    @classmethod
    def validate_published_date(cls, v):
        """Ensure the publication date is a real date no later than now."""
        return parse_published_date(v)


class BookUpdate(BookCreate):
    """Partial update; only the fields present in the payload are validated and written."""

    title: Optional[str] = Field(None, description="Book title")
    author: Optional[str] = Field(None, description="Book author")
    genre: Optional[str] = Field(None, description="Book genre")
    published_date: Optional[datetime] = Field(None, description="Publication date")


class Book(BaseModel):
    """A stored book record."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str = Field(..., description="Unique book identifier")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    genre: str = Field(..., description="Book genre")
    published_date: datetime = Field(..., description="Publication date")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")
    updated_at: Optional[datetime] = Field(None, description="Last update timestamp")

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Book":
        """Build a Book from a MongoDB document."""
        document = dict(document)
        document["id"] = str(document.pop("_id"))
        return cls.model_validate(document)

    def summary(self) -> Dict[str, str]:
        """Identifying fields reported after a delete."""
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "genre": self.genre,
        }
