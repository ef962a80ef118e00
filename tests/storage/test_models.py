"""
Unit tests for the book models.
Tests field validation, trimming and error messages.
"""

from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from storage.models import Book, BookCreate, BookUpdate, validation_messages


def valid_fields(**overrides):
    fields = {
        "title": "Dune",
        "author": "Herbert",
        "genre": "SciFi",
        "publishedDate": "1965-01-01",
    }
    fields.update(overrides)
    return fields


def messages_for(model, fields):
    with pytest.raises(ValidationError) as exc_info:
        model.model_validate(fields)
    return validation_messages(exc_info.value)


class TestBookCreate:
    """Test cases for BookCreate model."""

    def test_valid_book(self):
        """Test creating valid book data."""
        book = BookCreate.model_validate(valid_fields())

        assert book.title == "Dune"
        assert book.published_date == datetime(1965, 1, 1, tzinfo=timezone.utc)

    def test_fields_are_trimmed(self):
        """Test surrounding whitespace is removed."""
        book = BookCreate.model_validate(valid_fields(title="  Dune  ", author="\tHerbert\n", genre=" SciFi"))

        assert book.title == "Dune"
        assert book.author == "Herbert"
        assert book.genre == "SciFi"

    def test_dump_uses_stored_names(self):
        """Test dumped keys match the document keys."""
        dumped = BookCreate.model_validate(valid_fields()).model_dump(by_alias=True)

        assert set(dumped) == {"title", "author", "genre", "publishedDate"}

    def test_missing_fields(self):
        """Test every missing field is reported."""
        messages = messages_for(BookCreate, {})

        assert messages == [
            "Title is required",
            "Author is required",
            "Genre is required",
            "Published date is required",
        ]

    def test_blank_text_is_required(self):
        """Test whitespace-only text counts as missing."""
        assert messages_for(BookCreate, valid_fields(title="   ")) == ["Title is required"]

    @pytest.mark.parametrize("field,max_length,message", [
        ("title", 200, "Title cannot exceed 200 characters"),
        ("author", 100, "Author name cannot exceed 100 characters"),
        ("genre", 50, "Genre cannot exceed 50 characters"),
    ])
    def test_length_bounds(self, field, max_length, message):
        """Test the upper length bound of each text field."""
        BookCreate.model_validate(valid_fields(**{field: "x" * max_length}))

        assert messages_for(BookCreate, valid_fields(**{field: "x" * (max_length + 1)})) == [message]

    def test_length_is_checked_after_trimming(self):
        """Test padding does not count towards the length bound."""
        book = BookCreate.model_validate(valid_fields(genre="  " + "x" * 50 + "  "))

        assert len(book.genre) == 50

    def test_number_is_coerced_to_text(self):
        """Test numeric text fields are stored as strings."""
        assert BookCreate.model_validate(valid_fields(title=1984)).title == "1984"

    def test_non_text_rejected(self):
        """Test structured values are rejected for text fields."""
        assert messages_for(BookCreate, valid_fields(author=["a", "b"])) == ["Author name must be a string"]

    def test_future_date_rejected(self):
        """Test a publication date after today is rejected."""
        tomorrow = (datetime.now(timezone.utc) + timedelta(days=1)).date().isoformat()

        assert messages_for(BookCreate, valid_fields(publishedDate=tomorrow)) == [
            "Published date cannot be in the future"
        ]

    def test_invalid_date_rejected(self):
        """Test an unparseable date is rejected."""
        assert messages_for(BookCreate, valid_fields(publishedDate="not a date")) == [
            "Published date must be a valid date"
        ]

    @pytest.mark.parametrize("value", ["0001-01-01T00:00:00+05:00", "9999-12-31T23:00:00-05:00"])
    def test_offset_outside_datetime_range(self, value):
        """Test an offset that cannot be expressed in UTC is rejected, not raised."""
        assert messages_for(BookCreate, valid_fields(publishedDate=value)) == [
            "Published date must be a valid date"
        ]
        assert messages_for(BookUpdate, {"publishedDate": value}) == [
            "Published date must be a valid date"
        ]

    def test_date_formats(self):
        """Test accepted date representations."""
        expected = datetime(1965, 1, 1, tzinfo=timezone.utc)

        assert BookCreate.model_validate(valid_fields(publishedDate=date(1965, 1, 1))).published_date == expected
        assert BookCreate.model_validate(
            valid_fields(publishedDate="1965-01-01T00:00:00Z")
        ).published_date == expected
        assert BookCreate.model_validate(
            valid_fields(publishedDate="1965-01-01T02:00:00+02:00")
        ).published_date == expected


class TestBookUpdate:
    """Test cases for BookUpdate model."""

    def test_only_supplied_fields_are_dumped(self):
        """Test a partial update keeps just the given fields."""
        update = BookUpdate.model_validate({"title": "  Children of Dune "})

        assert update.model_dump(by_alias=True, exclude_unset=True) == {"title": "Children of Dune"}

    def test_unknown_fields_ignored(self):
        """Test identifiers and unknown keys are never written."""
        update = BookUpdate.model_validate({"_id": "x", "id": "y", "rating": 5, "genre": "Epic"})

        assert update.model_dump(by_alias=True, exclude_unset=True) == {"genre": "Epic"}

    def test_explicit_null_is_required(self):
        """Test clearing a required field is rejected."""
        assert messages_for(BookUpdate, {"author": None}) == ["Author is required"]

    def test_future_date_rejected(self):
        """Test the date rule also applies to updates."""
        next_year = datetime.now(timezone.utc) + timedelta(days=365)

        assert messages_for(BookUpdate, {"publishedDate": next_year.isoformat()}) == [
            "Published date cannot be in the future"
        ]


class TestBook:
    """Test cases for Book model."""

    def test_from_document(self, sample_book_document, book_id):
        """Test conversion from a stored document."""
        book = Book.from_document(sample_book_document)

        assert book.id == book_id
        assert book.title == "Dune"
        assert book.created_at == sample_book_document["createdAt"]
        assert "_id" in sample_book_document

    def test_json_serialization(self, sample_book, book_id):
        """Test the wire representation uses camelCase keys."""
        data = sample_book.model_dump(by_alias=True, mode="json")

        assert data["id"] == book_id
        assert data["publishedDate"].startswith("1965-01-01")
        assert set(data) == {"id", "title", "author", "genre", "publishedDate", "createdAt", "updatedAt"}

    def test_summary(self, sample_book, book_id):
        """Test the delete summary fields."""
        assert sample_book.summary() == {
            "id": book_id,
            "title": "Dune",
            "author": "Herbert",
            "genre": "SciFi",
        }
