"""Tests for data models."""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
from pydantic import ValidationError

from pinboard_api.client import PinboardClient
from pinboard_api.errors import InvalidArgument, InvalidResponse
from pinboard_api.models import (
    Bookmark,
    BookmarkResult,
    Date,
    Note,
    Status,
    SuggestedTags,
    Tag,
)


class TestBookmark:
    """Test the Bookmark model."""

    def test_bookmark_creation(self):
        """Test creating a bookmark directly."""
        bookmark = Bookmark(
            url="https://example.com",
            title="Test Bookmark",
            tags=["test", "example"],
            description="Test notes",
        )

        assert bookmark.url == "https://example.com"
        assert bookmark.title == "Test Bookmark"
        assert bookmark.tags == ["test", "example"]
        assert bookmark.timestamp is None
        assert bookmark.is_public is None
        assert bookmark.is_unread is None
        assert bookmark.client is None

    def test_bookmark_from_pinboard(self, mock_pinboard_data):
        """Test creating a bookmark from a JSON post record."""
        bookmark = Bookmark.from_pinboard(mock_pinboard_data[0])

        assert bookmark.url == "https://example.com/python-testing"
        assert bookmark.title == "Python Testing Best Practices"
        assert bookmark.description.startswith("Comprehensive guide")
        assert bookmark.tags == ["python", "testing", "pytest"]
        assert bookmark.timestamp == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        assert bookmark.is_public is True
        assert bookmark.is_unread is False
        assert bookmark.hash == "0c1b6d2a3e4f5a6b7c8d9e0f1a2b3c4d"

    def test_bookmark_from_pinboard_empty_fields(self, mock_pinboard_data):
        """Empty server fields become None, missing flags read as false."""
        bookmark = Bookmark.from_pinboard(mock_pinboard_data[1])
        assert bookmark.hash is None
        assert bookmark.meta is None
        assert bookmark.is_public is False
        assert bookmark.is_unread is True

        bookmark = Bookmark.from_pinboard(mock_pinboard_data[2])
        assert bookmark.is_public is False
        assert bookmark.is_unread is False

    def test_bookmark_from_pinboard_empty_tags(self):
        """Test creating a bookmark with empty tags."""
        bookmark = Bookmark.from_pinboard(
            {"href": "https://example.com/test", "description": "Test", "tags": ""}
        )
        assert bookmark.tags == []
        assert bookmark.timestamp is None

    def test_bookmark_from_pinboard_bad_time(self):
        with pytest.raises(InvalidResponse):
            Bookmark.from_pinboard(
                {"href": "https://example.com", "description": "T", "time": "garbage"}
            )

    def test_bookmark_from_pinboard_numeric_time(self):
        """A non-string timestamp is a bad response, not a TypeError."""
        with pytest.raises(InvalidResponse):
            Bookmark.from_pinboard(
                {"href": "https://example.com", "description": "T", "time": 1705314600}
            )

    def test_from_posts_skips_missing_url(self, mock_pinboard_data):
        """Records without an href are dropped."""
        posts = mock_pinboard_data + [{"href": "", "description": "Broken"}, {}]

        bookmarks = Bookmark.from_posts(posts)

        assert [b.url for b in bookmarks] == [p["href"] for p in mock_pinboard_data]

    def test_save_uses_owning_client(self, mock_pinboard_data):
        """A fetched bookmark saves and deletes through the client that produced it."""
        owner = Mock(spec=PinboardClient)
        bookmark = Bookmark.from_pinboard(mock_pinboard_data[0], client=owner)

        bookmark.save()
        bookmark.delete()

        owner.save.assert_called_once_with(bookmark, replace=True)
        owner.delete.assert_called_once_with(bookmark)

    def test_save_explicit_client_wins(self, mock_pinboard_data):
        owner = Mock(spec=PinboardClient)
        other = Mock(spec=PinboardClient)
        bookmark = Bookmark.from_pinboard(mock_pinboard_data[0], client=owner)

        bookmark.save(other, replace=False)

        other.save.assert_called_once_with(bookmark, replace=False)
        owner.save.assert_not_called()

    def test_save_without_client(self):
        """A detached bookmark needs an explicit client."""
        bookmark = Bookmark(url="https://example.com", title="Example")

        with pytest.raises(InvalidArgument):
            bookmark.save()
        with pytest.raises(InvalidArgument):
            bookmark.delete()

    def test_client_not_serialized(self, mock_pinboard_data):
        bookmark = Bookmark.from_pinboard(mock_pinboard_data[0], client=Mock())

        assert "client" not in bookmark.model_dump()
        assert "_client" not in bookmark.model_dump()


class TestTagAndDate:
    """Test the Tag and Date models."""

    def test_tag_creation(self):
        tag = Tag(name="python", count=42)

        assert tag.name == "python"
        assert tag.count == 42
        assert str(tag) == "python"

    def test_date_creation(self):
        day = Date(date="2024-01-15", count=3)

        assert str(day) == "2024-01-15"
        assert day.count == 3


class TestNote:
    """Test the Note model."""

    def test_from_pinboard(self):
        note = Note.from_pinboard(
            {
                "id": "cf73fc4a7ac63a31c9d6",
                "title": "Groceries",
                "hash": "0c1b6d2a3e4f5a6b7c8d",
                "created_at": "2024-01-15 10:30:00",
                "updated_at": "2024-01-16 08:00:00",
                "length": "12",
                "text": None,
            }
        )

        assert note.id == "cf73fc4a7ac63a31c9d6"
        assert note.length == 12
        assert note.created_at == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        assert note.text is None

    def test_id_is_frozen(self):
        note = Note(id="cf73fc4a7ac63a31c9d6", title="Groceries")

        with pytest.raises(ValidationError):
            note.id = "00000000000000000000"


class TestStatus:
    """Test status decoding."""

    def test_done_is_success(self):
        status = Status.from_code("done")

        assert status.success is True
        assert bool(status) is True

    def test_other_codes_fail(self):
        status = Status.from_code("something went wrong")

        assert status.success is False
        assert not status
        assert status.code == "something went wrong"

    def test_missing_code(self):
        assert not Status.from_code(None)


class TestResultContainers:
    def test_suggested_tags_defaults(self):
        suggested = SuggestedTags()

        assert suggested.popular == []
        assert suggested.recommended == []

    def test_bookmark_result(self, sample_bookmarks):
        result = BookmarkResult(bookmarks=sample_bookmarks[:2], total=2, tags=["python"])

        assert len(result.bookmarks) == 2
        assert result.total == 2
        assert result.url is None
