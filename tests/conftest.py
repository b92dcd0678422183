"""Pytest configuration and fixtures for the Pinboard API client tests."""

from unittest.mock import AsyncMock, Mock

import pytest
import respx

from pinboard_api.aio import AsyncPinboardClient
from pinboard_api.client import PinboardClient
from pinboard_api.models import Bookmark, Tag


@pytest.fixture
def mock_pinboard_data() -> list[dict]:
    """Sample posts/all JSON response data."""
    return [
        {
            "href": "https://example.com/python-testing",
            "description": "Python Testing Best Practices",
            "extended": "Comprehensive guide to testing in Python with pytest",
            "meta": "6b2d9f4c1e0a7d3b8c5f2e1a9d4b7c6e",
            "hash": "0c1b6d2a3e4f5a6b7c8d9e0f1a2b3c4d",
            "time": "2024-01-15T10:30:00Z",
            "shared": "yes",
            "toread": "no",
            "tags": "python testing pytest",
        },
        {
            "href": "https://example.com/fastapi-tutorial",
            "description": "FastAPI Tutorial",
            "extended": "Learn how to build APIs with FastAPI",
            "meta": "",
            "hash": "",
            "time": "2024-01-10T15:45:00Z",
            "shared": "no",
            "toread": "yes",
            "tags": "python fastapi web",
        },
        {
            "href": "https://example.com/async-programming",
            "description": "Async Programming in Python",
            "extended": "",
            "time": "2024-01-05T09:20:00Z",
            "tags": "python async asyncio",
        },
    ]


@pytest.fixture
def mock_tags_data() -> dict:
    """Sample tags/get JSON response data."""
    return {
        "python": 3,
        "testing": 1,
        "pytest": 1,
        "fastapi": "1",
        "web": 1,
        "async": 1,
        "asyncio": 1,
    }


@pytest.fixture
def posts_xml() -> str:
    """Sample posts/get XML response."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<posts dt="2024-01-15" user="testuser">\n'
        '  <post href="https://example.com/python-testing"'
        ' description="Python Testing Best Practices"'
        ' extended="Comprehensive guide" tag="python testing"'
        ' time="2024-01-15T10:30:00Z" hash="0c1b6d2a" meta="6b2d9f4c"'
        ' others="12" toread="yes"/>\n'
        '  <post href="https://example.com/private" description="Private"'
        ' tag="" time="2024-01-14T08:00:00Z" shared="no"/>\n'
        '  <post description="No URL" time="2024-01-13T08:00:00Z"/>\n'
        "</posts>"
    )


@pytest.fixture
def sample_bookmarks(mock_pinboard_data) -> list[Bookmark]:
    """Create sample Bookmark objects from mock data."""
    return [Bookmark.from_pinboard(post) for post in mock_pinboard_data]


@pytest.fixture
def sample_tags(mock_tags_data) -> list[Tag]:
    """Create sample Tag objects from mock data."""
    return [Tag(name=tag, count=int(count)) for tag, count in mock_tags_data.items()]


@pytest.fixture
def valid_token() -> str:
    """Valid Pinboard API token for testing."""
    return "testuser:1234567890ABCDEF1234"


@pytest.fixture
def client(valid_token):
    """Token-mode client using JSON responses."""
    pinboard = PinboardClient.from_token(valid_token)
    yield pinboard
    pinboard.close()


@pytest.fixture
def xml_client():
    """Basic-auth client using XML responses."""
    pinboard = PinboardClient("testuser", "hunter2", response_format="xml")
    yield pinboard
    pinboard.close()


@pytest.fixture
def mock_api():
    """Route all httpx traffic to respx; unmatched requests fail the test."""
    with respx.mock(assert_all_called=False) as respx_mock:
        yield respx_mock


@pytest.fixture
def mock_client(sample_bookmarks, sample_tags):
    """Create a mocked AsyncPinboardClient for testing."""
    async_client = Mock(spec=AsyncPinboardClient)

    # Mock async methods
    async_client.get_recent = AsyncMock(return_value=sample_bookmarks[:1])
    async_client.get_all = AsyncMock(return_value=sample_bookmarks[:2])
    async_client.get = AsyncMock(return_value=sample_bookmarks[:1])
    async_client.get_tags = AsyncMock(return_value=sample_tags)
    async_client.get_dates = AsyncMock(return_value=[])
    async_client.get_suggested_tags = AsyncMock()
    async_client.get_notes = AsyncMock(return_value=[])
    async_client.get_note = AsyncMock(return_value=None)
    async_client.save = AsyncMock()
    async_client.close = AsyncMock()

    return async_client


@pytest.fixture
def api_token(monkeypatch, valid_token):
    """Set PINBOARD_TOKEN environment variable."""
    monkeypatch.setenv("PINBOARD_TOKEN", valid_token)
    return valid_token
