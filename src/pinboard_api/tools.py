"""MCP tools for Pinboard bookmark operations."""

import logging
from typing import Optional

from pydantic import BaseModel, Field

from pinboard_api.aio import AsyncPinboardClient
from pinboard_api.client import RECENT_COUNT_MAX
from pinboard_api.errors import PinboardError
from pinboard_api.models import (
    Bookmark,
    BookmarkResult,
    Date,
    Note,
    Status,
    SuggestedTags,
    Tag,
)
from pinboard_api.params import NOTE_ID_PATTERN

logger = logging.getLogger(__name__)


class ListRecentBookmarksParams(BaseModel):
    """Parameters for listing recent bookmarks."""

    count: int = Field(
        default=15,
        ge=1,
        le=RECENT_COUNT_MAX,
        description="Maximum number of results to return",
    )
    tags: list[str] = Field(
        default_factory=list, max_length=3, description="Optional tags to filter by"
    )


class ListBookmarksByTagsParams(BaseModel):
    """Parameters for listing bookmarks by tags."""

    tags: list[str] = Field(
        description="List of tags to filter by (1-3 tags)", min_length=1, max_length=3
    )
    from_date: Optional[str] = Field(
        None, description="Start date in ISO format (YYYY-MM-DD)"
    )
    to_date: Optional[str] = Field(
        None, description="End date in ISO format (YYYY-MM-DD)"
    )
    count: Optional[int] = Field(
        default=None, ge=1, description="Maximum number of results to return"
    )


class GetBookmarksByUrlParams(BaseModel):
    """Parameters for looking up the bookmark of a URL."""

    url: str = Field(description="The bookmarked URL")


class ListDatesParams(BaseModel):
    """Parameters for listing bookmark counts per date."""

    tags: list[str] = Field(
        default_factory=list, max_length=3, description="Optional tags to filter by"
    )


class SuggestTagsParams(BaseModel):
    """Parameters for tag suggestions."""

    url: str = Field(description="URL to suggest tags for")


class GetNoteParams(BaseModel):
    """Parameters for fetching a single note."""

    note_id: str = Field(
        pattern=NOTE_ID_PATTERN.pattern, description="20-character hex note id"
    )


class AddBookmarkParams(BaseModel):
    """Parameters for adding a bookmark."""

    url: str = Field(description="The URL to bookmark")
    title: str = Field(min_length=1, description="The bookmark title")
    description: str = Field(default="", description="Extended notes")
    tags: list[str] = Field(default_factory=list, description="Tags to apply")
    is_public: Optional[bool] = Field(
        None, description="Share publicly; account default when omitted"
    )
    is_unread: Optional[bool] = Field(
        None, description="Mark to read later; account default when omitted"
    )
    replace: bool = Field(
        default=True, description="Overwrite an existing bookmark for the URL"
    )


async def list_recent_bookmarks(
    client: AsyncPinboardClient, params: ListRecentBookmarksParams
) -> BookmarkResult:
    """List the most recently saved bookmarks."""
    try:
        bookmarks = await client.get_recent(count=params.count, tags=params.tags or None)
    except PinboardError as e:
        logger.error(f"Error listing recent bookmarks: {e}")
        raise

    return BookmarkResult(
        bookmarks=bookmarks, total=len(bookmarks), tags=params.tags or None
    )


async def list_bookmarks_by_tags(
    client: AsyncPinboardClient, params: ListBookmarksByTagsParams
) -> BookmarkResult:
    """List bookmarks filtered by tags and optional date range."""
    try:
        bookmarks = await client.get_all(
            count=params.count,
            tags=params.tags,
            from_=params.from_date,
            to=params.to_date,
        )
    except PinboardError as e:
        logger.error(f"Error listing bookmarks by tags: {e}")
        raise

    return BookmarkResult(bookmarks=bookmarks, total=len(bookmarks), tags=params.tags)


async def get_bookmarks_by_url(
    client: AsyncPinboardClient, params: GetBookmarksByUrlParams
) -> BookmarkResult:
    """Look up the bookmark saved for a URL."""
    try:
        bookmarks = await client.get(url=params.url)
    except PinboardError as e:
        logger.error(f"Error getting bookmark for {params.url}: {e}")
        raise

    return BookmarkResult(bookmarks=bookmarks, total=len(bookmarks), url=params.url)


async def list_tags(client: AsyncPinboardClient) -> list[Tag]:
    """List all tags with their usage counts."""
    try:
        return await client.get_tags()
    except PinboardError as e:
        logger.error(f"Error listing tags: {e}")
        raise


async def list_dates(client: AsyncPinboardClient, params: ListDatesParams) -> list[Date]:
    """List the number of bookmarks saved per date."""
    try:
        return await client.get_dates(tags=params.tags or None)
    except PinboardError as e:
        logger.error(f"Error listing dates: {e}")
        raise


async def suggest_tags(
    client: AsyncPinboardClient, params: SuggestTagsParams
) -> SuggestedTags:
    """Suggest popular and recommended tags for a URL."""
    try:
        return await client.get_suggested_tags(params.url)
    except PinboardError as e:
        logger.error(f"Error suggesting tags for {params.url}: {e}")
        raise


async def list_notes(client: AsyncPinboardClient) -> list[Note]:
    """List all notes (without their text)."""
    try:
        return await client.get_notes()
    except PinboardError as e:
        logger.error(f"Error listing notes: {e}")
        raise


async def get_note(client: AsyncPinboardClient, params: GetNoteParams) -> Optional[Note]:
    """Fetch one note including its text."""
    try:
        return await client.get_note(params.note_id)
    except PinboardError as e:
        logger.error(f"Error getting note {params.note_id}: {e}")
        raise


async def add_bookmark(client: AsyncPinboardClient, params: AddBookmarkParams) -> Status:
    """Add a bookmark, or update the existing one for the same URL."""
    bookmark = Bookmark(
        url=params.url,
        title=params.title,
        description=params.description,
        tags=params.tags,
        is_public=params.is_public,
        is_unread=params.is_unread,
    )
    try:
        return await client.save(bookmark, replace=params.replace)
    except PinboardError as e:
        logger.error(f"Error adding bookmark {params.url}: {e}")
        raise
