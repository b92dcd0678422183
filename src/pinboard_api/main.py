"""Main entry point for the Pinboard MCP server."""

import logging
import sys
from typing import Any, Optional

from fastmcp import FastMCP  # type: ignore

from pinboard_api import tools
from pinboard_api.aio import AsyncPinboardClient
from pinboard_api.client import PinboardClient
from pinboard_api.config import get_settings
from pinboard_api.errors import PinboardError

# Initialize FastMCP server
mcp = FastMCP("Pinboard API")

# Global client - will be initialized in main()
client: AsyncPinboardClient


@mcp.tool
async def list_recent_bookmarks(
    count: int = 15,
    tags: Optional[list[str]] = None
) -> dict[str, Any]:
    """List the most recently saved bookmarks.

    Args:
        count: Maximum number of results to return (1-100, default 15)
        tags: Up to three tags to filter by, optional
    """
    params = tools.ListRecentBookmarksParams(count=count, tags=tags or [])
    result = await tools.list_recent_bookmarks(client, params)
    return result.model_dump(mode="json")


@mcp.tool
async def list_bookmarks_by_tags(
    tags: list[str],
    from_date: Optional[str] = None,
    to_date: Optional[str] = None,
    count: Optional[int] = None
) -> dict[str, Any]:
    """List bookmarks filtered by tags and optional date range.

    Args:
        tags: List of tags to filter by (1-3 tags)
        from_date: Start date in ISO format (YYYY-MM-DD), optional
        to_date: End date in ISO format (YYYY-MM-DD), optional
        count: Maximum number of results to return, optional
    """
    params = tools.ListBookmarksByTagsParams(
        tags=tags, from_date=from_date, to_date=to_date, count=count
    )
    result = await tools.list_bookmarks_by_tags(client, params)
    return result.model_dump(mode="json")


@mcp.tool
async def get_bookmarks_by_url(url: str) -> dict[str, Any]:
    """Get the bookmark saved for a URL.

    Args:
        url: The bookmarked URL
    """
    result = await tools.get_bookmarks_by_url(
        client, tools.GetBookmarksByUrlParams(url=url)
    )
    return result.model_dump(mode="json")


@mcp.tool
async def list_tags() -> list[dict[str, Any]]:
    """List all tags with their usage counts."""
    tags = await tools.list_tags(client)
    return [tag.model_dump() for tag in tags]


@mcp.tool
async def list_dates(tags: Optional[list[str]] = None) -> list[dict[str, Any]]:
    """List how many bookmarks were saved on each date.

    Args:
        tags: Up to three tags to filter by, optional
    """
    dates = await tools.list_dates(client, tools.ListDatesParams(tags=tags or []))
    return [date.model_dump() for date in dates]


@mcp.tool
async def suggest_tags(url: str) -> dict[str, Any]:
    """Suggest popular and recommended tags for a URL.

    Args:
        url: URL to suggest tags for
    """
    suggested = await tools.suggest_tags(client, tools.SuggestTagsParams(url=url))
    return suggested.model_dump()


@mcp.tool
async def list_notes() -> list[dict[str, Any]]:
    """List all notes without their text."""
    notes = await tools.list_notes(client)
    return [note.model_dump(mode="json") for note in notes]


@mcp.tool
async def get_note(note_id: str) -> Optional[dict[str, Any]]:
    """Get a single note including its text.

    Args:
        note_id: 20-character hex note id
    """
    note = await tools.get_note(client, tools.GetNoteParams(note_id=note_id))
    return note.model_dump(mode="json") if note else None


@mcp.tool
async def add_bookmark(
    url: str,
    title: str,
    description: str = "",
    tags: Optional[list[str]] = None,
    is_public: Optional[bool] = None,
    is_unread: Optional[bool] = None,
    replace: bool = True
) -> dict[str, Any]:
    """Add a bookmark, or update the one already saved for the URL.

    Args:
        url: The URL to bookmark
        title: The bookmark title
        description: Extended notes, optional
        tags: Tags to apply, optional
        is_public: Share publicly; account default when omitted
        is_unread: Mark to read later; account default when omitted
        replace: Overwrite an existing bookmark for the URL (default true)
    """
    params = tools.AddBookmarkParams(
        url=url,
        title=title,
        description=description,
        tags=tags or [],
        is_public=is_public,
        is_unread=is_unread,
        replace=replace,
    )
    status = await tools.add_bookmark(client, params)
    return status.model_dump()


def configure_logging(level: str) -> None:
    """Log to stderr, keeping httpx quiet since its request lines carry the token."""
    logging.basicConfig(
        stream=sys.stderr,
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def main() -> None:
    """Main entry point."""
    global client

    try:
        settings = get_settings()
        configure_logging(settings.log_level)

        # Initialize Pinboard client
        client = AsyncPinboardClient(PinboardClient.from_settings(settings))

        # Run the server
        mcp.run()
    except PinboardError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nServer stopped", file=sys.stderr)
    except Exception as e:
        print(f"Error starting server: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
