"""Data models for the Pinboard API client."""

from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Optional

from dateutil.parser import parse as parse_date
from pydantic import BaseModel, Field, PrivateAttr

from pinboard_api.errors import InvalidArgument, InvalidResponse

if TYPE_CHECKING:
    from pinboard_api.client import PinboardClient


def parse_remote_time(value: Any) -> Optional[datetime]:
    """Parse an API timestamp; values without an offset are UTC."""
    if not value:
        return None
    try:
        parsed = parse_date(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidResponse(f"Invalid timestamp in response: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidResponse(f"Invalid number in response: {value!r}") from e


class Bookmark(BaseModel):
    """A Pinboard bookmark.

    ``title`` and ``description`` map to Pinboard's ``description`` and
    ``extended``. ``is_public``/``is_unread`` left as None defer to the
    account defaults on save. ``hash``, ``meta`` and ``others`` are filled
    by the server and never sent back.
    """

    url: str = Field(description="The bookmark URL")
    title: str = Field(description="The bookmark title")
    description: str = Field(default="", description="Free-form extended notes")
    timestamp: Optional[datetime] = Field(
        default=None, description="When the bookmark was saved"
    )
    tags: list[str] = Field(default_factory=list, description="List of tags")
    is_public: Optional[bool] = Field(default=None, description="Shared publicly")
    is_unread: Optional[bool] = Field(default=None, description="Marked to read later")

    hash: Optional[str] = Field(default=None, description="Server hash of the URL")
    meta: Optional[str] = Field(
        default=None, description="Server hash of the bookmark's metadata"
    )
    others: Optional[int] = Field(
        default=None, description="Number of other users who saved the URL"
    )

    _client: Any = PrivateAttr(default=None)

    @classmethod
    def from_pinboard(
        cls, post: dict[str, Any], client: Optional["PinboardClient"] = None
    ) -> "Bookmark":
        """Create a Bookmark from a decoded post record."""
        bookmark = cls(
            url=post["href"],
            title=post.get("description") or "",
            description=post.get("extended") or "",
            timestamp=parse_remote_time(post.get("time")),
            tags=(post.get("tags") or "").split(),
            is_public=post.get("shared") == "yes",
            is_unread=post.get("toread") == "yes",
            hash=post.get("hash") or None,
            meta=post.get("meta") or None,
            others=_optional_int(post.get("others")),
        )
        bookmark._client = client
        return bookmark

    @classmethod
    def from_posts(
        cls, posts: list[dict[str, Any]], client: Optional["PinboardClient"] = None
    ) -> list["Bookmark"]:
        """Map post records, skipping entries without a URL."""
        return [cls.from_pinboard(post, client) for post in posts if post.get("href")]

    @property
    def client(self) -> Optional["PinboardClient"]:
        """The client this bookmark was fetched through, if any."""
        return self._client

    def _resolve_client(self, client: Optional["PinboardClient"]) -> "PinboardClient":
        if client is not None:
            return client
        if self._client is not None:
            return self._client
        raise InvalidArgument(
            "No client given and the bookmark was not fetched through one"
        )

    def save(
        self, client: Optional["PinboardClient"] = None, replace: bool = True
    ) -> "Status":
        """Save through ``client``, or the client that produced this bookmark."""
        return self._resolve_client(client).save(self, replace=replace)

    def delete(self, client: Optional["PinboardClient"] = None) -> "Status":
        """Delete through ``client``, or the client that produced this bookmark."""
        return self._resolve_client(client).delete(self)


class Tag(BaseModel):
    """A tag with its usage count."""

    name: str = Field(description="The tag name")
    count: Optional[int] = Field(
        default=None, description="Number of bookmarks with this tag"
    )

    def __str__(self) -> str:
        return self.name


class Date(BaseModel):
    """A calendar date with the number of bookmarks saved on it."""

    date: str = Field(description="The date, YYYY-MM-DD")
    count: Optional[int] = Field(default=None, description="Bookmarks on that date")

    def __str__(self) -> str:
        return self.date


class Note(BaseModel):
    """A Pinboard note. ``text`` is only present when fetched individually."""

    id: str = Field(frozen=True, description="20-character hex note id")
    title: str = Field(default="", description="The note title")
    hash: Optional[str] = Field(default=None, description="Hash of the note content")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    length: Optional[int] = Field(default=None, description="Length of the text")
    text: Optional[str] = Field(default=None, description="Full note body")

    @classmethod
    def from_pinboard(cls, note: dict[str, Any]) -> "Note":
        """Create a Note from a decoded note record."""
        return cls(
            id=note["id"],
            title=note.get("title") or "",
            hash=note.get("hash") or None,
            created_at=parse_remote_time(note.get("created_at")),
            updated_at=parse_remote_time(note.get("updated_at")),
            length=_optional_int(note.get("length")),
            text=note.get("text"),
        )


class Status(BaseModel):
    """Outcome of a write call. Only the result code ``done`` is success."""

    code: Optional[str] = Field(default=None, description="Raw server result code")
    success: bool = Field(description="Whether the call succeeded")

    @classmethod
    def from_code(cls, code: Optional[str]) -> "Status":
        return cls(code=code, success=code == "done")

    def __bool__(self) -> bool:
        return self.success


class SuggestedTags(BaseModel):
    """Tag suggestions for a URL."""

    popular: list[str] = Field(default_factory=list)
    recommended: list[str] = Field(default_factory=list)


class BookmarkResult(BaseModel):
    """Bookmark listing container returned by the MCP tools."""

    bookmarks: list[Bookmark] = Field(description="List of matching bookmarks")
    total: int = Field(description="Total number of results")
    tags: Optional[list[str]] = Field(None, description="Tags used for filtering")
    url: Optional[str] = Field(None, description="URL used for filtering")
