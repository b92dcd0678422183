"""Pinboard API client: one method per remote endpoint."""

import logging
import threading
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional, Union

from pinboard_api.errors import InvalidArgument, InvalidResponse
from pinboard_api.formats import ResponseFormat, get_format
from pinboard_api.models import (
    Bookmark,
    Date,
    Note,
    Status,
    SuggestedTags,
    Tag,
    parse_remote_time,
)
from pinboard_api.params import (
    TagsArg,
    TimeArg,
    bookmark_params,
    coerce_count,
    normalize_tags,
    optional_params,
    to_remote_date,
    to_remote_datetime,
    validate_note_id,
)
from pinboard_api.transport import (
    API_BASE_URL,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_TIMEOUT,
    AuthMode,
    Transport,
    mask_token,
)

if TYPE_CHECKING:
    from pinboard_api.config import Settings

logger = logging.getLogger(__name__)

RECENT_COUNT_MAX = 100

BookmarkOrUrl = Union[Bookmark, str]


def _url_of(bookmark: BookmarkOrUrl) -> str:
    return bookmark.url if isinstance(bookmark, Bookmark) else str(bookmark)


class PinboardClient:
    """Synchronous Pinboard API client.

    Each method performs exactly one GET request. Calls on one instance are
    serialized by an internal lock, so an instance may be shared between
    threads; requests never overlap.
    """

    def __init__(
        self,
        username: str,
        secret: str,
        *,
        response_format: str = "json",
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        timeout: float = DEFAULT_TIMEOUT,
        base_url: str = API_BASE_URL,
    ):
        """Initialize the client.

        Args:
            username: Pinboard account name.
            secret: Account password, or an API token ``username:HEX``. The
                token shape selects query-parameter auth, anything else
                HTTP Basic auth.
            response_format: ``json`` or ``xml``.
            connect_timeout: Seconds allowed to establish the connection.
            timeout: Seconds allowed for any single network read or write;
                not a deadline for the whole request.
            base_url: API endpoint root.
        """
        if not username:
            raise InvalidArgument("Username is required")
        self.username = username
        self.format: ResponseFormat = get_format(response_format)
        self._transport = Transport(
            username,
            secret,
            base_url=base_url,
            connect_timeout=connect_timeout,
            timeout=timeout,
            default_params=self.format.default_params,
        )
        self._last_status: Optional[str] = None
        self._lock = threading.Lock()

    @classmethod
    def from_token(cls, token: str, **kwargs: Any) -> "PinboardClient":
        """Create a client from an API token of the form ``username:HEX``."""
        username, sep, _ = token.partition(":")
        if not sep or not username:
            raise InvalidArgument("API token must look like 'username:TOKEN'")
        return cls(username, token, **kwargs)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "PinboardClient":
        """Create a client from loaded settings."""
        username, secret = settings.credentials()
        client = cls(
            username,
            secret,
            response_format=settings.response_format,
            connect_timeout=settings.connect_timeout,
            timeout=settings.timeout,
            base_url=settings.base_url,
        )
        if settings.log_requests:
            client.enable_logging(
                lambda url: logger.info("Pinboard request: %s", mask_token(url))
            )
        return client

    @property
    def auth_mode(self) -> AuthMode:
        return self._transport.auth_mode

    @property
    def last_status(self) -> Optional[str]:
        """Raw result code of the most recent write call."""
        return self._last_status

    def enable_logging(self, func: Callable[[str], Any]) -> None:
        """Pass every request URL to ``func`` before it is sent."""
        self._transport.enable_logging(func)

    def _remote(self, method: str, params: Optional[dict[str, Any]] = None) -> Any:
        with self._lock:
            body = self._transport.get(method, params)
        return self.format.decode(body)

    def _status(self, method: str, params: dict[str, Any]) -> Status:
        with self._lock:
            body = self._transport.get(method, params)
            code = self.format.result(self.format.decode(body))
            self._last_status = code
        if code != "done":
            logger.info("%s did not succeed: %s", method, code)
        return Status.from_code(code)

    def _bookmarks(self, method: str, params: dict[str, Any]) -> list[Bookmark]:
        doc = self._remote(method, params)
        return Bookmark.from_posts(self.format.posts(doc), client=self)

    # Bookmarks

    def get_updated_time(self) -> datetime:
        """Time of the most recent change to the account's bookmarks.

        Cheap enough to poll before deciding whether ``get_all`` is needed.
        """
        doc = self._remote("posts/update")
        updated = parse_remote_time(self.format.update_time(doc))
        if updated is None:
            raise InvalidResponse("Response has no update time")
        return updated

    def get_recent(self, count: int = 15, tags: TagsArg = None) -> list[Bookmark]:
        """Most recent bookmarks, at most 100, optionally filtered by up to three tags."""
        count = coerce_count(count, "count")
        if count > RECENT_COUNT_MAX:
            raise InvalidArgument(f"Maximum permitted count is {RECENT_COUNT_MAX}")

        params: dict[str, Any] = {"count": count}
        if tags is not None:
            params["tag"] = normalize_tags(tags)
        return self._bookmarks("posts/recent", params)

    def get_all(
        self,
        count: Optional[int] = None,
        offset: Optional[int] = None,
        tags: TagsArg = None,
        from_: Optional[TimeArg] = None,
        to: Optional[TimeArg] = None,
    ) -> list[Bookmark]:
        """All bookmarks, optionally limited, offset, tag-filtered or date-bounded."""
        params: dict[str, Any] = {}
        if count is not None:
            count = coerce_count(count, "count")
            if count > 0:
                params["results"] = count
        if offset is not None:
            offset = coerce_count(offset, "offset")
            if offset > 0:
                params["start"] = offset
        if tags:
            params["tag"] = normalize_tags(tags)
        if from_ is not None:
            params["fromdt"] = to_remote_datetime(from_)
        if to is not None:
            params["todt"] = to_remote_datetime(to)
        return self._bookmarks("posts/all", params)

    def get(
        self,
        url: Optional[str] = None,
        tags: TagsArg = None,
        date: Optional[TimeArg] = None,
    ) -> list[Bookmark]:
        """Bookmarks for one URL, or one day's bookmarks (most recent day by default)."""
        params = optional_params(
            url=url,
            tag=normalize_tags(tags) if tags is not None else None,
            dt=to_remote_date(date) if date is not None else None,
        )
        return self._bookmarks("posts/get", params)

    def search_by_url(self, url: str) -> list[Bookmark]:
        return self.get(url=url)

    def search_by_tag(self, tags: TagsArg) -> list[Bookmark]:
        return self.get_all(tags=tags)

    def search_by_date(self, date: TimeArg) -> list[Bookmark]:
        return self.get(date=date)

    def search_by_interval(self, from_: TimeArg, to: TimeArg) -> list[Bookmark]:
        return self.get_all(from_=from_, to=to)

    def save(self, bookmark: Bookmark, replace: bool = True) -> Status:
        """Add or update a bookmark.

        The bookmark is validated before anything is sent. With
        ``replace=False`` the server refuses to overwrite an existing URL.
        """
        if not isinstance(bookmark, Bookmark):
            raise InvalidArgument("Argument is not a Bookmark")
        return self._status("posts/add", bookmark_params(bookmark, replace=replace))

    def delete(self, bookmark: BookmarkOrUrl) -> Status:
        """Delete a bookmark, given the bookmark or its URL."""
        return self._status("posts/delete", {"url": _url_of(bookmark)})

    def get_dates(self, tags: TagsArg = None) -> list[Date]:
        """Number of bookmarks per date, optionally filtered by tags."""
        params = {}
        if tags is not None:
            params["tag"] = normalize_tags(tags)
        doc = self._remote("posts/dates", params)
        return [
            Date(date=date, count=count) for date, count in self.format.date_counts(doc)
        ]

    def get_suggested_tags(self, bookmark: BookmarkOrUrl) -> SuggestedTags:
        """Popular and recommended tags for a URL."""
        doc = self._remote("posts/suggest", {"url": _url_of(bookmark)})
        return SuggestedTags(**self.format.suggestions(doc))

    # Tags

    def get_tags(self) -> list[Tag]:
        """All tags with their usage counts."""
        doc = self._remote("tags/get")
        return [Tag(name=name, count=count) for name, count in self.format.tag_counts(doc)]

    def rename_tag(self, old: Union[Tag, str], new: Union[Tag, str]) -> Status:
        return self._status("tags/rename", {"old": str(old), "new": str(new)})

    def delete_tag(self, tag: Union[Tag, str]) -> Status:
        return self._status("tags/delete", {"tag": str(tag)})

    # User

    def get_rss_token(self) -> Optional[str]:
        """The user's secret RSS key, or None if the response carries none."""
        return self.format.result(self._remote("user/secret")) or None

    def get_api_token(self) -> Optional[str]:
        """The user's API token (the part after ``username:``), or None."""
        return self.format.result(self._remote("user/api_token")) or None

    # Notes

    def get_notes(self) -> list[Note]:
        """All notes, without their text."""
        doc = self._remote("notes/list")
        return [Note.from_pinboard(note) for note in self.format.notes(doc) if note.get("id")]

    def get_note(self, note_id: str) -> Optional[Note]:
        """A single note including its text, or None when the response is empty."""
        validate_note_id(note_id)
        doc = self._remote(f"notes/{note_id}")
        notes = [note for note in self.format.notes(doc) if note.get("id")]
        return Note.from_pinboard(notes[0]) if notes else None

    # Export

    def dump(self) -> str:
        """All bookmarks as the raw, unparsed ``posts/all`` body."""
        with self._lock:
            return self._transport.get("posts/all")

    def close(self) -> None:
        """Release the HTTP connection."""
        self._transport.close()

    def __enter__(self) -> "PinboardClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
