"""Conversion of call arguments into Pinboard API query parameters."""

import re
from collections.abc import Iterable
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Any, Optional, Union

from dateutil.parser import parse as parse_date

from pinboard_api.errors import InvalidArgument

if TYPE_CHECKING:
    from pinboard_api.models import Bookmark

REMOTE_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
REMOTE_DATE_FORMAT = "%Y-%m-%d"
ALLOWED_URL_SCHEMES = re.compile(r"^(?:https?|javascript|mailto|ftp|file):", re.IGNORECASE)
NOTE_ID_PATTERN = re.compile(r"^[0-9a-f]{20}$")

_EPOCH_PATTERN = re.compile(r"^-?\d+$")
_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

TagsArg = Union[str, Iterable[Any], None]
TimeArg = Union[int, float, str, date, datetime]


def normalize_tags(tags: TagsArg) -> str:
    """Turn a tag list or a whitespace-separated string into Pinboard's tag string.

    Each tag is trimmed, empty tokens are dropped and the rest are joined
    with single spaces, so normalizing twice gives the same result.
    """
    if tags is None:
        return ""
    if isinstance(tags, str):
        tokens = tags.split()
    else:
        tokens = []
        for tag in tags:
            tokens.extend(str(tag).split())
    return " ".join(tokens)


def _to_utc(value: TimeArg) -> datetime:
    """Resolve an epoch, datetime or free-form date string to an aware UTC datetime."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str, date)):
        raise InvalidArgument(f"Invalid date: {value!r}")

    try:
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, date):
            parsed = datetime(value.year, value.month, value.day)
        elif isinstance(value, (int, float)):
            return datetime.fromtimestamp(value, tz=timezone.utc)
        elif _EPOCH_PATTERN.match(value.strip()):
            return datetime.fromtimestamp(int(value.strip()), tz=timezone.utc)
        else:
            parsed = parse_date(value)
    except (ValueError, OverflowError, OSError) as e:
        raise InvalidArgument(f"Invalid date: {value!r}") from e

    # Naive values are taken as UTC
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def to_remote_datetime(value: TimeArg) -> str:
    """Format a point in time the way the API expects (UTC, ``Z`` suffix)."""
    return _to_utc(value).strftime(REMOTE_DATETIME_FORMAT)


def to_remote_date(value: TimeArg) -> str:
    """Format a calendar date for the ``dt`` argument of ``posts/get``."""
    if isinstance(value, str) and _DATE_PATTERN.match(value.strip()):
        return value.strip()
    if isinstance(value, date) and not isinstance(value, datetime):
        return value.strftime(REMOTE_DATE_FORMAT)
    return _to_utc(value).strftime(REMOTE_DATE_FORMAT)


def coerce_count(value: Any, name: str) -> int:
    """Coerce a count/offset argument to int."""
    if isinstance(value, bool):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidArgument(f"{name} must be an integer, got {value!r}") from e


def validate_note_id(note_id: str) -> str:
    """Check that a note id has the 20-character lowercase hex shape."""
    if not isinstance(note_id, str) or not NOTE_ID_PATTERN.match(note_id):
        raise InvalidArgument(f"Invalid note id: {note_id!r}")
    return note_id


def validate_bookmark(bookmark: "Bookmark") -> None:
    """Fail fast on a bookmark the server would reject."""
    if not bookmark.url:
        raise InvalidArgument("URL is required")
    if not bookmark.title:
        raise InvalidArgument("Title is required")
    if not ALLOWED_URL_SCHEMES.match(bookmark.url):
        raise InvalidArgument(f"Invalid URL: {bookmark.url}")


def _yes_no(flag: bool) -> str:
    return "yes" if flag else "no"


def bookmark_params(bookmark: "Bookmark", replace: bool = True) -> dict[str, str]:
    """Build the ``posts/add`` parameters for a bookmark.

    Unset ``is_public``/``is_unread`` are left out so the account defaults
    apply. Server-only fields (hash, meta, others) are never sent.
    """
    validate_bookmark(bookmark)

    params = {
        "url": bookmark.url,
        "description": bookmark.title,
        "extended": bookmark.description or "",
        "tags": normalize_tags(bookmark.tags),
        "replace": _yes_no(replace),
    }
    if bookmark.timestamp is not None:
        params["dt"] = to_remote_datetime(bookmark.timestamp)
    if bookmark.is_public is not None:
        params["shared"] = _yes_no(bookmark.is_public)
    if bookmark.is_unread is not None:
        params["toread"] = _yes_no(bookmark.is_unread)
    return params


def optional_params(**kwargs: Optional[Any]) -> dict[str, Any]:
    """Drop arguments left as None."""
    return {key: value for key, value in kwargs.items() if value is not None}
