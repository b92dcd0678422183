"""Response decoders for the two Pinboard response formats.

Both formats reduce a response document to the same plain records (dicts,
lists, ``(key, count)`` pairs) so the model layer maps them once.
"""

import json
import xml.etree.ElementTree as ET
from abc import ABC, abstractmethod
from typing import Any, Optional

from pinboard_api.errors import InvalidArgument, InvalidResponse

POST_FIELDS = (
    "href",
    "description",
    "extended",
    "tags",
    "time",
    "hash",
    "meta",
    "others",
    "shared",
    "toread",
)
NOTE_FIELDS = ("id", "title", "hash", "created_at", "updated_at", "length", "text")


def _to_count(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise InvalidResponse(f"Invalid count in response: {value!r}") from e


class ResponseFormat(ABC):
    """Decoding and record extraction for one response format."""

    name: str = ""

    @property
    def default_params(self) -> dict[str, str]:
        """Query parameters sent with every request in this format."""
        return {}

    @abstractmethod
    def decode(self, body: str) -> Any:
        """Parse a response body, raising InvalidResponse when malformed."""

    @abstractmethod
    def posts(self, doc: Any) -> list[dict[str, Any]]:
        """Bookmark records keyed by ``POST_FIELDS``."""

    @abstractmethod
    def tag_counts(self, doc: Any) -> list[tuple[str, Optional[int]]]:
        """``(tag, count)`` pairs from ``tags/get``."""

    @abstractmethod
    def date_counts(self, doc: Any) -> list[tuple[str, Optional[int]]]:
        """``(date, count)`` pairs from ``posts/dates``."""

    @abstractmethod
    def result(self, doc: Any) -> Optional[str]:
        """Result code of a write call, or the value of a single-result call."""

    @abstractmethod
    def update_time(self, doc: Any) -> str:
        """Timestamp string from ``posts/update``."""

    @abstractmethod
    def suggestions(self, doc: Any) -> dict[str, list[str]]:
        """``popular`` and ``recommended`` tag lists from ``posts/suggest``."""

    @abstractmethod
    def notes(self, doc: Any) -> list[dict[str, Any]]:
        """Note records from ``notes/list`` or a single ``notes/<id>``."""


class JsonFormat(ResponseFormat):
    """The ``format=json`` responses of the current API."""

    name = "json"

    @property
    def default_params(self) -> dict[str, str]:
        return {"format": "json"}

    def decode(self, body: str) -> Any:
        try:
            doc = json.loads(body)
        except ValueError as e:
            raise InvalidResponse(f"Malformed JSON response: {e}") from e
        if not isinstance(doc, (dict, list)):
            raise InvalidResponse("JSON response is neither an object nor an array")
        return doc

    def posts(self, doc: Any) -> list[dict[str, Any]]:
        # posts/all returns a bare array, posts/recent and posts/get wrap it
        if isinstance(doc, dict):
            doc = doc.get("posts") or []
        if not isinstance(doc, list):
            raise InvalidResponse("Expected a list of posts")
        return [
            {field: post.get(field) for field in POST_FIELDS}
            for post in doc
            if isinstance(post, dict)
        ]

    def _counts(self, mapping: Any) -> list[tuple[str, Optional[int]]]:
        if not mapping:
            return []
        if not isinstance(mapping, dict):
            raise InvalidResponse("Expected an object of counts")
        return [(str(key), _to_count(count)) for key, count in mapping.items()]

    def tag_counts(self, doc: Any) -> list[tuple[str, Optional[int]]]:
        return self._counts(doc)

    def date_counts(self, doc: Any) -> list[tuple[str, Optional[int]]]:
        if not isinstance(doc, dict):
            raise InvalidResponse("Expected an object with dates")
        return self._counts(doc.get("dates"))

    def result(self, doc: Any) -> Optional[str]:
        if not isinstance(doc, dict):
            return None
        value = doc.get("result_code", doc.get("result"))
        return None if value is None else str(value)

    def update_time(self, doc: Any) -> str:
        if not isinstance(doc, dict) or not doc.get("update_time"):
            raise InvalidResponse("Response has no update_time")
        return str(doc["update_time"])

    def suggestions(self, doc: Any) -> dict[str, list[str]]:
        # [{"popular": [...]}, {"recommended": [...]}]
        parts = doc if isinstance(doc, list) else [doc]
        ret: dict[str, list[str]] = {"popular": [], "recommended": []}
        for part in parts:
            if not isinstance(part, dict):
                continue
            for key in ret:
                ret[key].extend(str(tag) for tag in part.get(key) or [])
        return ret

    def notes(self, doc: Any) -> list[dict[str, Any]]:
        if isinstance(doc, dict):
            doc = doc["notes"] if "notes" in doc else [doc]
        if not isinstance(doc, list):
            raise InvalidResponse("Expected a list of notes")
        return [
            {field: note.get(field) for field in NOTE_FIELDS}
            for note in doc
            if isinstance(note, dict) and note
        ]


class XmlFormat(ResponseFormat):
    """The legacy XML responses, where records are element attributes."""

    name = "xml"

    def decode(self, body: str) -> ET.Element:
        try:
            return ET.fromstring(body)
        except ET.ParseError as e:
            raise InvalidResponse(f"Malformed XML response: {e}") from e

    def posts(self, doc: ET.Element) -> list[dict[str, Any]]:
        ret = []
        for entry in doc.iter("post"):
            post = {field: entry.get(field) for field in POST_FIELDS}
            post["tags"] = entry.get("tag")
            # Absent attributes mean public and already read
            if post["shared"] is None:
                post["shared"] = "yes"
            if post["toread"] is None:
                post["toread"] = "no"
            ret.append(post)
        return ret

    def _counts(self, doc: ET.Element, element: str) -> list[tuple[str, Optional[int]]]:
        # A missing count attribute is unknown, not an error
        return [
            (
                (entry.get(element) or "").strip(),
                None if entry.get("count") is None else _to_count(entry.get("count")),
            )
            for entry in doc.iter(element)
        ]

    def tag_counts(self, doc: ET.Element) -> list[tuple[str, Optional[int]]]:
        return self._counts(doc, "tag")

    def date_counts(self, doc: ET.Element) -> list[tuple[str, Optional[int]]]:
        return self._counts(doc, "date")

    def result(self, doc: ET.Element) -> Optional[str]:
        code = doc.get("code")
        if code is not None:
            return code
        return (doc.text or "").strip()

    def update_time(self, doc: ET.Element) -> str:
        value = doc.get("time")
        if not value:
            raise InvalidResponse("Response has no update time")
        return value

    def suggestions(self, doc: ET.Element) -> dict[str, list[str]]:
        return {
            key: [(entry.text or "").strip() for entry in doc.iter(key)]
            for key in ("popular", "recommended")
        }

    def notes(self, doc: ET.Element) -> list[dict[str, Any]]:
        ret = []
        for entry in doc.iter("note"):
            note: dict[str, Any] = {}
            for field in NOTE_FIELDS:
                child = entry.find(field)
                note[field] = child.text if child is not None else entry.get(field)
            ret.append(note)
        return ret


FORMATS: dict[str, type[ResponseFormat]] = {
    JsonFormat.name: JsonFormat,
    XmlFormat.name: XmlFormat,
}


def get_format(name: str) -> ResponseFormat:
    """Look up a response format by name (``json`` or ``xml``)."""
    try:
        return FORMATS[name.lower()]()
    except KeyError:
        raise InvalidArgument(
            f"Unknown response format {name!r}, expected one of {sorted(FORMATS)}"
        ) from None
