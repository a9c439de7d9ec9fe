from __future__ import annotations

import io
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Optional, Union

import feedparser

from .exceptions import DateParseError, ParseError
from .models import Entry, FeedDocument, Media, Thumbnail


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return None


def _media(entry: Dict[str, Any]) -> Optional[Media]:
    # feedparser flattens <media:thumbnail url="..."/> into a list of attr dicts
    thumbs = entry.get("media_thumbnail")
    if not isinstance(thumbs, list) or not thumbs:
        return None
    first = thumbs[0]
    if not isinstance(first, dict):
        return Media(thumbnail=None)
    return Media(thumbnail=Thumbnail(url=_text(first.get("url"))))


def parse_entry(entry: Dict[str, Any]) -> Entry:
    """
    Map a raw feedparser entry to an Entry.

    Missing fields come back as None; nothing here raises on odd input.
    """
    return Entry(
        title=_text(entry.get("title")),
        description=entry.get("description") or entry.get("summary"),
        pub_date=_text(entry.get("published") or entry.get("updated")),
        link=_text(entry.get("link")),
        media=_media(entry),
    )


def parse_document(body: Union[bytes, str]) -> FeedDocument:
    """
    Parse an RSS 2.0 shaped document into a FeedDocument.

    Raises ParseError when feedparser flags the body as malformed and could not
    recover a single entry from it.
    """
    if isinstance(body, str):
        body = body.encode("utf-8")
    try:
        # a stream keeps feedparser from treating the body as a URL or path
        parsed = feedparser.parse(io.BytesIO(body))
    except Exception as e:  # pragma: no cover - surface as domain error
        raise ParseError(f"Failed to parse feed ({e})") from e

    entries = getattr(parsed, "entries", None) or []
    if getattr(parsed, "bozo", 0) and not entries:
        exc = getattr(parsed, "bozo_exception", None)
        msg = "Invalid RSS feed"
        if exc:
            msg += f" ({exc})"
        raise ParseError(msg)

    channel = getattr(parsed, "feed", None) or {}
    return FeedDocument(
        title=_text(channel.get("title")),
        items=tuple(parse_entry(e) for e in entries),
    )


def parse_rfc822(value: Optional[str]) -> datetime:
    """Parse an RFC-822 date into a timezone-aware UTC datetime."""
    if not value:
        raise DateParseError("missing publication date")
    try:
        dt = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError) as e:
        raise DateParseError(f"invalid RFC-822 date: {value!r}") from e
    if dt is None:
        raise DateParseError(f"invalid RFC-822 date: {value!r}")
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
