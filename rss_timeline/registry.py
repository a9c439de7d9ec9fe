from __future__ import annotations

from typing import Union
from urllib.parse import unquote, urlsplit

from .exceptions import InvalidSourceError, InvalidURLError
from .models import FeedType, Source
from .normalizer import fingerprint


def detect_favicon(authority: str) -> str:
    """Guess the favicon location of a host."""
    return "https://" + authority + "/favicon.ico"


def _authority(url: str) -> str:
    try:
        netloc = urlsplit("https://" + unquote(url)).netloc
    except ValueError as e:
        raise InvalidURLError(f"Cannot parse URL: {url!r} ({e})") from e
    if not netloc:
        raise InvalidURLError(f"URL has no host: {url!r}")
    return netloc


def generate_source(title: str, type: Union[FeedType, str], url: str) -> Source:
    """
    Build a Source record for an account, ready to be persisted.

    `url` is the base URI without scheme, as used by `fetcher.detect_feed`.
    """
    try:
        kind = FeedType(type)
    except ValueError:
        raise InvalidSourceError(f"Unknown feed type: {type!r}") from None
    return Source(
        id=fingerprint(url),
        title=title,
        feed=url,
        type=kind,
        icon=detect_favicon(_authority(url)),
    )
