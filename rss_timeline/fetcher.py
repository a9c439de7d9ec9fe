from __future__ import annotations

import logging
from typing import Optional, Union
from urllib.parse import quote

import httpx

from .config import ATOM2RSS_PROXY
from .exceptions import FetchError, InvalidURLError
from .models import FeedDocument, FeedType
from .parser import parse_document


log = logging.getLogger(__name__)

YOUTUBE_FEED = "https://www.youtube.com/feeds/videos.xml?channel_id="

# characters URI-encoding leaves alone: reserved plus unreserved
_URI_SAFE = ":/?#[]@!$&'()*+,;=~-._"


def atom_to_rss(url: str) -> str:
    """Route an Atom feed through the Atom-to-RSS conversion proxy."""
    return ATOM2RSS_PROXY + quote(url, safe=_URI_SAFE)


def _channel_id(url: str) -> str:
    parts = [p for p in url.split("/") if p]
    try:
        idx = parts.index("channel")
        channel = parts[idx + 1]
    except (ValueError, IndexError):
        raise InvalidURLError(f"Not a YouTube channel URL: {url}") from None
    return channel.split("?", 1)[0]


def detect_feed(type: Union[FeedType, str], url: str) -> str:
    """
    Detect the XML feed location of a base URI (given without scheme).

    Atom and YouTube feeds are rewritten through `atom_to_rss`; unknown types
    are treated as direct links.
    """
    kind = getattr(type, "value", type)
    if kind == FeedType.BLOGGER.value:
        return "https://" + url + "/feeds/posts/default?alt=rss&max-results=5"
    if kind == FeedType.WORDPRESS.value:
        return "https://" + url + "/feed/"
    if kind == FeedType.YOUTUBE.value:
        return atom_to_rss(YOUTUBE_FEED + _channel_id(url))
    if kind == FeedType.ATOM.value:
        return atom_to_rss("https://" + url)
    return "https://" + url


def fetch_document(url: str, *, client: Optional[httpx.Client] = None, timeout: float = 10.0) -> bytes:
    """
    Perform a single GET against `url` and return the response body.

    Raises FetchError on transport errors and non-2xx responses. No retries.
    """
    try:
        if client is not None:
            resp = client.get(url, timeout=timeout)
        else:
            resp = httpx.get(url, timeout=timeout, follow_redirects=True)
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise FetchError(f"Failed to fetch {url}: HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise FetchError(f"Failed to fetch {url} ({e})") from e
    return resp.content


def fetch_feed(
    url: str,
    type: Union[FeedType, str],
    *,
    client: Optional[httpx.Client] = None,
    timeout: float = 10.0,
) -> FeedDocument:
    """
    Resolve the feed location of a source, fetch it and parse it.

    Raises FetchError or ParseError. Callers own any caching.
    """
    location = detect_feed(type, url)
    log.debug("Fetching %s", location)
    body = fetch_document(location, client=client, timeout=timeout)
    return parse_document(body)
