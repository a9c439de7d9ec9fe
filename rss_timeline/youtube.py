"""
YouTube channel resolution.

Feeds are only published for canonical `/channel/<id>` URIs, so legacy
`/user/<name>` and custom `/c/<slug>` URIs are looked up through the YouTube
Data API first. The API key is read from the `YT_KEY` environment variable.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from .config import load_settings
from .exceptions import ChannelResolveError, ConfigError, FetchError, InvalidURLError


log = logging.getLogger(__name__)

SEARCH_API = "https://youtube.googleapis.com/youtube/v3/search"
CHANNELS_API = "https://www.googleapis.com/youtube/v3/channels"


def _key(api_key: Optional[str]) -> str:
    key = api_key or load_settings().yt_key
    if not key:
        raise ConfigError("YT_KEY not set.")
    return key


def parse_json(url: str, params: Dict[str, Any], *, client: Optional[httpx.Client] = None) -> Dict[str, Any]:
    try:
        if client is not None:
            resp = client.get(url, params=params)
        else:
            resp = httpx.get(url, params=params, timeout=10.0)
        resp.raise_for_status()
        data = resp.json()
    except httpx.HTTPError as e:
        raise FetchError(f"YouTube API request failed ({e})") from e
    except ValueError as e:
        raise FetchError(f"YouTube API returned invalid JSON ({e})") from e
    if not isinstance(data, dict):
        raise FetchError("YouTube API returned an unexpected document")
    return data


def _first_item(data: Dict[str, Any], what: str) -> Dict[str, Any]:
    items = data.get("items") or []
    if not items or not isinstance(items[0], dict):
        raise ChannelResolveError(f"No YouTube channel found for {what}")
    return items[0]


def get_from_custom(slug: str, *, api_key: Optional[str] = None, client: Optional[httpx.Client] = None) -> str:
    data = parse_json(
        SEARCH_API,
        {
            "q": slug,
            "part": "id",
            "type": "channel",
            "fields": "items(id(kind,channelId))",
            "maxResults": 1,
            "key": _key(api_key),
        },
        client=client,
    )
    channel = (_first_item(data, slug).get("id") or {}).get("channelId")
    if not channel:
        raise ChannelResolveError(f"No YouTube channel found for {slug}")
    return channel


def get_from_username(username: str, *, api_key: Optional[str] = None, client: Optional[httpx.Client] = None) -> str:
    data = parse_json(
        CHANNELS_API,
        {"forUsername": username, "part": "id", "key": _key(api_key)},
        client=client,
    )
    channel = _first_item(data, username).get("id")
    if not channel:
        raise ChannelResolveError(f"No YouTube channel found for {username}")
    return channel


def to_channel_link(url: str, *, api_key: Optional[str] = None, client: Optional[httpx.Client] = None) -> str:
    """
    Convert a legacy or custom channel URI to `www.youtube.com/channel/<id>`.

    >>> to_channel_link("www.youtube.com/channel/UCx4li1iMygs5KtqgcU5KGRw")
    'www.youtube.com/channel/UCx4li1iMygs5KtqgcU5KGRw'
    """
    parts = [p for p in url.split("/") if p]
    if len(parts) < 3:
        raise InvalidURLError(f"Not a YouTube channel URL: {url}")
    kind, name = parts[-2], parts[-1]

    if kind == "c":
        channel = get_from_custom(name, api_key=api_key, client=client)
    elif kind == "user":
        channel = get_from_username(name, api_key=api_key, client=client)
    else:
        channel = name
    log.debug("Resolved %s to channel %s", url, channel)
    return f"www.youtube.com/channel/{channel}"
