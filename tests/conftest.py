# tests/conftest.py
from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

import httpx
import pytest

from rss_timeline.config import Settings


def rss(title: str, items: Iterable[Tuple[str, Optional[str]]], *, thumbnails: bool = False) -> str:
    """
    Build an RSS 2.0 document. `items` are (title, pubDate) pairs; a None
    pubDate leaves the element out.
    """
    parts = []
    for i, (item_title, pub) in enumerate(items):
        pub_xml = f"<pubDate>{pub}</pubDate>" if pub is not None else ""
        thumb_xml = (
            f'<media:thumbnail url="https://img.example.com/{i}.jpg"/>' if thumbnails else ""
        )
        parts.append(
            f"<item><title>{item_title}</title>"
            f"<link>https://example.com/{i}</link>"
            f"<description>&lt;p&gt;Body {i}&lt;/p&gt;</description>"
            f"{pub_xml}{thumb_xml}</item>"
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/">'
        f"<channel><title>{title}</title><link>https://example.com/</link>"
        f"<description>test</description>{''.join(parts)}</channel></rss>"
    )


def mock_client(routes: Dict[str, object]) -> httpx.Client:
    """
    httpx client answering from `routes` (URL -> body str, status int, or
    exception instance). Unknown URLs get a 404.
    """
    def handler(request: httpx.Request) -> httpx.Response:
        answer = routes.get(str(request.url))
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, int):
            return httpx.Response(answer)
        if answer is None:
            return httpx.Response(404)
        return httpx.Response(200, content=str(answer).encode("utf-8"))

    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.fixture
def settings() -> Settings:
    return Settings(aggregate_timeout=5.0, max_workers=8, http_timeout=2.0)
