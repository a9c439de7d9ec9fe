"""
Publish a user's native posts as an RSS 2.0 feed.

Post bodies are stored as markup source; turning them into HTML is left to
a `render` callable (markdown, or anything else). By default bodies are
published as stored.
"""
from __future__ import annotations

import xml.etree.ElementTree as ET
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Callable, List, Optional

from .config import Settings, load_settings
from .exceptions import ConfigError
from .models import Account
from .storage import Storage


Render = Callable[[str], str]


def _as_is(body: str) -> str:
    return body


def to_rfc822(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return format_datetime(dt.astimezone(timezone.utc), usegmt=True)


def display_name(user: Account) -> str:
    return user.display_name or user.username


def _text(parent: ET.Element, tag: str, value: Optional[str]) -> ET.Element:
    el = ET.SubElement(parent, tag)
    el.text = value or ""
    return el


def generate_channel(user: Account, *, base_url: str, updated: Optional[datetime] = None) -> ET.Element:
    """Build the <channel> element describing `user`'s feed."""
    channel = ET.Element("channel")
    _text(channel, "title", f"{display_name(user)}'s feed")
    _text(channel, "link", f"https://{base_url}/user/{user.username}")
    _text(channel, "description", user.description)
    _text(channel, "lastBuildDate", to_rfc822(updated or datetime.now(timezone.utc)))
    _text(channel, "language", "en-us")
    return channel


def generate_entry(
    title: str,
    body: str,
    published: datetime,
    post_id: int,
    *,
    base_url: str,
    render: Render = _as_is,
) -> ET.Element:
    """Build one <item>; link and guid both point at the post's page."""
    url = f"https://{base_url}/post/{post_id}"
    item = ET.Element("item")
    _text(item, "title", title)
    _text(item, "description", render(body))
    _text(item, "pubDate", to_rfc822(published))
    _text(item, "link", url)
    _text(item, "guid", url)
    return item


def generate_entries(storage: Storage, user: Account, *, base_url: str, render: Render = _as_is) -> List[ET.Element]:
    """Items for every native post of `user`, newest first."""
    posts = sorted(storage.get_posts_by_author(user.id), key=lambda p: (p.datetime, p.id), reverse=True)
    return [
        generate_entry(p.title, p.body, p.datetime, p.id, base_url=base_url, render=render)
        for p in posts
    ]


def generate_feed(channel: ET.Element, items: List[ET.Element]) -> str:
    """Serialize a channel and its items into an RSS 2.0 document."""
    rss = ET.Element("rss", version="2.0")
    rss.append(channel)
    channel.extend(items)
    return ET.tostring(rss, encoding="unicode", xml_declaration=True)


def user_feed(
    storage: Storage,
    user: Account,
    *,
    settings: Optional[Settings] = None,
    render: Render = _as_is,
) -> str:
    """
    RSS document of `user`'s native posts, linking back to this instance.

    The instance domain comes from `RSS_TIMELINE_BASE_URL`; ConfigError when unset.
    """
    base_url = (settings or load_settings()).base_url
    if not base_url:
        raise ConfigError("RSS_TIMELINE_BASE_URL not set.")
    return generate_feed(
        generate_channel(user, base_url=base_url),
        generate_entries(storage, user, base_url=base_url, render=render),
    )
