from __future__ import annotations

import logging
import zlib
from datetime import datetime, timezone
from typing import List, Optional

from .cache import Cache, post_key
from .exceptions import DateParseError, SanitizeError
from .models import NATIVE, Entry, FeedDocument, NativePost, Post, Source
from .parser import parse_rfc822
from .sanitizer import basic_html


log = logging.getLogger(__name__)

# Only the newest entries of a feed make it into a timeline.
MAX_POSTS_PER_FEED = 5

# Publication time given to entries whose date cannot be read.
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def fingerprint(text: Optional[str]) -> int:
    """
    Stable non-cryptographic integer for a string.

    Used as a best-effort unique key: distinct strings may collide.
    """
    return zlib.crc32((text or "").encode("utf-8"))


def to_post(entry: Entry, feed: FeedDocument, source: Source) -> Post:
    """
    Convert a parsed feed entry into a Post.

    Never raises on bad entry data: an unsanitizable body becomes "" and an
    unreadable date becomes EPOCH.
    """
    try:
        body = basic_html(entry.description)
    except SanitizeError as e:
        log.warning("Dropping body of %r from %s: %s", entry.title, source.feed, e)
        body = ""

    try:
        published = parse_rfc822(entry.pub_date)
    except DateParseError as e:
        log.warning("Bad date on %r from %s: %s", entry.title, source.feed, e)
        published = EPOCH

    return Post(
        id=fingerprint(entry.title),
        author=feed.title or source.title,
        title=entry.title or "",
        body=body,
        datetime=published,
        type=str(getattr(source.type, "value", source.type)),
        link=entry.link,
        image=entry.thumbnail_url,
        source=source,
    )


def generate_posts(feed: FeedDocument, source: Source, *, cache: Optional[Cache] = None) -> List[Post]:
    """
    Build Posts for the first MAX_POSTS_PER_FEED entries of `feed`.

    Each post is also written to `cache` under "<source id>:<post id>".
    """
    posts: List[Post] = []
    for entry in feed.items[:MAX_POSTS_PER_FEED]:
        post = to_post(entry, feed, source)
        if cache is not None:
            cache.put(post_key(source, post), post)
        posts.append(post)
    return posts


def from_native(post: NativePost, author: str) -> Post:
    """Project a stored native post into the common Post shape."""
    published = post.datetime
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    return Post(
        id=post.id,
        author=author,
        title=post.title,
        body=post.body,
        datetime=published,
        type=NATIVE,
        image=post.image,
    )
