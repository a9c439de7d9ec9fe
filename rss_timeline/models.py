from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple


NATIVE = "native"


class FeedType(str, Enum):
    BLOGGER = "blogger"
    WORDPRESS = "wordpress"
    YOUTUBE = "youtube"
    ATOM = "atom"
    DIRECT = "direct"


@dataclass(frozen=True)
class Source:
    """
    A configured external feed an account subscribes to.

    `feed` is the base URI as entered by the user (no scheme); the real feed
    location is derived from it and `type` at fetch time.
    """
    id: int
    title: str
    feed: str
    type: FeedType
    icon: str


@dataclass(frozen=True)
class Post:
    """
    Common representation of a timeline entry, RSS-derived or native.

    WARNING: `id` of RSS posts is a fingerprint of the entry title. Two entries
    with the same title share an id (and a cache slot); this is accepted.
    """
    id: int
    author: str
    title: str
    body: str
    datetime: datetime
    type: str
    link: Optional[str] = None
    image: Optional[str] = None
    source: Optional[Source] = None


@dataclass(frozen=True)
class NativePost:
    """A post authored on this platform, as held by the storage collaborator."""
    id: int
    author_id: int
    title: str
    body: str
    datetime: datetime
    image: Optional[str] = None


@dataclass
class Account:
    id: int
    username: str
    display_name: Optional[str] = None
    description: str = ""
    sources: List[Source] = field(default_factory=list)
    following: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Thumbnail:
    url: Optional[str] = None


@dataclass(frozen=True)
class Media:
    thumbnail: Optional[Thumbnail] = None


@dataclass(frozen=True)
class Entry:
    """One item of a parsed feed. Every field may be absent."""
    title: Optional[str] = None
    description: Optional[str] = None
    pub_date: Optional[str] = None
    link: Optional[str] = None
    media: Optional[Media] = None

    @property
    def thumbnail_url(self) -> Optional[str]:
        if self.media is None or self.media.thumbnail is None:
            return None
        return self.media.thumbnail.url


@dataclass(frozen=True)
class FeedDocument:
    title: Optional[str] = None
    items: Tuple[Entry, ...] = ()

    @classmethod
    def empty(cls) -> "FeedDocument":
        return cls(title=None, items=())
