from __future__ import annotations

import logging
import threading
from typing import Dict, List

from .core import FeedAggregator
from .models import Post


log = logging.getLogger(__name__)


class FeedBook:
    """
    Keeps the last built timeline of each user.

    Timelines are rebuilt on demand with `refresh`; `get` builds one the first
    time a user is asked for and serves the stored copy afterwards.
    """

    def __init__(self, aggregator: FeedAggregator) -> None:
        self.aggregator = aggregator
        self._feeds: Dict[str, List[Post]] = {}
        self._lock = threading.Lock()

    def refresh(self, username: str) -> List[Post]:
        posts = self.aggregator.fetch_posts(username)
        with self._lock:
            self._feeds[username] = posts
        log.info("Rebuilt timeline of %s (%d posts)", username, len(posts))
        return list(posts)

    def get(self, username: str) -> List[Post]:
        with self._lock:
            posts = self._feeds.get(username)
        if posts is None:
            posts = self.refresh(username)
        return list(posts)

    def drop(self, username: str) -> None:
        with self._lock:
            self._feeds.pop(username, None)

    def __contains__(self, username: str) -> bool:
        with self._lock:
            return username in self._feeds
