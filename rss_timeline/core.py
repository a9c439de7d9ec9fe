from __future__ import annotations

import concurrent.futures as _fut
import logging
from typing import Dict, Iterable, List, Optional

import httpx

from .cache import Cache
from .config import Settings, load_settings
from .exceptions import FetchError, InvalidURLError, ParseError
from .fetcher import fetch_feed
from .models import Account, FeedDocument, Post, Source
from .normalizer import from_native, generate_posts
from .storage import Storage


log = logging.getLogger(__name__)


def sort_posts(posts: Iterable[Post]) -> List[Post]:
    """
    Order posts newest first.

    Equal timestamps are ordered by numeric source id (native posts last),
    then post id, both ascending.
    """
    out = sorted(posts, key=lambda p: (p.source is None, p.source.id if p.source else 0, p.id))
    out.sort(key=lambda p: p.datetime, reverse=True)
    return out


class FeedAggregator:
    """
    High-level API: build an account's timeline from its sources and the
    native posts of the users it follows.

    Pipeline: fetch → parse → normalize (≤5 per source) → cache → merge → sort (newest first)

    Every source and followed user runs as its own task on a bounded thread
    pool. All tasks share one deadline; a branch that fails or misses it
    contributes no posts instead of failing the timeline.
    """

    def __init__(
        self,
        storage: Storage,
        *,
        cache: Optional[Cache] = None,
        client: Optional[httpx.Client] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.storage = storage
        self.cache = cache if cache is not None else Cache(self.settings.cache_size or None)
        self._owns_client = client is None
        self.client = client or httpx.Client(
            headers={"User-Agent": self.settings.user_agent},
            follow_redirects=True,
        )

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "FeedAggregator":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def source_posts(self, source: Source) -> List[Post]:
        try:
            feed = fetch_feed(
                source.feed,
                source.type,
                client=self.client,
                timeout=self.settings.http_timeout,
            )
        except (FetchError, ParseError, InvalidURLError) as e:
            log.warning("Feed %s unavailable, using empty feed: %s", source.feed, e)
            feed = FeedDocument.empty()

        self.cache.put(source.feed, feed)
        return generate_posts(feed, source, cache=self.cache)

    def user_posts(self, username: str) -> List[Post]:
        account = self.storage.get_account_by_username(username)
        return [from_native(p, account.username) for p in self.storage.get_posts_by_author(account.id)]

    def aggregate(self, account: Account) -> List[Post]:
        tasks: List[tuple] = [
            (f"source {s.feed}", self.source_posts, s) for s in account.sources
        ] + [
            (f"user {u}", self.user_posts, u) for u in account.following
        ]
        if not tasks:
            return []

        results = self._run(tasks)
        posts = [p for chunk in results for p in chunk]
        return sort_posts(posts)

    def fetch_posts(self, username: str) -> List[Post]:
        """Aggregate the timeline of the account named `username`."""
        return self.aggregate(self.storage.get_account_by_username(username))

    def _run(self, tasks: List[tuple]) -> List[List[Post]]:
        workers = max(1, min(self.settings.max_workers, len(tasks)))
        ex = _fut.ThreadPoolExecutor(max_workers=workers, thread_name_prefix="rss-timeline")
        try:
            futures: Dict[_fut.Future, str] = {}
            for label, fn, arg in tasks:
                futures[ex.submit(fn, arg)] = label

            done, pending = _fut.wait(futures, timeout=self.settings.aggregate_timeout)

            if pending:
                for fu in pending:
                    fu.cancel()
                log.warning(
                    "Timeline deadline of %ss passed; dropping %d unfinished task(s): %s",
                    self.settings.aggregate_timeout,
                    len(pending),
                    ", ".join(sorted(futures[f] for f in pending)),
                )

            out: List[List[Post]] = []
            for fu in futures:
                if fu not in done:
                    continue
                try:
                    out.append(fu.result())
                except Exception as e:
                    log.warning("Dropping %s: %s", futures[fu], e)
            return out
        finally:
            # running stragglers finish in the background, bounded by the HTTP timeout
            ex.shutdown(wait=False, cancel_futures=True)
