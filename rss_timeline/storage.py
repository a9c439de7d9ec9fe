from __future__ import annotations

import itertools
import threading
from dataclasses import replace
from datetime import timezone
from typing import Dict, List, Optional, Protocol

from .exceptions import AccountLookupError
from .models import Account, NativePost


class Storage(Protocol):
    """Persistence collaborator for accounts and native posts."""

    def get_account_by_username(self, username: str) -> Account:  # pragma: no cover - interface
        ...

    def get_posts_by_author(self, author_id: int) -> List[NativePost]:  # pragma: no cover - interface
        ...

    def get_post(self, post_id: int) -> Optional[NativePost]:  # pragma: no cover - interface
        ...

    def get_newest(self, limit: int) -> List[NativePost]:  # pragma: no cover - interface
        ...

    def put_post(self, post: NativePost) -> NativePost:  # pragma: no cover - interface
        ...


class MemoryStorage:
    """Process-local Storage, for tests and single-process deployments."""

    def __init__(self) -> None:
        self._accounts: Dict[str, Account] = {}
        self._posts: Dict[int, NativePost] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def add_account(self, account: Account) -> Account:
        with self._lock:
            self._accounts[account.username] = account
        return account

    def get_account_by_username(self, username: str) -> Account:
        with self._lock:
            account = self._accounts.get(username)
        if account is None:
            raise AccountLookupError(f"No account named {username!r}")
        return account

    def get_posts_by_author(self, author_id: int) -> List[NativePost]:
        with self._lock:
            return [p for p in self._posts.values() if p.author_id == author_id]

    def get_post(self, post_id: int) -> Optional[NativePost]:
        with self._lock:
            return self._posts.get(post_id)

    def get_newest(self, limit: int) -> List[NativePost]:
        with self._lock:
            posts = sorted(self._posts.values(), key=lambda p: p.datetime, reverse=True)
        return posts[:limit]

    def put_post(self, post: NativePost) -> NativePost:
        """
        Store `post`; an id of 0 asks for a fresh one.

        Naive timestamps are stored as UTC so stored posts stay comparable.
        """
        published = post.datetime
        if published.tzinfo is None:
            published = published.replace(tzinfo=timezone.utc)
        with self._lock:
            post = replace(post, id=post.id or next(self._ids), datetime=published)
            self._posts[post.id] = post
        return post
