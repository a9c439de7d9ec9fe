from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Any, Hashable, Optional

from .models import Post, Source


def post_key(source: Optional[Source], post: Post) -> str:
    """Composite cache key of a normalized post: "<source id>:<post id>"."""
    source_id = source.id if source is not None else ""
    return f"{source_id}:{post.id}"


class Cache:
    """
    Thread-safe in-memory key/value store shared by concurrent fetch tasks.

    Holds parsed feed documents (keyed by feed URL) and normalized posts (keyed
    by `post_key`). Writers to the same key race; the last write wins. With
    `max_entries` set, the least recently used entry is evicted on overflow.
    """

    def __init__(self, max_entries: Optional[int] = None) -> None:
        if max_entries is not None and max_entries <= 0:
            max_entries = None
        self._max = max_entries
        self._data: "OrderedDict[Hashable, Any]" = OrderedDict()
        self._lock = threading.Lock()

    def put(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._data[key] = value
            self._data.move_to_end(key)
            if self._max is not None:
                while len(self._data) > self._max:
                    self._data.popitem(last=False)

    def get(self, key: Hashable, default: Any = None) -> Any:
        with self._lock:
            if key not in self._data:
                return default
            self._data.move_to_end(key)
            return self._data[key]

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
