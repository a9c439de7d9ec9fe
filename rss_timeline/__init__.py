"""
rss_timeline

Builds a personal timeline out of the RSS/Atom/YouTube feeds an account follows
and the native posts of the users it follows.

Core ideas:
- Input: an Account (sources + followed usernames) and a storage collaborator
- Process: fetch → parse → normalize (first 5 entries per feed) → cache → merge → sort (newest first)
- Output: List[Post]

Example
-------
from rss_timeline import FeedAggregator, MemoryStorage, Account, generate_source

storage = MemoryStorage()
account = storage.add_account(Account(
    id=1,
    username="alice",
    sources=[generate_source("Blog", "wordpress", "www.duurzamemaassluizers.nl")],
    following=["bob"],
))
storage.add_account(Account(id=2, username="bob"))

with FeedAggregator(storage) as aggregator:
    for post in aggregator.aggregate(account):
        print(post.datetime, post.author, post.title)
"""
from .cache import Cache
from .config import Settings, load_settings
from .core import FeedAggregator
from .feeds import FeedBook
from .fetcher import detect_feed, fetch_feed
from .models import Account, FeedDocument, FeedType, NativePost, Post, Source
from .publish import user_feed
from .registry import detect_favicon, generate_source
from .storage import MemoryStorage, Storage

__all__ = [
    "Account",
    "Cache",
    "FeedAggregator",
    "FeedBook",
    "FeedDocument",
    "FeedType",
    "MemoryStorage",
    "NativePost",
    "Post",
    "Settings",
    "Source",
    "Storage",
    "detect_favicon",
    "detect_feed",
    "fetch_feed",
    "generate_source",
    "load_settings",
    "user_feed",
]
