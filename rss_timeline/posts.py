from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from .models import Account, NativePost
from .storage import Storage

if TYPE_CHECKING:
    from .feeds import FeedBook


def new_post(
    storage: Storage,
    title: str,
    body: str,
    image: Optional[str],
    user: Account,
    *,
    feeds: Optional["FeedBook"] = None,
) -> NativePost:
    """
    Publish a native post for `user`, stamped with the current UTC time.

    When a FeedBook is given, the author's timeline is rebuilt afterwards.
    """
    post = storage.put_post(NativePost(
        id=0,
        author_id=user.id,
        title=title,
        body=body,
        image=image,
        datetime=datetime.now(timezone.utc),
    ))
    if feeds is not None:
        feeds.refresh(user.username)
    return post


def get_post(storage: Storage, post_id: int) -> Optional[NativePost]:
    return storage.get_post(post_id)


def posts_by_user(storage: Storage, author_id: int) -> List[NativePost]:
    return storage.get_posts_by_author(author_id)


def newest_posts(storage: Storage, limit: int) -> List[NativePost]:
    return storage.get_newest(limit)


def post_exists(storage: Storage, post_id: int) -> bool:
    return get_post(storage, post_id) is not None
