from datetime import datetime, timezone

from rss_timeline.cache import Cache
from rss_timeline.exceptions import SanitizeError
from rss_timeline.models import Entry, FeedDocument, FeedType, Media, NativePost, Source, Thumbnail
from rss_timeline.normalizer import (
    EPOCH,
    MAX_POSTS_PER_FEED,
    fingerprint,
    from_native,
    generate_posts,
    to_post,
)


SOURCE = Source(id=42, title="Blog", feed="blog.example.com", type=FeedType.WORDPRESS,
                icon="https://blog.example.com/favicon.ico")


def _entry(i: int, **kw) -> Entry:
    fields = dict(
        title=f"Post {i}",
        description=f"<p>Body {i}</p>",
        pub_date=f"Fri, {10 + i:02d} Jan 2026 12:00:00 GMT",
        link=f"https://blog.example.com/{i}",
    )
    fields.update(kw)
    return Entry(**fields)


def _feed(n: int) -> FeedDocument:
    return FeedDocument(title="Blog feed", items=tuple(_entry(i) for i in range(n)))


def test_fingerprint_is_stable_and_title_based():
    assert fingerprint("Hello") == fingerprint("Hello")
    assert fingerprint("Hello") != fingerprint("World")
    assert fingerprint(None) == fingerprint("")
    assert fingerprint("Hello") >= 0


def test_to_post_maps_fields():
    post = to_post(_entry(1), _feed(0), SOURCE)
    assert post.id == fingerprint("Post 1")
    assert post.author == "Blog feed"
    assert post.title == "Post 1"
    assert post.body == "<p>Body 1</p>"
    assert post.link == "https://blog.example.com/1"
    assert post.datetime == datetime(2026, 1, 11, 12, 0, tzinfo=timezone.utc)
    assert post.type == "wordpress"
    assert post.source is SOURCE
    assert post.image is None


def test_to_post_reads_thumbnail():
    entry = _entry(1, media=Media(thumbnail=Thumbnail(url="https://img/1.jpg")))
    assert to_post(entry, _feed(0), SOURCE).image == "https://img/1.jpg"


def test_to_post_missing_thumbnail_levels_give_none():
    for media in (None, Media(thumbnail=None), Media(thumbnail=Thumbnail(url=None))):
        assert to_post(_entry(1, media=media), _feed(0), SOURCE).image is None


def test_to_post_sanitizes_body():
    entry = _entry(1, description='<p onclick="x()">Hi<script>alert(1)</script></p>')
    assert to_post(entry, _feed(0), SOURCE).body == "<p>Hi</p>"


def test_to_post_sanitizer_failure_gives_empty_body(monkeypatch):
    def boom(html):
        raise SanitizeError("broken")

    monkeypatch.setattr("rss_timeline.normalizer.basic_html", boom)
    assert to_post(_entry(1), _feed(0), SOURCE).body == ""


def test_to_post_tolerates_empty_entry():
    post = to_post(Entry(), FeedDocument(), SOURCE)
    assert post.title == ""
    assert post.body == ""
    assert post.author == "Blog"
    assert post.datetime == EPOCH


def test_generate_posts_truncates_to_five():
    posts = generate_posts(_feed(8), SOURCE)
    assert len(posts) == MAX_POSTS_PER_FEED == 5
    assert [p.title for p in posts] == [f"Post {i}" for i in range(5)]


def test_generate_posts_uses_all_of_short_feed():
    assert len(generate_posts(_feed(3), SOURCE)) == 3
    assert generate_posts(FeedDocument.empty(), SOURCE) == []


def test_generate_posts_bad_date_is_isolated():
    feed = FeedDocument(title="Blog", items=(_entry(0), _entry(1, pub_date="not a date"), _entry(2)))
    posts = generate_posts(feed, SOURCE)
    assert len(posts) == 3
    assert posts[1].datetime == EPOCH
    assert posts[0].datetime != EPOCH and posts[2].datetime != EPOCH


def test_generate_posts_writes_cache():
    cache = Cache()
    posts = generate_posts(_feed(2), SOURCE, cache=cache)
    for post in posts:
        assert cache.get(f"42:{post.id}") == post


def test_generate_posts_duplicate_titles_share_cache_slot():
    feed = FeedDocument(title="Blog", items=(_entry(0, title="Same"), _entry(1, title="Same")))
    cache = Cache()
    posts = generate_posts(feed, SOURCE, cache=cache)
    assert posts[0].id == posts[1].id
    assert len(cache) == 1
    assert cache.get(f"42:{posts[0].id}") == posts[1]


def test_from_native_projects_post():
    native = NativePost(id=7, author_id=3, title="Hi", body="<p>x</p>",
                        datetime=datetime(2026, 1, 1, 8, 0), image=None)
    post = from_native(native, "bob")
    assert post.id == 7
    assert post.author == "bob"
    assert post.type == "native"
    assert post.source is None
    assert post.datetime == datetime(2026, 1, 1, 8, 0, tzinfo=timezone.utc)
