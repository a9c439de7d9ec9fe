import httpx
import pytest

from rss_timeline.config import Settings
from rss_timeline.exceptions import ChannelResolveError, ConfigError, FetchError
from rss_timeline.youtube import to_channel_link


def _client(payload, seen=None, status=200):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request.url)
        return httpx.Response(status, json=payload)

    return httpx.Client(transport=httpx.MockTransport(handler))


def test_canonical_channel_passes_through():
    assert to_channel_link("www.youtube.com/channel/UC123") == "www.youtube.com/channel/UC123"


def test_custom_url_uses_search_api():
    seen = []
    client = _client({"items": [{"id": {"kind": "youtube#channel", "channelId": "UCabc"}}]}, seen)

    assert to_channel_link("www.youtube.com/c/SomeSlug", api_key="k", client=client) == "www.youtube.com/channel/UCabc"
    assert seen[0].host == "youtube.googleapis.com"
    assert seen[0].params["q"] == "SomeSlug"
    assert seen[0].params["key"] == "k"


def test_user_url_uses_channels_api():
    seen = []
    client = _client({"items": [{"id": "UCuser"}]}, seen)

    assert to_channel_link("www.youtube.com/user/someone", api_key="k", client=client) == "www.youtube.com/channel/UCuser"
    assert seen[0].params["forUsername"] == "someone"


def test_no_items_raises():
    with pytest.raises(ChannelResolveError):
        to_channel_link("www.youtube.com/user/ghost", api_key="k", client=_client({"items": []}))


def test_http_failure_raises_fetch_error():
    with pytest.raises(FetchError):
        to_channel_link("www.youtube.com/c/x", api_key="k", client=_client({}, status=403))


def test_missing_key_raises(monkeypatch):
    monkeypatch.delenv("YT_KEY", raising=False)
    monkeypatch.setattr("rss_timeline.youtube.load_settings", lambda: Settings())
    with pytest.raises(ConfigError):
        to_channel_link("www.youtube.com/user/someone", client=_client({"items": [{"id": "x"}]}))
