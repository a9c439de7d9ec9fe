from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from .exceptions import ConfigError


ATOM2RSS_PROXY = "https://feedmix.novaclic.com/atom2rss.php?source="

_PREFIX = "RSS_TIMELINE_"


@dataclass(frozen=True)
class Settings:
    aggregate_timeout: float = 30.0
    max_workers: int = 16
    http_timeout: float = 10.0
    cache_size: int = 0  # 0 = unbounded
    user_agent: str = "rss-timeline/0.1"
    base_url: str = ""
    yt_key: Optional[str] = None


def _number(env: Mapping[str, str], name: str, default, cast, *, allow_zero: bool = False):
    raw = (env.get(_PREFIX + name) or "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError as e:
        raise ConfigError(f"{_PREFIX}{name} must be a number, got {raw!r}") from e
    if value < 0 or (value == 0 and not allow_zero):
        raise ConfigError(f"{_PREFIX}{name} must be positive, got {raw!r}")
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build Settings from the environment.

    When `environ` is None the process environment is used, after loading a
    `.env` file if one is present. Raises ConfigError on malformed values.
    """
    if environ is None:
        load_dotenv(find_dotenv(usecwd=True))
        environ = os.environ

    defaults = Settings()
    return Settings(
        aggregate_timeout=_number(environ, "AGGREGATE_TIMEOUT", defaults.aggregate_timeout, float),
        max_workers=_number(environ, "MAX_WORKERS", defaults.max_workers, int),
        http_timeout=_number(environ, "HTTP_TIMEOUT", defaults.http_timeout, float),
        cache_size=_number(environ, "CACHE_SIZE", defaults.cache_size, int, allow_zero=True),
        user_agent=(environ.get(_PREFIX + "USER_AGENT") or "").strip() or defaults.user_agent,
        base_url=(environ.get(_PREFIX + "BASE_URL") or "").strip(),
        yt_key=(environ.get("YT_KEY") or "").strip() or None,
    )
