class FeedError(Exception):
    """Base class for errors raised by rss_timeline."""


class FetchError(FeedError):
    """Raised when a feed (or API document) cannot be retrieved over HTTP."""


class ParseError(FeedError):
    """Raised when a retrieved feed body cannot be parsed into a document."""


class SanitizeError(FeedError):
    """Raised when an HTML body cannot be sanitized."""


class DateParseError(FeedError, ValueError):
    """Raised when an entry's publication date is not a valid RFC-822 date."""


class InvalidSourceError(FeedError, ValueError):
    """Raised when a Source record cannot be built from the given fields."""


class InvalidURLError(InvalidSourceError):
    """Raised when a URL cannot be parsed into an authority or feed location."""


class AccountLookupError(FeedError, LookupError):
    """Raised when the storage collaborator has no account for a username."""


class ChannelResolveError(FeedError):
    """Raised when a YouTube channel path cannot be resolved to a channel id."""


class ConfigError(FeedError):
    """Raised when environment configuration is missing or invalid."""
