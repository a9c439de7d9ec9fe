from __future__ import annotations

from typing import Dict, FrozenSet, Optional

from bs4 import BeautifulSoup, Comment

from .exceptions import SanitizeError


_BASIC_TAGS: FrozenSet[str] = frozenset({
    "a", "b", "blockquote", "br", "code", "del", "em",
    "h1", "h2", "h3", "h4", "h5", "hr", "i", "img", "li", "ol", "p", "pre",
    "s", "small", "strike", "strong", "sub", "sup",
    "table", "tbody", "td", "th", "thead", "tr", "u", "ul",
})
_ATTRS: Dict[str, FrozenSet[str]] = {
    "a": frozenset({"href", "title"}),
    "img": frozenset({"src", "alt", "title", "width", "height"}),
}
_URL_ATTRS = frozenset({"href", "src"})
# removed together with their content
_DROP_TAGS = frozenset({"script", "style", "iframe", "object", "embed", "form", "noscript", "template"})
_BAD_SCHEMES = ("javascript:", "vbscript:", "data:")


def _safe_url(value: str) -> bool:
    compact = "".join(value.split()).lower()
    return not compact.startswith(_BAD_SCHEMES)


def basic_html(html: Optional[str]) -> str:
    """
    Reduce an HTML fragment to a basic, safe subset.

    Tags outside the allowlist are unwrapped (their text is kept), scripts and
    similar containers are removed with their content, and only a handful of
    attributes survive on links and images.
    """
    if not html:
        return ""
    try:
        soup = BeautifulSoup(html, "html.parser")

        for node in soup.find_all(string=lambda s: isinstance(s, Comment)):
            node.extract()
        for tag in soup.find_all(list(_DROP_TAGS)):
            tag.decompose()

        for tag in soup.find_all(True):
            if tag.name not in _BASIC_TAGS:
                tag.unwrap()
                continue
            allowed = _ATTRS.get(tag.name, frozenset())
            for name in list(tag.attrs):
                value = tag.attrs[name]
                if name not in allowed:
                    del tag.attrs[name]
                elif name in _URL_ATTRS and isinstance(value, str) and not _safe_url(value):
                    del tag.attrs[name]
        return str(soup)
    except Exception as e:
        raise SanitizeError(f"could not sanitize HTML ({e})") from e
