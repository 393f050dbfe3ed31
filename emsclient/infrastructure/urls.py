# ============================================================================
# URL RESOLVER
# ============================================================================
# STATUS: Infrastructure - URL construction and rewriting
# PURPOSE: Absolute URLs, query-parameter merging, template unescaping, proxying
# CREATED: 18 OCT 2026
# ============================================================================
"""
URL Resolver

Pure functions applied everywhere a remote resource is referenced:

- to_absolute(base, path): join with exactly one slash unless ``path`` is
  already an http(s) URL.
- with_query_params(url, params): merge ``params`` into the query string,
  overwriting existing keys, keeping scheme/host/path/fragment as they are.
- unescape_template_placeholders(url): turn ``%7Bz%7D`` back into ``{z}`` so
  map renderers can substitute tile coordinates.
- join_proxy_path(proxy_path, url): prefix a proxy path exactly once.

Parse failures raise MalformedUrlError.
"""

import re
from typing import Dict, Mapping, Optional
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit, SplitResult

from emsclient.core.errors import MalformedUrlError

ABSOLUTE_URL_RE = re.compile(r"^https?://", re.IGNORECASE)
ENCODED_TEMPLATE_VAR_RE = re.compile(r"%7B(\w+?)%7D")


def is_absolute(url: str) -> bool:
    """True when ``url`` starts with an http(s) scheme."""
    return bool(ABSOLUTE_URL_RE.match(url))


def to_absolute(base: Optional[str], path: str) -> str:
    """
    Resolve ``path`` against ``base``.

    Absolute http(s) paths are returned unchanged. Otherwise base and path
    are joined with exactly one separating slash.

    Examples:
        >>> to_absolute("https://tiles.example/", "/v7.6/manifest")
        'https://tiles.example/v7.6/manifest'
        >>> to_absolute("https://tiles.example", "v7.6/manifest")
        'https://tiles.example/v7.6/manifest'
    """
    if is_absolute(path):
        return path
    if not base:
        return path
    return base.rstrip("/") + "/" + path.lstrip("/")


def split_url(url: str) -> SplitResult:
    """Parse ``url``, raising MalformedUrlError on failure."""
    try:
        parts = urlsplit(url)
        # Port is parsed lazily; touch it so an invalid port fails here
        parts.port
    except ValueError as e:
        raise MalformedUrlError(url, str(e)) from e
    return parts


def parse_query(query: str) -> Dict[str, str]:
    """Query string to an ordered dict; the last value of a repeated key wins."""
    return dict(parse_qsl(query, keep_blank_values=True))


def with_query_params(url: str, params: Mapping[str, str]) -> str:
    """
    Merge ``params`` into the query string of ``url``.

    Existing keys keep their position and take the new value; new keys are
    appended in the order given.
    """
    parts = split_url(url)
    query = parse_query(parts.query)
    for key, value in params.items():
        query[key] = "" if value is None else str(value)
    encoded = urlencode(query, quote_via=quote, safe="")
    return urlunsplit((parts.scheme, parts.netloc, parts.path, encoded, parts.fragment))


def unescape_template_placeholders(url: str) -> str:
    """Reverse percent-encoding of ``{token}`` placeholders only."""
    return ENCODED_TEMPLATE_VAR_RE.sub(lambda match: "{" + match.group(1) + "}", url)


def join_proxy_path(proxy_path: Optional[str], url: str) -> str:
    """Prefix ``url`` with ``proxy_path`` unless it already carries it."""
    if not proxy_path or url.startswith(proxy_path):
        return url
    return proxy_path + url


def with_fragment(url: str, fragment: str, params: Optional[Mapping[str, str]] = None) -> str:
    """
    Replace the fragment of ``url`` and merge ``params`` into its query.

    An empty path on a URL with a host becomes ``/`` so the fragment
    follows a path, as browsers render landing-page links.
    """
    parts = split_url(url)
    query = parse_query(parts.query)
    if params:
        query.update(params)
    path = parts.path or ("/" if parts.netloc else "")
    encoded = urlencode(query, quote_via=quote, safe="")
    return urlunsplit((parts.scheme, parts.netloc, path, encoded, fragment))


__all__ = [
    "is_absolute",
    "to_absolute",
    "split_url",
    "parse_query",
    "with_query_params",
    "unescape_template_placeholders",
    "join_proxy_path",
    "with_fragment",
]
