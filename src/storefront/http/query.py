"""Query string codec.

A ``QueryMap`` is a plain ``dict[str, str]``: keys are unique and the
last occurrence of a repeated key wins, as in a browser's
``URLSearchParams`` folded into an object.
"""

from collections.abc import Mapping
from urllib.parse import parse_qsl, urlencode, urlsplit

QueryMap = dict[str, str]


def parse_query(search: str = "") -> QueryMap:
    """Parse a query string into a ``QueryMap``.

    Accepts an optional leading ``?``. Keys and values are
    percent-decoded and ``+`` decodes to a space. Blank values are kept::

        parse_query("?q=shoes&page=2&page=3")  # {"q": "shoes", "page": "3"}
    """
    if search.startswith("?"):
        search = search[1:]
    query: QueryMap = {}
    for key, value in parse_qsl(search, keep_blank_values=True):
        query[key] = value
    return query


def serialize_query(query: Mapping[str, str]) -> str:
    """Serialize a mapping to a canonical query string (no leading ``?``).

    Keys keep the mapping's iteration order, so
    ``parse_query(serialize_query(m)) == m`` for any ``QueryMap``.
    """
    return urlencode([(str(k), str(v)) for k, v in query.items()])


def split_url(url: str) -> tuple[str, QueryMap]:
    """Split a URL or path into its path and parsed query."""
    parts = urlsplit(url)
    return parts.path, parse_query(parts.query)


def with_query(path: str, query: Mapping[str, str]) -> str:
    """Append *query* to *path*; returns *path* unchanged when empty."""
    if not query:
        return path
    return f"{path}?{serialize_query(query)}"
