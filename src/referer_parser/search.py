"""Search-term extraction from referer query strings."""

from collections.abc import Collection
from urllib.parse import parse_qsl, urlsplit


def extract_search_term(url: str, parameters: Collection[str]) -> str | None:
    """
    Pull the search term out of a referer URL.

    The query string is decoded as a form (percent-escapes, "+" as space)
    and walked in its original order; the first parameter whose name is
    in `parameters` wins.

    Returns:
        The decoded term, or None if the query is absent, empty,
        not valid UTF-8 or has no matching parameter
    """
    if not url or not parameters:
        return None

    try:
        query = urlsplit(url).query
        if not query:
            return None
        pairs = parse_qsl(
            query,
            keep_blank_values=True,
            encoding="utf-8",
            errors="strict",
        )
    except (ValueError, UnicodeDecodeError):
        return None

    for name, value in pairs:
        if name in parameters:
            return value
    return None
