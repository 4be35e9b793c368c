"""
Referer classification for traffic source attribution.

Given a referer URL and the host of the page it led to, a Parser decides:
- Not a referer: empty, unparseable, non-http(s) or host-less URLs (None)
- Internal: same host as the page, or matched by the allow-list
- Search / Social / Email: a known source from the referer database,
  plus the search term for search engines
- Unknown: a valid referer that is not in the database
"""

import functools
import logging
from collections.abc import Sequence
from urllib.parse import urlsplit

from .client import fetch_allow_list
from .config import ParserConfig
from .database import RefererDatabase, default_database, load_database_file
from .internal import is_internal
from .lookup import find_referer
from .models import Medium, Referer
from .search import extract_search_term

logger = logging.getLogger(__name__)

REFERER_SCHEMES = ("http", "https")


def _page_host(page: str | None) -> str | None:
    """Accept either a bare host (port allowed) or a full page URL."""
    if not page:
        return None
    if "//" not in page:
        page = "//" + page.strip()
    try:
        return urlsplit(page).hostname
    except ValueError:
        return None


class Parser:
    """Classifies referer URLs against a referer database."""

    def __init__(
        self,
        database: RefererDatabase | None = None,
        allow_list: Sequence[str] | None = None,
        config: ParserConfig | None = None,
    ):
        self.config = config or ParserConfig()
        self.database = database if database is not None else default_database()
        self.allow_list = tuple(allow_list) if allow_list is not None else None

    @classmethod
    def from_config(
        cls,
        config: ParserConfig,
        allow_list: Sequence[str] | None = None,
    ) -> "Parser":
        """Build a parser, loading the definition named by the config."""
        if config.referers_path:
            database = load_database_file(config.referers_path)
        else:
            database = default_database()
        return cls(database=database, allow_list=allow_list, config=config)

    def is_internal(self, host: str, page_host: str | None) -> bool:
        """Check for same-host navigation or an allow-list match."""
        if page_host and host == page_host:
            return True
        return is_internal(host, self.allow_list, ignore_case=self.config.internal_ignore_case)

    def parse(self, referer_url: str | None, page: str | None = None) -> Referer | None:
        """
        Classify a referer URL.

        Args:
            referer_url: The Referer header value (can be empty or None)
            page: Host of the current page, or its full URL. Falls back
                to config.page_host.

        Returns:
            Referer with medium, source and search_term, or None if the
            value is not an http(s) referer

        Examples:
            >>> parser.parse("http://www.google.com/search?q=hello+world", "example.com")
            Referer(medium=<Medium.SEARCH: 'search'>, source='Google', search_term='hello world')

            >>> parser.parse("", "example.com") is None
            True
        """
        url = referer_url.strip() if referer_url else ""
        if not url:
            return None

        try:
            parsed = urlsplit(url)
            scheme = parsed.scheme
            host = parsed.hostname
        except ValueError:
            logger.debug(f"Unparseable referer URL: {referer_url!r}")
            return None

        if scheme not in REFERER_SCHEMES or not host:
            return None

        page_host = _page_host(page) if page else _page_host(self.config.page_host)
        if self.is_internal(host, page_host):
            return Referer(medium=Medium.INTERNAL)

        record = find_referer(self.database, host, parsed.path)
        if record is None:
            return Referer(medium=Medium.UNKNOWN)

        term = None
        if record.medium == Medium.SEARCH:
            term = extract_search_term(url, record.parameters)
        return Referer(medium=record.medium, source=record.source, search_term=term)


async def create_parser(config: ParserConfig) -> Parser:
    """
    Set up a parser from config, fetching the allow-list if one is configured.

    A failed fetch is logged by the client and the parser falls back to
    exact page-host matching for internal traffic.
    """
    allow_list = None
    if config.has_allow_list:
        allow_list = await fetch_allow_list(
            config.allow_list_url, timeout=config.allow_list_timeout
        )
    return Parser.from_config(config, allow_list=allow_list)


@functools.lru_cache(maxsize=1)
def _default_parser() -> Parser:
    return Parser()


def parse_referer(referer_url: str | None, page: str | None = None) -> Referer | None:
    """Classify with a shared parser built from the bundled definition."""
    return _default_parser().parse(referer_url, page)
