"""
Referer classification for web analytics.

Usage:
    from referer_parser import Parser

    parser = Parser()
    referer = parser.parse(
        "http://www.google.com/search?q=hello+world",
        "example.com",
    )
    # Referer(medium=<Medium.SEARCH: 'search'>, source='Google', search_term='hello world')

With an internal-host allow-list fetched once at startup:

    from referer_parser import ParserConfig, create_parser

    parser = await create_parser(ParserConfig(
        page_host="example.com",
        allow_list_url="https://example.com/internals.txt",
    ))
"""

from .config import ConfigError, ParserConfig
from .database import (
    CorruptDatabaseError,
    RefererDatabase,
    build_database,
    default_database,
    load_database,
    load_database_file,
)
from .models import Medium, Referer, RefererRecord
from .parser import Parser, create_parser, parse_referer

__version__ = "0.3.0"
__all__ = [
    "Parser", "create_parser", "parse_referer",
    "Referer", "RefererRecord", "Medium",
    "RefererDatabase", "CorruptDatabaseError",
    "build_database", "load_database", "load_database_file", "default_database",
    "ParserConfig", "ConfigError",
]
