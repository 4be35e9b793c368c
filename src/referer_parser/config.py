"""
Configuration for the referer parser.
"""
import logging
import warnings
from dataclasses import dataclass
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

# Allow-list fetch defaults
DEFAULT_FETCH_TIMEOUT = 10.0
MAX_FETCH_TIMEOUT = 120.0


class ConfigError(ValueError):
    """Raised when a ParserConfig value is unusable."""
    pass


def validate_allow_list_url(url: str) -> None:
    """Validate an allow-list URL.

    Raises:
        ConfigError: If the URL is not an absolute http(s) URL
    """
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(
            f"Allow-list URL must be an absolute http(s) URL. Got {url!r}."
        )


@dataclass
class ParserConfig:
    """Configuration for a single parser instance."""

    # Referer definition (None = bundled referers.yml)
    referers_path: str | None = None

    # Host of the site being analyzed, used when parse() gets no page
    page_host: str | None = None

    # Internal-host allow-list
    allow_list_url: str | None = None
    allow_list_timeout: float = DEFAULT_FETCH_TIMEOUT
    internal_ignore_case: bool = True  # DNS names are case-insensitive

    @property
    def has_allow_list(self) -> bool:
        """Check if an allow-list source is configured."""
        return bool(self.allow_list_url)

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_timeout()
        self._validate_allow_list()

    def _validate_timeout(self) -> None:
        if self.allow_list_timeout <= 0:
            raise ConfigError(
                f"allow_list_timeout must be positive. Got {self.allow_list_timeout}."
            )
        if self.allow_list_timeout > MAX_FETCH_TIMEOUT:
            logger.warning(
                f"Allow-list timeout of {self.allow_list_timeout}s is longer than "
                f"the recommended {MAX_FETCH_TIMEOUT}s"
            )

    def _validate_allow_list(self) -> None:
        """Validate the allow-list URL and warn about plain http."""
        if not self.allow_list_url:
            return

        validate_allow_list_url(self.allow_list_url)

        if urlparse(self.allow_list_url).scheme == "http":
            warnings.warn(
                f"Allow-list URL {self.allow_list_url} uses plain http. "
                f"Serve it over https so the list cannot be tampered with.",
                UserWarning,
                stacklevel=3
            )
            logger.warning(f"Fetching allow-list over plain http: {self.allow_list_url}")
