"""Data models for referer classification."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict


class Medium(str, Enum):
    """Traffic-source category assigned to a referer."""

    UNKNOWN = "unknown"      # Valid referer, not in the database
    INTERNAL = "internal"    # Same site, or matched by the allow-list
    SEARCH = "search"        # Search engines (carry search parameters)
    SOCIAL = "social"        # Social networks
    EMAIL = "email"          # Webmail providers

    @classmethod
    def from_string(cls, name: str) -> "Medium":
        """Look up a medium by its definition-file key (case-sensitive)."""
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown medium '{name}'") from None


# Mediums that are assigned by the parser itself and never come from a definition
RESERVED_MEDIUMS = frozenset({Medium.UNKNOWN, Medium.INTERNAL})


@dataclass(frozen=True)
class RefererRecord:
    """
    A known traffic source, as stored in the referer database.

    Attributes:
        medium: The source's medium
        source: Display name (e.g., "Google", "Orange Webmail")
        parameters: Query parameter names carrying the search term,
            only ever non-empty for search engines
    """
    medium: Medium
    source: str
    parameters: tuple[str, ...] = ()


@dataclass(frozen=True)
class Referer:
    """
    Result of classifying a referer URL.

    Attributes:
        medium: The traffic-source category
        source: Source name, None for unknown and internal referers
        search_term: The search term, only for search referers
    """
    medium: Medium
    source: str | None = None
    search_term: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "medium": self.medium.value,
            "source": self.source,
            "search_term": self.search_term,
        }


class SourceDefinition(BaseModel):
    """One source entry of the referer definition file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    domains: list[str] | None = None
    parameters: list[str] | None = None
