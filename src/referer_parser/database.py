"""
Referer database: loading and validating the source definition.

The definition is a two-level structure keyed by medium and then by source
name:

    search:
      Google:
        domains: [www.google.com, google.com]
        parameters: [q]
    email:
      Orange Webmail:
        domains: [orange.fr/webmail]

It is decoded into a generic tree first (YAML), then validated source by
source and projected into an immutable domain -> RefererRecord mapping.
Any violation aborts the whole build; no partial database is ever returned.
"""

import logging
from collections.abc import Hashable, Iterator, Mapping
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import IO, Any

import yaml
from pydantic import ValidationError

from .models import RESERVED_MEDIUMS, Medium, RefererRecord, SourceDefinition

logger = logging.getLogger(__name__)

BUNDLED_DEFINITION = "referers.yml"


class CorruptDatabaseError(ValueError):
    """Raised when a referer definition cannot be turned into a database."""
    pass


class RefererDatabase(Mapping):
    """Read-only mapping from lookup key to RefererRecord.

    Keys are a bare host ("google.com") or a host with a path prefix
    ("orange.fr/webmail"). Safe to share between threads; nothing mutates
    it after construction.
    """

    __slots__ = ("_records",)

    def __init__(self, records: dict[str, RefererRecord]):
        self._records = MappingProxyType(dict(records))

    def __getitem__(self, key: str) -> RefererRecord:
        return self._records[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"RefererDatabase({len(self)} keys)"


class _UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that rejects repeated keys instead of keeping the last one."""

    def construct_mapping(self, node, deep=False):
        if isinstance(node, yaml.MappingNode):
            seen = set()
            for key_node, _ in node.value:
                key = self.construct_object(key_node, deep=deep)
                if not isinstance(key, Hashable):
                    continue
                if key in seen:
                    raise yaml.constructor.ConstructorError(
                        "while constructing a mapping", node.start_mark,
                        f"found duplicate key '{key}'", key_node.start_mark,
                    )
                seen.add(key)
        return super().construct_mapping(node, deep=deep)


def _corrupt(message: str) -> CorruptDatabaseError:
    logger.error(f"Corrupt referer definition: {message}")
    return CorruptDatabaseError(message)


def _validate_source(medium: Medium, name: str, body: Any) -> tuple[RefererRecord, list[str]]:
    """Validate one source entry; returns its record and domains."""
    if not isinstance(body, Mapping):
        raise _corrupt(f"Definition for referer '{name}' is not a mapping")

    try:
        source = SourceDefinition.model_validate(dict(body))
    except ValidationError as e:
        raise _corrupt(f"Invalid definition for referer '{name}': {e}") from e

    if medium == Medium.SEARCH:
        if not source.parameters:
            raise _corrupt(f"No parameters found for search referer '{name}'")
    elif source.parameters is not None:
        raise _corrupt(f"Parameters not supported for non-search referer '{name}'")

    if not source.domains:
        raise _corrupt(f"No domains found for referer '{name}'")

    record = RefererRecord(
        medium=medium,
        source=name,
        parameters=tuple(source.parameters or ()),
    )
    return record, source.domains


def build_database(definition: Mapping[str, Any]) -> RefererDatabase:
    """
    Build a RefererDatabase from a decoded definition tree.

    Args:
        definition: medium name -> source name -> {domains, parameters}

    Returns:
        Immutable RefererDatabase

    Raises:
        CorruptDatabaseError: On unknown mediums, missing domains, missing or
            unexpected parameters, or a domain claimed twice
    """
    if not isinstance(definition, Mapping):
        raise _corrupt("Top level of the referer definition must be a mapping")

    records: dict[str, RefererRecord] = {}

    for medium_name, sources in definition.items():
        try:
            medium = Medium.from_string(medium_name)
        except ValueError as e:
            raise _corrupt(str(e)) from e
        if medium in RESERVED_MEDIUMS:
            raise _corrupt(f"Medium '{medium_name}' cannot be declared in a definition")
        if not isinstance(sources, Mapping):
            raise _corrupt(f"Sources for medium '{medium_name}' must be a mapping")

        for name, body in sources.items():
            record, domains = _validate_source(medium, str(name), body)
            for domain in domains:
                if domain in records:
                    raise _corrupt(f"Duplicate of domain '{domain}' found")
                records[domain] = record

    logger.debug(f"Built referer database with {len(records)} keys")
    return RefererDatabase(records)


def load_database(source: str | bytes | IO) -> RefererDatabase:
    """Parse a YAML definition (text or open stream) and build the database."""
    try:
        definition = yaml.load(source, Loader=_UniqueKeyLoader)
    except yaml.YAMLError as e:
        raise _corrupt(f"Referer definition is not valid YAML: {e}") from e

    if definition is None:
        raise _corrupt("Referer definition is empty")

    return build_database(definition)


def load_database_file(path: str | Path) -> RefererDatabase:
    """Load a YAML definition file from disk."""
    with open(path, encoding="utf-8") as f:
        return load_database(f)


def default_database() -> RefererDatabase:
    """Load the definition bundled with the package."""
    definition = resources.files(__package__).joinpath("data").joinpath(BUNDLED_DEFINITION)
    with definition.open("r", encoding="utf-8") as f:
        return load_database(f)
