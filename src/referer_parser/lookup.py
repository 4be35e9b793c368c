"""
Hierarchical host/path lookup against the referer database.

Keys are tried from most to least specific at each host level:

    1. host + full path      (apollo.lv/portal/search/)
    2. host + first segment  (orange.fr/webmail for /webmail/fr_FR/read.html)
    3. host alone            (orange.fr)

If nothing matches, the leftmost label is stripped from the host
(mail.orange.fr -> orange.fr -> fr) and the same three keys are tried
again with the original path.
"""

from collections.abc import Iterator, Mapping

from .models import RefererRecord


def _first_segment(path: str) -> str | None:
    """Return the first non-empty "/"-delimited component of a path."""
    for segment in path.split("/"):
        if segment:
            return segment
    return None


def candidate_hosts(host: str) -> Iterator[str]:
    """Yield the host followed by each shorter suffix, one label at a time."""
    labels = host.split(".")
    for i in range(len(labels)):
        yield ".".join(labels[i:])


def candidate_keys(host: str, path: str) -> Iterator[str]:
    """Yield lookup keys in preference order."""
    segment = _first_segment(path)
    # "/search" is both the full path and its first segment; try it once
    one_level = f"/{segment}" if segment is not None and f"/{segment}" != path else None
    for candidate in candidate_hosts(host):
        if path:
            yield candidate + path
        if one_level is not None:
            yield candidate + one_level
        yield candidate


def find_referer(
    database: Mapping[str, RefererRecord],
    host: str,
    path: str = "",
) -> RefererRecord | None:
    """
    Find the most specific database record for a referer host and path.

    Args:
        database: Lookup key -> RefererRecord mapping
        host: Referer hostname (e.g., "mail.orange.fr")
        path: Referer path, possibly empty (e.g., "/webmail/fr_FR/read.html")

    Returns:
        The matching RefererRecord, or None when no key matches
    """
    if not host:
        return None

    for key in candidate_keys(host, path or ""):
        record = database.get(key)
        if record is not None:
            return record
    return None
