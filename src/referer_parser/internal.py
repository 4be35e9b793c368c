"""
Internal-host detection from an externally supplied allow-list.

The allow-list is plain text, one entry per line:

    # Partial matches (wildcards) come first
    *.vodafone.nl
    vodafone-_.com
    _partial_matches_
    # Exact hosts
    myaccount.vodafone.nl

Entries above the "_partial_matches_" sentinel are wildcard patterns.
Every entry, on either side of the sentinel, is also checked for an
exact match. A list without a sentinel is all wildcard patterns.

Fetching the list is not done here (see client.py); these functions
only consume lines that were already fetched.
"""

from collections.abc import Iterable, Sequence

from .wildcard import wildcard_match

PARTIAL_MATCH_SENTINEL = "_partial_matches_"


def parse_allow_list(lines: Iterable[str]) -> tuple[str, ...]:
    """
    Clean raw allow-list lines into entries.

    Full-line and inline "#" comments are removed, whitespace is stripped
    and blank lines are skipped. A leading byte-order mark is dropped.
    Order is preserved.
    """
    entries = []
    for i, line in enumerate(lines):
        if i == 0:
            line = line.lstrip("\ufeff")
        entry = line.split("#", 1)[0].strip()
        if entry:
            entries.append(entry)
    return tuple(entries)


def _wildcard_entries(entries: Sequence[str]) -> Sequence[str]:
    if PARTIAL_MATCH_SENTINEL in entries:
        return entries[:entries.index(PARTIAL_MATCH_SENTINEL)]
    return entries


def is_internal(
    host: str,
    entries: Sequence[str] | None,
    ignore_case: bool = True,
) -> bool:
    """
    Check whether a host is internal according to the allow-list.

    Args:
        host: The referer host
        entries: Parsed allow-list entries, or None when no list is available
        ignore_case: Compare hostnames case-insensitively (DNS semantics)

    Returns:
        True on the first wildcard or exact match
    """
    if not host or not entries:
        return False

    for pattern in _wildcard_entries(entries):
        if wildcard_match(pattern, host, ignore_case):
            return True

    if ignore_case:
        folded = host.casefold()
        return any(entry.casefold() == folded for entry in entries)
    return host in entries
