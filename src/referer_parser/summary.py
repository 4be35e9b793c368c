"""Aggregate views over batches of classified referers."""

from collections.abc import Iterable

from .models import Medium, Referer

NOT_A_REFERER = "none"


def get_medium_summary(referers: Iterable[Referer | None]) -> dict[str, int]:
    """
    Get traffic breakdown by medium.

    Args:
        referers: Results of Parser.parse(); None counts as "none"

    Returns:
        Dict mapping medium value to count, with every medium present
    """
    counts: dict[str, int] = {medium.value: 0 for medium in Medium}
    counts[NOT_A_REFERER] = 0

    for referer in referers:
        key = referer.medium.value if referer is not None else NOT_A_REFERER
        counts[key] = counts.get(key, 0) + 1

    return counts


def get_top_sources(
    referers: Iterable[Referer | None],
    limit: int = 10,
    exclude_internal: bool = True,
    exclude_unknown: bool = True,
) -> list[tuple[str, int]]:
    """
    Get the most common named sources.

    Args:
        referers: Results of Parser.parse()
        limit: Maximum number of sources to return
        exclude_internal: Whether to skip internal navigation
        exclude_unknown: Whether to skip unknown referers

    Returns:
        List of (source, count) tuples, sorted by count
    """
    counts: dict[str, int] = {}

    for referer in referers:
        if referer is None:
            continue
        if exclude_internal and referer.medium == Medium.INTERNAL:
            continue
        if exclude_unknown and referer.medium == Medium.UNKNOWN:
            continue

        key = referer.source or referer.medium.value.capitalize()
        counts[key] = counts.get(key, 0) + 1

    sorted_sources = sorted(counts.items(), key=lambda x: x[1], reverse=True)
    return sorted_sources[:limit]
