"""
Wildcard patterns for host allow-lists.

Two wildcards are supported:
- "*" matches any run of characters, including none
- "_" matches one optional non-whitespace character

Every other non-alphanumeric character is matched literally. Patterns
match the whole candidate string, never a substring.
"""

import functools
import re

_WILDCARDS = {
    "*": ".*",
    "_": r"\S?",
}


def _translate(pattern: str) -> str:
    """Translate a wildcard pattern into regex source."""
    parts = []
    for char in pattern:
        if char in _WILDCARDS:
            parts.append(_WILDCARDS[char])
        elif char.isalnum():
            parts.append(char)
        else:
            parts.append(re.escape(char))
    return "".join(parts)


@functools.lru_cache(maxsize=1024)
def compile_pattern(pattern: str, ignore_case: bool = False) -> re.Pattern:
    """Compile a wildcard pattern into a full-string matcher.

    Case-sensitive unless ignore_case is set.
    """
    flags = re.DOTALL
    if ignore_case:
        flags |= re.IGNORECASE
    return re.compile(_translate(pattern), flags)


def matches(matcher: re.Pattern, candidate: str) -> bool:
    """Check whether the candidate matches the compiled pattern in full."""
    return matcher.fullmatch(candidate) is not None


def wildcard_match(pattern: str, candidate: str, ignore_case: bool = False) -> bool:
    """Compile (cached) and match in one step."""
    return matches(compile_pattern(pattern, ignore_case), candidate)
