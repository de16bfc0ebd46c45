"""Best-effort heuristics that turn extracted CV text into a search query.

Both functions are pure: the same input always yields the same output.
"""

import re

NAME_MAX_LENGTH = 60
FALLBACK_SNIPPET_LENGTH = 200
FALLBACK_QUERY_PREFIX = "candidate profile: "
NAME_QUERY_SUFFIX = "professional background work experience"

_STRUCTURAL_MARKERS = re.compile(
    r"@|https?://|www\.|\b(?:resume|résumé|curriculum|cv)\b",
    re.IGNORECASE,
)


def derive_subject_name(text: str) -> str | None:
    """Return the first non-empty line when it plausibly is a person's name."""
    lines = [line.strip() for line in text.splitlines()]
    lines = [line for line in lines if line]
    if not lines:
        return None

    first_line = lines[0]
    if len(first_line) >= NAME_MAX_LENGTH:
        return None
    if _STRUCTURAL_MARKERS.search(first_line):
        return None
    return first_line


def build_query(text: str, name: str | None) -> str:
    """Build the web search query for a document."""
    if name:
        return f"{name} {NAME_QUERY_SUFFIX}"
    return f"{FALLBACK_QUERY_PREFIX}{text[:FALLBACK_SNIPPET_LENGTH]}"
