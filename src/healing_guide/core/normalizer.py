"""Lookup-key normalization.

Documents are addressed by a hyphenated slug; search lists by the trimmed,
lowercased phrase. The two rules are intentionally different.
"""

import re

_NON_SLUG_RUN = re.compile(r"[^a-z0-9]+")


def to_slug(text: str | None) -> str:
    """Return the canonical document key for `text`.

    Never raises; empty or whitespace-only input yields an empty slug.
    """
    lowered = (text or "").strip().lower()
    return _NON_SLUG_RUN.sub("-", lowered).strip("-")


def to_search_key(text: str | None) -> str:
    """Return the canonical search-cache key for `text`."""
    return (text or "").strip().lower()
