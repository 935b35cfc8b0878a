"""Text normalization for page identity comparison."""
from __future__ import annotations

import re
from typing import Optional, Set

# Tokens shorter than this are mostly page numbers, list markers and
# punctuation fragments.
MIN_TOKEN_LENGTH = 3

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_text(text: Optional[str]) -> str:
    """
    Canonicalize page text for comparison.

    Lowercases, collapses every run of non-alphanumeric characters into a
    single space, and strips the ends.

    Examples:
        >>> normalize_text("  Section 4.2 -- RESULTS!  ")
        'section 4 2 results'
        >>> normalize_text(None)
        ''
    """
    if not text:
        return ""
    return _NON_ALNUM.sub(" ", text.lower()).strip()


def tokenize(text: Optional[str]) -> Set[str]:
    """Return the set of normalized tokens with at least ``MIN_TOKEN_LENGTH`` characters."""
    return {token for token in normalize_text(text).split() if len(token) >= MIN_TOKEN_LENGTH}
