from __future__ import annotations

import re
import unicodedata

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """
    Deterministic URL-safe slug: ASCII-folded, lowercased, runs of anything
    that is not a letter or digit collapsed into single hyphens.

    >>> slugify("Pro Plan")
    'pro-plan'
    """
    folded = unicodedata.normalize("NFKD", str(value or "")).encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM.sub("-", folded.lower()).strip("-")
