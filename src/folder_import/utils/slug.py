"""URL-safe path segments derived from display names.

Slugs are only a prediction of the path the remote system assigns to a new
folder. They are used when the search index has not yet caught up with a
create, and never override a path returned by the index.
"""

from __future__ import annotations

import re

from .helpers import fold_diacritics

SLUG_PLACEHOLDER = "unnamed"

# Letters that do not decompose under NFKD.
_TRANSLITERATIONS: dict[str, str] = {
    "ß": "ss",
    "æ": "ae",
    "œ": "oe",
    "ø": "o",
    "đ": "d",
    "ð": "d",
    "þ": "th",
    "ł": "l",
    "ı": "i",
}

_INVALID_CHARACTERS = re.compile(r"[^a-z0-9-]")
_REPEATED_DASHES = re.compile(r"-+")


def transliterate(text: str) -> str:
    """Map accented and special letters to their closest ASCII spelling."""

    substituted = "".join(_TRANSLITERATIONS.get(ch, ch) for ch in text)
    return fold_diacritics(substituted)


def slugify(name: str) -> str:
    """Return the lowercase, hyphenated ASCII slug for ``name``.

    >>> slugify("Älvsbyhus AB")
    'alvsbyhus-ab'
    >>> slugify("  --  ")
    'unnamed'
    """

    slug = transliterate(name.lower())
    slug = _INVALID_CHARACTERS.sub("-", slug)
    slug = _REPEATED_DASHES.sub("-", slug)
    slug = slug.strip("-")
    return slug or SLUG_PLACEHOLDER


__all__ = ["SLUG_PLACEHOLDER", "slugify", "transliterate"]
