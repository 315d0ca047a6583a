"""General-purpose text helpers."""

from __future__ import annotations

import unicodedata


def fold_diacritics(text: str) -> str:
    """Remove diacritics by decomposing unicode characters."""

    normalized = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in normalized if not unicodedata.combining(ch))


def clean_cell(value: object) -> str:
    """Render a spreadsheet cell as a trimmed string; ``None`` becomes ``""``."""

    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


__all__ = ["fold_diacritics", "clean_cell"]
