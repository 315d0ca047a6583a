"""Helpers for slash-separated hierarchical folder paths."""

from __future__ import annotations

ROOT_PATH = "/"


def is_root(path: str | None) -> bool:
    return path is None or path == ROOT_PATH or path == ""


def looks_like_path(value: str | None) -> bool:
    """Paths always start at the root marker; raw identifiers never do."""

    return bool(value) and value.startswith(ROOT_PATH)


def join_path(parent: str | None, segment: str) -> str:
    if is_root(parent):
        return f"{ROOT_PATH}{segment}"
    return f"{parent.rstrip(ROOT_PATH)}{ROOT_PATH}{segment}"


def is_within(path: str, parent: str | None) -> bool:
    """Return ``True`` when ``path`` lies strictly below ``parent``.

    Matching happens on whole segments: ``/acme-pro/x`` is not within ``/acme``.
    """

    if is_root(parent):
        return looks_like_path(path)
    prefix = parent.rstrip(ROOT_PATH) + ROOT_PATH
    return path.startswith(prefix) and len(path) > len(prefix)


def parent_of(path: str | None) -> str | None:
    if not looks_like_path(path):
        return None
    trimmed = path.rstrip(ROOT_PATH)
    head, _, _ = trimmed.rpartition(ROOT_PATH)
    return head or ROOT_PATH


__all__ = ["ROOT_PATH", "is_root", "is_within", "join_path", "looks_like_path", "parent_of"]
