"""Hierarchy resolution public API."""

from __future__ import annotations

from .resolver import HierarchyResolver

__all__ = ["HierarchyResolver"]
