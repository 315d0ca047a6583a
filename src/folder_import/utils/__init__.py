"""Utility helpers shared across folder import modules."""

from .helpers import clean_cell, fold_diacritics
from .logging import configure_logging, get_logger, logging_context
from .paths import ROOT_PATH, is_root, is_within, join_path, looks_like_path, parent_of
from .slug import SLUG_PLACEHOLDER, slugify, transliterate

__all__ = [
    "configure_logging",
    "get_logger",
    "logging_context",
    "clean_cell",
    "fold_diacritics",
    "ROOT_PATH",
    "is_root",
    "is_within",
    "join_path",
    "looks_like_path",
    "parent_of",
    "SLUG_PLACEHOLDER",
    "slugify",
    "transliterate",
]
