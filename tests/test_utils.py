"""Tests for slug generation, path helpers, and cell cleaning."""

from __future__ import annotations

import pytest

from folder_import.utils.helpers import clean_cell, fold_diacritics
from folder_import.utils.paths import is_root, is_within, join_path, looks_like_path, parent_of
from folder_import.utils.slug import SLUG_PLACEHOLDER, slugify


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Acme", "acme"),
        ("Pro X", "pro-x"),
        ("Älvsbyhus AB", "alvsbyhus-ab"),
        ("alvsbyhus-ab", "alvsbyhus-ab"),
        ("Straße 5", "strasse-5"),
        ("Smørrebrød", "smorrebrod"),
        ("  A  /  B  ", "a-b"),
        ("C++ & Co.", "c-co"),
        ("---", SLUG_PLACEHOLDER),
        ("", SLUG_PLACEHOLDER),
    ],
)
def test_slugify(name: str, expected: str) -> None:
    assert slugify(name) == expected


def test_slugify_is_idempotent() -> None:
    for name in ("Älvsbyhus AB", "Pro X 2000", "Citroën C4 Picasso"):
        assert slugify(slugify(name)) == slugify(name)


def test_slug_contains_only_url_safe_characters() -> None:
    slug = slugify("Ça va? Ja, natürlich! 100%")
    assert slug == "ca-va-ja-naturlich-100"
    assert not slug.startswith("-") and not slug.endswith("-")


def test_fold_diacritics_keeps_base_letters() -> None:
    assert fold_diacritics("Élan Citroën") == "Elan Citroen"


def test_is_root() -> None:
    assert is_root(None)
    assert is_root("/")
    assert is_root("")
    assert not is_root("/acme")


def test_looks_like_path_rejects_identifiers() -> None:
    assert looks_like_path("/acme/pro")
    assert not looks_like_path("64f1a2b3c4d5-nl-published")
    assert not looks_like_path(None)


def test_join_path() -> None:
    assert join_path("/", "acme") == "/acme"
    assert join_path(None, "acme") == "/acme"
    assert join_path("/acme", "pro") == "/acme/pro"
    assert join_path("/acme/", "pro") == "/acme/pro"


def test_is_within_matches_whole_segments() -> None:
    assert is_within("/acme/pro", "/acme")
    assert is_within("/acme/pro/pro-x", "/acme")
    assert not is_within("/acme-pro/x", "/acme")
    assert not is_within("/acme", "/acme")
    assert not is_within("/other/pro", "/acme")


def test_parent_of() -> None:
    assert parent_of("/acme/pro") == "/acme"
    assert parent_of("/acme") == "/"
    assert parent_of("raw-id") is None


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, ""),
        ("  Acme  ", "Acme"),
        ("Pro  X", "Pro  X"),
        (2000.0, "2000"),
        (2.5, "2.5"),
        (7, "7"),
    ],
)
def test_clean_cell(value: object, expected: str) -> None:
    assert clean_cell(value) == expected
