from __future__ import annotations

import pytest

from lexical_gap.models.catalog import (
    LANGUAGES,
    CEFRLevel,
    get_language,
    indefinite_article,
    loading_message,
    text_direction,
)


def test_catalog_has_ten_languages_with_two_rtl() -> None:
    assert len(LANGUAGES) == 10
    assert {item.name for item in LANGUAGES if item.direction == "rtl"} == {
        "Standard Arabic",
        "Urdu",
    }


def test_get_language_is_exact_match() -> None:
    assert get_language("Hindi") is not None
    assert get_language("hindi") is None


@pytest.mark.parametrize(
    ("name", "direction"),
    [("Urdu", "rtl"), ("Standard Arabic", "rtl"), ("French", "ltr"), ("Klingon", "ltr")],
)
def test_text_direction(name: str, direction: str) -> None:
    assert text_direction(name) == direction


@pytest.mark.parametrize(
    ("name", "article"),
    [("English", "an"), ("Italian", "an"), ("Urdu", "an"), ("Spanish", "a"), ("Hindi", "a")],
)
def test_indefinite_article(name: str, article: str) -> None:
    assert indefinite_article(name) == article


def test_loading_message() -> None:
    assert loading_message("Italian", CEFRLevel.C1) == (
        "Our AI linguist is preparing an Italian text at level C1."
    )


def test_levels_are_ordered_and_described() -> None:
    assert [level.value for level in CEFRLevel] == ["A1", "A2", "B1", "B2", "C1", "C2"]
    assert CEFRLevel.C2.description == "Proficiency - Precise & subtle"
