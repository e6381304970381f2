import pytest

from healing_guide.core.normalizer import to_search_key, to_slug


def test_slug_collapses_case_and_punctuation():
    assert to_slug("Dolor de Cabeza") == "dolor-de-cabeza"
    assert to_slug("dolor-de-cabeza!!") == "dolor-de-cabeza"
    assert to_slug("  DOLOR   de...cabeza  ") == "dolor-de-cabeza"


@pytest.mark.parametrize("text", ["Dolor de Cabeza", "--Tendón de Aquiles--", "a__b", "", "   ", "¡¡!!"])
def test_slug_is_idempotent(text):
    once = to_slug(text)
    assert to_slug(once) == once


def test_slug_is_total_for_empty_input():
    assert to_slug("") == ""
    assert to_slug("   ") == ""
    assert to_slug(None) == ""
    assert to_slug("***") == ""


def test_slug_treats_accented_letters_as_separators():
    assert to_slug("Tendón de Aquiles") == "tend-n-de-aquiles"


def test_search_key_only_trims_and_lowercases():
    assert to_search_key("  Dolor de Cabeza!! ") == "dolor de cabeza!!"
    assert to_search_key("ANSI") == "ansi"
    assert to_search_key(None) == ""
