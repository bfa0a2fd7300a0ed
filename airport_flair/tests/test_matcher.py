"""
Tests for the three-letter code tokenizer.
"""

from __future__ import annotations

from airport_flair.matcher import iter_occurrences


def _texts(text: str) -> list[str]:
    return [occ.raw_text for occ in iter_occurrences(text)]


class TestBoundaries:
    def test_single_code(self):
        occs = list(iter_occurrences("fly SFO today"))
        assert [o.raw_text for o in occs] == ["fly", "SFO"]
        sfo = occs[1]
        assert (sfo.start, sfo.end) == (4, 7)
        assert "fly SFO today"[sfo.start:sfo.end] == "SFO"

    def test_slash_separated_codes_match_independently(self):
        assert _texts("SFO/JFK") == ["SFO", "JFK"]

    def test_unbroken_six_letter_run_matches_nothing(self):
        assert _texts("SFOJFK") == []

    def test_adjacent_digit_blocks_match(self):
        assert _texts("A320 and 3SFO or SFO2") == ["and"]

    def test_underscore_is_a_word_character(self):
        assert _texts("SFO_JFK") == []

    def test_two_and_four_letter_words_ignored(self):
        assert _texts("to be LAXX or LA") == []

    def test_punctuation_boundaries(self):
        assert _texts("(LAX), 'jfk'. SFO!") == ["LAX", "jfk", "SFO"]


class TestCasingAndLaziness:
    def test_casing_preserved(self):
        assert _texts("Sfo sfo SFO") == ["Sfo", "sfo", "SFO"]

    def test_code_property_is_uppercase(self):
        (occ,) = list(iter_occurrences("lax"))
        assert occ.code == "LAX"
        assert occ.raw_text == "lax"

    def test_iterator_is_lazy_and_single_pass(self):
        it = iter_occurrences("SFO JFK")
        assert next(it).raw_text == "SFO"
        assert next(it).raw_text == "JFK"
        assert list(it) == []

    def test_empty_text(self):
        assert list(iter_occurrences("")) == []
