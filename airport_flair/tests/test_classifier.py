"""
Tests for code classification: blocklist gate, precedence, casing.
"""

from __future__ import annotations

import pytest

from airport_flair.classifier import Classifier
from airport_flair.models import DecisionKind, GroupEntity, Occurrence, PrimaryEntity
from airport_flair.registry import Registry


def _occ(text: str) -> Occurrence:
    return Occurrence(raw_text=text, start=0, end=len(text))


@pytest.fixture
def classifier(registry):
    return Classifier(registry)


class TestCasing:
    def test_uppercase_known_code_is_confirmed(self, classifier):
        decision = classifier.classify(_occ("SFO"))
        assert decision.kind is DecisionKind.CONFIRMED
        assert decision.entry.code == "SFO"
        assert decision.is_group is False

    def test_lowercase_known_code_is_candidate(self, classifier):
        decision = classifier.classify(_occ("sfo"))
        assert decision.kind is DecisionKind.CANDIDATE
        assert decision.entry.code == "SFO"

    def test_mixed_case_known_code_is_candidate(self, classifier):
        assert classifier.classify(_occ("Sfo")).kind is DecisionKind.CANDIDATE

    def test_unknown_code_is_skipped(self, classifier):
        decision = classifier.classify(_occ("XQZ"))
        assert decision.kind is DecisionKind.SKIP
        assert decision.entry is None


class TestPrecedence:
    def test_airport_wins_over_metro_area(self, classifier):
        decision = classifier.classify(_occ("HOU"))
        assert decision.kind is DecisionKind.CONFIRMED
        assert isinstance(decision.entry, PrimaryEntity)
        assert decision.entry.display_name == "William P. Hobby Airport"
        assert decision.is_group is False

    def test_metro_area_used_when_no_airport(self, classifier):
        decision = classifier.classify(_occ("NYC"))
        assert decision.kind is DecisionKind.CONFIRMED
        assert isinstance(decision.entry, GroupEntity)
        assert decision.is_group is True

    def test_lowercase_metro_area_is_candidate(self, classifier):
        decision = classifier.classify(_occ("lon"))
        assert decision.kind is DecisionKind.CANDIDATE
        assert decision.is_group is True


class TestBlocklist:
    def test_blocklisted_known_code_is_candidate_even_uppercase(self, classifier):
        decision = classifier.classify(_occ("THE"))
        assert decision.kind is DecisionKind.CANDIDATE
        assert decision.entry.code == "THE"

    def test_blocklisted_lowercase_known_code_is_candidate(self, classifier):
        assert classifier.classify(_occ("the")).kind is DecisionKind.CANDIDATE

    def test_blocklisted_unknown_code_is_skipped(self, classifier):
        assert classifier.classify(_occ("USD")).kind is DecisionKind.SKIP
        assert classifier.classify(_occ("lol")).kind is DecisionKind.SKIP

    def test_blocklisted_metro_area_is_candidate(self):
        registry = Registry.build(
            primary={},
            group={"WAS": GroupEntity(code="WAS", display_name="Washington (all airports)")},
        )
        decision = Classifier(registry).classify(_occ("WAS"))
        assert decision.kind is DecisionKind.CANDIDATE
        assert decision.is_group is True
