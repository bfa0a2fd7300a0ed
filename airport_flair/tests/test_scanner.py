"""
Tests for full scans: splicing, exclusion and idempotence.
"""

from __future__ import annotations

import pytest
from bs4 import NavigableString

from airport_flair.classifier import Classifier
from airport_flair.exclusion import ContainerKind, container_kind, is_excluded
from airport_flair.lifecycle import AnnotationLifecycle, is_candidate, is_confirmed
from airport_flair.scanner import Scanner


@pytest.fixture
def build(registry, settings, make_document):
    def _build(body: str):
        document = make_document(body)
        lifecycle = AnnotationLifecycle(registry, document, settings)
        return document, Scanner(Classifier(registry), lifecycle, document)
    return _build


def _annotations(document):
    return [t for t in document.root.find_all(True) if is_confirmed(t) or is_candidate(t)]


class TestSplicing:
    def test_uppercase_code_confirmed(self, build):
        document, scanner = build("<p>fly SFO today</p>")
        assert scanner.scan(document.root) == 1
        (node,) = _annotations(document)
        assert is_confirmed(node)
        assert document.root.p.get_text() == "fly SFO× today"

    def test_lowercase_code_candidate(self, build):
        document, scanner = build("<p>fly sfo today</p>")
        scanner.scan(document.root)
        (node,) = _annotations(document)
        assert is_candidate(node)
        assert node.get_text() == "sfo"

    def test_surrounding_text_preserved(self, build):
        document, scanner = build("<p>From SFO/JFK, then xyz LAX.</p>")
        scanner.scan(document.root)
        p = document.root.p
        texts = [c if isinstance(c, NavigableString) else c.contents[0] for c in p.contents]
        assert texts == ["From ", "SFO", "/", "JFK", ", then xyz ", "LAX", "."]

    def test_glued_codes_not_matched(self, build):
        document, scanner = build("<p>SFOJFK</p>")
        assert scanner.scan(document.root) == 0
        assert _annotations(document) == []

    def test_text_without_known_codes_untouched(self, build):
        document, scanner = build("<p>nothing to see here abc</p>")
        before = str(document.soup)
        assert scanner.scan(document.root) == 0
        assert str(document.soup) == before

    def test_nested_elements(self, build):
        document, scanner = build("<div><p>to <b>LHR</b> and <i>nyc</i></p></div>")
        assert scanner.scan(document.root) == 2
        labels = sorted(t.get_text()[:3] for t in _annotations(document))
        assert labels == ["LHR", "nyc"]

    def test_comments_are_not_scanned(self, build):
        document, scanner = build("<p><!-- SFO --></p>")
        assert scanner.scan(document.root) == 0


class TestExclusion:
    @pytest.mark.parametrize("body", [
        "<a href='/x'>SFO</a>",
        "<a href='/x'><span>SFO</span></a>",
        "<script>var x = 'SFO';</script>",
        "<style>.SFO { color: red }</style>",
        "<textarea>SFO</textarea>",
        "<div contenteditable='true'><p>SFO</p></div>",
        "<div contenteditable><p>SFO</p></div>",
    ])
    def test_excluded_regions_never_annotated(self, build, body):
        document, scanner = build(body)
        assert scanner.scan(document.root) == 0
        assert _annotations(document) == []

    def test_contenteditable_false_is_scanned(self, build):
        document, scanner = build("<div contenteditable='false'>SFO</div>")
        assert scanner.scan(document.root) == 1

    def test_scan_rooted_inside_excluded_region(self, build):
        document, scanner = build("<a href='/x'><span id='s'>SFO</span></a>")
        assert scanner.scan(document.soup.find(id="s")) == 0
        assert scanner.scan(document.soup.find(id="s").string) == 0

    def test_container_kinds(self, make_document):
        document = make_document(
            "<a></a><script></script><style></style><input><select></select>"
            "<p contenteditable='plaintext-only'></p><span class='airport-flair'></span><p></p>"
        )
        kinds = [container_kind(t) for t in document.root.find_all(True)]
        assert kinds == [
            ContainerKind.LINK, ContainerKind.SCRIPT, ContainerKind.STYLE,
            ContainerKind.FORM_INPUT, ContainerKind.FORM_INPUT, ContainerKind.EDITABLE,
            ContainerKind.ANNOTATION, None,
        ]

    def test_is_excluded_checks_ancestors(self, make_document):
        document = make_document("<a><b><i>x</i></b></a>")
        assert is_excluded(document.root.find("i").string)


class TestIdempotence:
    def test_second_scan_changes_nothing(self, build):
        document, scanner = build(
            "<p>fly SFO today, then lax, the end. NYC or LON? See <a href='#'>JFK</a></p>"
        )
        assert scanner.scan(document.root) > 0
        snapshot = str(document.soup)

        seen = []
        document.observe(seen.extend)
        assert scanner.scan(document.root) == 0
        document.deliver()
        assert seen == []
        assert str(document.soup) == snapshot

    def test_annotation_text_is_never_retokenized(self, build):
        document, scanner = build("<p>SFO</p>")
        scanner.scan(document.root)
        (node,) = _annotations(document)
        assert scanner.scan(node) == 0
        assert scanner.scan(node.contents[0]) == 0
