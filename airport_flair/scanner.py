"""
Full and incremental scanning of a document subtree.

scan() walks a subtree top-down and replaces each eligible text leaf that
contains at least one annotatable code. Text around the matches is kept
verbatim. rescan() is fed the nodes reported by one mutation batch and skips
anything the engine produced itself, which is what keeps the engine's own
insertions from feeding back into another scan.
"""

from __future__ import annotations

import logging
from typing import Iterable

from bs4 import NavigableString, Tag
from bs4.element import PageElement, PreformattedString

from airport_flair.classifier import Classifier
from airport_flair.document import LiveDocument
from airport_flair.exclusion import container_kind, has_processed_mark, is_decided, is_excluded
from airport_flair.lifecycle import AnnotationLifecycle
from airport_flair.matcher import iter_occurrences
from airport_flair.models import DecisionKind

logger = logging.getLogger(__name__)


class Scanner:
    def __init__(
        self,
        classifier: Classifier,
        lifecycle: AnnotationLifecycle,
        document: LiveDocument,
    ):
        self.classifier = classifier
        self.lifecycle = lifecycle
        self.document = document

    def scan(self, root: PageElement) -> int:
        """Annotate everything eligible under `root`. Returns the number of text leaves replaced."""
        if isinstance(root, NavigableString):
            return self._scan_text(root)
        if not isinstance(root, Tag) or is_decided(root) or is_excluded(root):
            return 0
        return self._walk(root)

    def rescan(self, added_nodes: Iterable[PageElement]) -> int:
        replaced = 0
        for node in added_nodes:
            if has_processed_mark(node):
                continue
            if node.parent is None:
                # Replaced again before this batch was delivered
                continue
            replaced += self.scan(node)
        return replaced

    def _walk(self, tag: Tag) -> int:
        replaced = 0
        # Snapshot: replacing a text leaf changes tag.contents
        for child in list(tag.contents):
            if isinstance(child, NavigableString):
                replaced += self._scan_text(child, checked=True)
            elif isinstance(child, Tag):
                if has_processed_mark(child) or container_kind(child) is not None:
                    continue
                replaced += self._walk(child)
        return replaced

    def _scan_text(self, text_node: NavigableString, checked: bool = False) -> int:
        if isinstance(text_node, PreformattedString):
            # comments, CDATA, doctypes, processing instructions
            return 0
        if text_node.parent is None:
            return 0
        if not checked and (is_decided(text_node) or is_excluded(text_node)):
            return 0

        text = str(text_node)
        pieces: list[PageElement] = []
        last = 0
        for occurrence in iter_occurrences(text):
            decision = self.classifier.classify(occurrence)
            if decision.kind is DecisionKind.SKIP:
                continue

            if occurrence.start > last:
                pieces.append(NavigableString(text[last:occurrence.start]))
            if decision.kind is DecisionKind.CONFIRMED:
                pieces.append(self.lifecycle.to_confirmed(
                    occurrence.code, decision.entry, decision.is_group))
            else:
                pieces.append(self.lifecycle.to_candidate(
                    occurrence.raw_text, decision.entry, decision.is_group))
            last = occurrence.end

        if not pieces:
            return 0
        if last < len(text):
            pieces.append(NavigableString(text[last:]))

        self.document.replace(text_node, *pieces)
        logger.debug("Annotated text leaf under <%s>", getattr(pieces[0].parent, "name", "?"))
        return 1
