"""
Engine facade tying registry, scanner and lifecycle to one live document.

Entry points:
  initialize(primary, group)  load both tables; refuses to run without airports
  attach(document)            initial full scan + subscribe to insertions
  scan(root) / rescan(nodes)  explicit full / incremental scans
  activate(candidate)         user confirms a candidate
  dismiss(node)               user reverts a confirmed annotation
  teardown()                  drop the subscription
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from bs4 import Tag
from bs4.element import PageElement

from airport_flair.classifier import Classifier
from airport_flair.config import Settings, get_settings
from airport_flair.document import LiveDocument, MutationRecord, Subscription
from airport_flair.errors import EngineNotRunningError
from airport_flair.lifecycle import AnnotationLifecycle
from airport_flair.models import LoadResult
from airport_flair.registry import Registry, Source, load
from airport_flair.scanner import Scanner

logger = logging.getLogger(__name__)


class FlairEngine:
    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.registry: Optional[Registry] = None
        self.document: Optional[LiveDocument] = None
        self.lifecycle: Optional[AnnotationLifecycle] = None
        self.scanner: Optional[Scanner] = None
        self._subscription: Optional[Subscription] = None

    @property
    def running(self) -> bool:
        return self.registry is not None

    def initialize(self, primary_source: Source, group_source: Source) -> LoadResult:
        result = load(primary_source, group_source)
        if not result.primary_loaded:
            logger.error("Airport flair will not run due to data loading issues")
            return result
        self.registry = result.registry
        return result

    def attach(self, document: LiveDocument) -> int:
        """Bind to a document, scan all of it, then follow its insertions."""
        registry = self._require_registry()
        self.teardown()

        self.document = document
        self.lifecycle = AnnotationLifecycle(registry, document, self.settings)
        self.scanner = Scanner(Classifier(registry), self.lifecycle, document)

        logger.info("Processing document for airport codes...")
        replaced = self.scanner.scan(document.root)
        self._subscription = document.observe(self._on_mutations)
        logger.info("Initial scan annotated %d text leaves; observing insertions", replaced)
        return replaced

    def scan(self, root: PageElement) -> int:
        return self._require_scanner().scan(root)

    def rescan(self, added_nodes: Iterable[PageElement]) -> int:
        return self._require_scanner().rescan(added_nodes)

    def activate(self, candidate: Tag) -> Optional[Tag]:
        self._require_scanner()
        return self.lifecycle.confirm(candidate)

    def dismiss(self, node: PageElement) -> Optional[Tag]:
        self._require_scanner()
        return self.lifecycle.dismiss(node)

    def teardown(self) -> None:
        if self._subscription is not None:
            self._subscription.disconnect()
            self._subscription = None
            logger.info("Stopped observing document insertions")

    def _on_mutations(self, batch: list[MutationRecord]) -> None:
        replaced = 0
        for record in batch:
            replaced += self.scanner.rescan(record.added_nodes)
        if replaced:
            logger.debug("Mutation batch of %d record(s) annotated %d text leaves",
                         len(batch), replaced)

    def _require_registry(self) -> Registry:
        if self.registry is None:
            raise EngineNotRunningError("primary registry is not loaded")
        return self.registry

    def _require_scanner(self) -> Scanner:
        self._require_registry()
        if self.scanner is None:
            raise EngineNotRunningError("no document attached")
        return self.scanner
