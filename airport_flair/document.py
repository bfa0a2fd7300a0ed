"""
A parsed HTML document that reports content insertions.

Every mutation made through LiveDocument is recorded as a MutationRecord and
queued. deliver() hands the queued records to each subscriber one batch at a
time, in the order the mutations happened. A deliver() issued from inside a
subscriber callback only leaves the new records queued; the outer delivery
loop picks them up once the current batch returns.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Optional

from bs4 import BeautifulSoup, Tag
from bs4.element import PageElement

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class MutationRecord:
    target: Optional[PageElement]
    added_nodes: tuple[PageElement, ...] = ()
    removed_nodes: tuple[PageElement, ...] = ()


MutationCallback = Callable[[list[MutationRecord]], None]


@dataclass(eq=False)
class Subscription:
    document: "LiveDocument"
    callback: MutationCallback
    active: bool = True

    def disconnect(self) -> None:
        if self.active:
            self.document._unsubscribe(self)
            self.active = False


@dataclass(eq=False)
class LiveDocument:
    soup: BeautifulSoup
    _pending: deque = field(default_factory=deque)
    _subscribers: list[Subscription] = field(default_factory=list)
    _delivering: bool = False

    @classmethod
    def parse(cls, markup: str, features: str = "html.parser") -> "LiveDocument":
        return cls(BeautifulSoup(markup, features))

    @property
    def root(self) -> Tag:
        return self.soup.body or self.soup

    def render(self) -> str:
        return str(self.soup)

    # ── Mutations ──────────────────────────────────────────────────────

    def append(self, parent: Tag, *nodes: PageElement) -> None:
        for node in nodes:
            parent.append(node)
        self._record(MutationRecord(parent, added_nodes=tuple(nodes)))

    def insert_html(self, parent: Tag, markup: str) -> list[PageElement]:
        """Parse a fragment and append its top-level nodes to `parent`."""
        fragment = BeautifulSoup(markup, "html.parser")
        nodes = list(fragment.contents)
        for node in nodes:
            node.extract()
        self.append(parent, *nodes)
        return nodes

    def replace(self, old: PageElement, *new: PageElement) -> None:
        """Swap one node for one or more nodes at the same position."""
        parent = old.parent
        if parent is None:
            raise ValueError("cannot replace a node that is not attached")
        old.replace_with(*new)
        self._record(MutationRecord(parent, added_nodes=tuple(new), removed_nodes=(old,)))

    # ── Notification queue ─────────────────────────────────────────────

    def observe(self, callback: MutationCallback) -> Subscription:
        subscription = Subscription(self, callback)
        self._subscribers.append(subscription)
        return subscription

    def _unsubscribe(self, subscription: Subscription) -> None:
        if subscription in self._subscribers:
            self._subscribers.remove(subscription)

    def _record(self, record: MutationRecord) -> None:
        if self._subscribers:
            self._pending.append(record)

    def take_records(self) -> list[MutationRecord]:
        records = list(self._pending)
        self._pending.clear()
        return records

    def deliver(self) -> int:
        """Flush queued records to subscribers. Returns the number of batches delivered."""
        if self._delivering:
            return 0
        self._delivering = True
        batches = 0
        try:
            while self._pending and self._subscribers:
                batch = self.take_records()
                batches += 1
                for subscription in list(self._subscribers):
                    if subscription.active:
                        subscription.callback(batch)
        finally:
            self._delivering = False
        if batches:
            logger.debug("Delivered %d mutation batch(es)", batches)
        return batches
