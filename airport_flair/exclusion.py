"""
Which parts of a document are opaque to scanning.

Text is never annotated inside links, script/style blocks, form inputs,
editable regions, or anything the engine produced itself. Membership is a
fixed set of ContainerKind values rather than ad-hoc selector checks.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from bs4 import Tag
from bs4.element import PageElement

# ── Markers written onto produced nodes ───────────────────────────────

PROCESSED_MARK = "airport-flair-processed"
FLAIR_CLASS = "airport-flair"
CANDIDATE_CLASS = "potential-airport-code"
DISMISS_CLASS = "dismiss-flair"
FLAG_CLASS = "country-flag"


class ContainerKind(str, Enum):
    LINK = "link"
    SCRIPT = "script"
    STYLE = "style"
    FORM_INPUT = "form_input"
    EDITABLE = "editable"
    ANNOTATION = "annotation"


_TAG_KINDS: dict[str, ContainerKind] = {
    "a": ContainerKind.LINK,
    "script": ContainerKind.SCRIPT,
    "noscript": ContainerKind.SCRIPT,
    "style": ContainerKind.STYLE,
    "input": ContainerKind.FORM_INPUT,
    "textarea": ContainerKind.FORM_INPUT,
    "select": ContainerKind.FORM_INPUT,
}

_EDITABLE_VALUES = {"", "true", "plaintext-only"}


def _classes(tag: Tag) -> list[str]:
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return classes


def container_kind(tag: Tag) -> Optional[ContainerKind]:
    """The exclusion kind of a single tag, or None if its content may be scanned."""
    classes = _classes(tag)
    if FLAIR_CLASS in classes or CANDIDATE_CLASS in classes:
        return ContainerKind.ANNOTATION
    kind = _TAG_KINDS.get((tag.name or "").lower())
    if kind is not None:
        return kind
    editable = tag.get("contenteditable")
    if editable is not None and str(editable).strip().lower() in _EDITABLE_VALUES:
        return ContainerKind.EDITABLE
    return None


def has_processed_mark(node: PageElement) -> bool:
    return isinstance(node, Tag) and PROCESSED_MARK in _classes(node)


def _self_and_ancestors(node: PageElement):
    current = node if isinstance(node, Tag) else node.parent
    while current is not None:
        yield current
        current = current.parent


def is_excluded(node: PageElement) -> bool:
    """True when the node, or any tag enclosing it, is an excluded container."""
    return any(
        isinstance(tag, Tag) and container_kind(tag) is not None
        for tag in _self_and_ancestors(node)
    )


def is_decided(node: PageElement) -> bool:
    """True when the node sits on or under a processed mark."""
    return any(has_processed_mark(tag) for tag in _self_and_ancestors(node))
