"""
Annotation nodes and the transitions between them.

Three shapes are produced, all carrying PROCESSED_MARK so the scanner never
tokenizes them again:

  confirmed  <a class="airport-flair ..."> label, optional flag, dismiss control
  candidate  <span class="potential-airport-code ..."> original text, one-shot confirm
  plain      <span class="airport-flair-processed"> inert text

Both annotation shapes store code, original casing and table (airport or
metro area) as data attributes, so either one can be rebuilt from the other
without classifying again. confirm() and dismiss() always look the code up in
the current registry instead of trusting what was captured at scan time.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote_plus

from bs4 import BeautifulSoup, Tag
from bs4.element import PageElement

from airport_flair.config import Settings, get_settings
from airport_flair.document import LiveDocument
from airport_flair.exclusion import (
    CANDIDATE_CLASS,
    DISMISS_CLASS,
    FLAG_CLASS,
    FLAIR_CLASS,
    PROCESSED_MARK,
)
from airport_flair.models import Entity, PrimaryEntity, Provenance
from airport_flair.registry import Registry

logger = logging.getLogger(__name__)


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _classes(tag: Tag) -> list[str]:
    classes = tag.get("class") or []
    return classes.split() if isinstance(classes, str) else classes


def is_confirmed(node: PageElement) -> bool:
    return isinstance(node, Tag) and FLAIR_CLASS in _classes(node)


def is_candidate(node: PageElement) -> bool:
    return isinstance(node, Tag) and CANDIDATE_CLASS in _classes(node)


class AnnotationLifecycle:
    def __init__(
        self,
        registry: Registry,
        document: LiveDocument,
        settings: Optional[Settings] = None,
    ):
        self.registry = registry
        self.document = document
        self.markup = (settings or get_settings()).markup
        # Produced tags are created in a private soup and moved into the document
        self._factory = BeautifulSoup("", "html.parser")

    # ── Builders ───────────────────────────────────────────────────────

    def to_confirmed(
        self,
        code: str,
        entry: Entity,
        is_group: bool,
        original_casing: Optional[str] = None,
    ) -> Tag:
        code = code.upper()
        anchor = self._factory.new_tag(
            "a",
            attrs={
                "class": [FLAIR_CLASS, PROCESSED_MARK],
                "href": self.markup.search_url.format(query=quote_plus(entry.display_name)),
                "target": self.markup.link_target,
                "rel": "noopener noreferrer",
                "title": self._describe(code, entry),
            },
        )
        anchor.append(code)

        region = self.registry.region_for(entry)
        if region:
            anchor.append(self._factory.new_tag(
                "img",
                attrs={
                    "class": [FLAG_CLASS],
                    "src": self.markup.flag_url.format(region=region.lower()),
                    "alt": f"{region} flag",
                },
            ))

        revert_to = original_casing if original_casing and original_casing != code else code
        control = self._factory.new_tag(
            "span",
            attrs={
                "class": [DISMISS_CLASS],
                "data-code": code,
                "data-group": _flag(is_group),
                "title": f"Revert to '{revert_to}' (potential airport code)",
            },
        )
        if original_casing and original_casing != code:
            control["data-original-casing"] = original_casing
        control.append("×")
        anchor.append(control)
        return anchor

    def to_candidate(self, original_casing: str, entry: Entity, is_group: bool) -> Tag:
        code = original_casing.upper()
        span = self._factory.new_tag(
            "span",
            attrs={
                "class": [CANDIDATE_CLASS, PROCESSED_MARK],
                "data-original-code": original_casing,
                "data-code": code,
                "data-group": _flag(is_group),
                "title": f"Recognize {code} as an airport? ({entry.display_name})",
            },
        )
        span.append(original_casing)
        return span

    def to_plain(self, text: str) -> Tag:
        span = self._factory.new_tag("span", attrs={"class": [PROCESSED_MARK]})
        span.append(text)
        return span

    def _describe(self, code: str, entry: Entity) -> str:
        title = f"{entry.display_name} ({code})"
        if isinstance(entry, PrimaryEntity):
            if entry.locality:
                title += f", {entry.locality}"
            if entry.region_code:
                title += f", {entry.region_code}"
        return title

    # ── Provenance ─────────────────────────────────────────────────────

    @staticmethod
    def annotation_of(node: PageElement) -> Optional[Tag]:
        """The confirmed or candidate tag that `node` is, or sits inside."""
        current = node if isinstance(node, Tag) else node.parent
        while current is not None:
            if is_confirmed(current) or is_candidate(current):
                return current
            current = current.parent
        return None

    @staticmethod
    def provenance(node: Tag) -> Provenance:
        if is_candidate(node):
            original = node.get("data-original-code") or node.get_text()
            code = node.get("data-code") or original.upper()
            return Provenance(code=code, original_casing=original,
                              is_group=node.get("data-group") == "true")
        if is_confirmed(node):
            control = node.find("span", class_=DISMISS_CLASS)
            if control is None:
                raise ValueError("confirmed annotation has no dismiss control")
            code = control["data-code"]
            return Provenance(code=code,
                              original_casing=control.get("data-original-casing") or code,
                              is_group=control.get("data-group") == "true")
        raise ValueError(f"not an annotation node: {node!r}")

    # ── Transitions ────────────────────────────────────────────────────

    def confirm(self, candidate: Tag) -> Optional[Tag]:
        """
        Turn a candidate into a confirmed annotation. A candidate can be
        confirmed once: afterwards it is detached and further calls return None.
        A code the registry no longer knows leaves the candidate in place.
        """
        if not is_candidate(candidate):
            raise ValueError(f"not a candidate annotation: {candidate!r}")
        if candidate.parent is None:
            logger.debug("Ignoring confirm on a consumed candidate")
            return None

        prov = self.provenance(candidate)
        entry = self.registry.lookup(prov.code, prov.is_group)
        if entry is None:
            logger.debug("Candidate %s no longer resolves, left unchanged", prov.code)
            return None

        confirmed = self.to_confirmed(prov.code, entry, prov.is_group, prov.original_casing)
        self.document.replace(candidate, confirmed)
        logger.debug("Confirmed %s (group=%s)", prov.code, prov.is_group)
        return confirmed

    def dismiss(self, node: PageElement) -> Optional[Tag]:
        """
        Revert a confirmed annotation (or its dismiss control) to a candidate.
        Falls back to inert processed text if the registry lost the code.
        """
        confirmed = self.annotation_of(node)
        if confirmed is None or not is_confirmed(confirmed):
            raise ValueError(f"not a confirmed annotation: {node!r}")
        if confirmed.parent is None:
            logger.debug("Ignoring dismiss on a detached annotation")
            return None

        prov = self.provenance(confirmed)
        entry, is_group = self.registry.resolve(prov.code, prefer_group=prov.is_group)
        if entry is not None:
            replacement = self.to_candidate(prov.original_casing, entry, is_group)
        else:
            logger.warning("Dismissed %s no longer resolves, reverting to text", prov.code)
            replacement = self.to_plain(prov.original_casing)

        self.document.replace(confirmed, replacement)
        return replacement
