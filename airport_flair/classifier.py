"""Decides what to do with each three-letter occurrence."""

from __future__ import annotations

import logging

from airport_flair.models import SKIP, Decision, DecisionKind, Occurrence
from airport_flair.registry import Registry

logger = logging.getLogger(__name__)


class Classifier:
    """
    Resolve an occurrence against the registry.

    Rules, in order:
      1. Blocklisted codes are never auto-confirmed: they become candidates
         when a table knows them and are skipped otherwise.
      2. Codes unknown to both tables are skipped.
      3. Codes typed in full uppercase are confirmed, anything else is a candidate.
    An airport always wins over a metro area sharing the same code.
    """

    def __init__(self, registry: Registry):
        self.registry = registry

    def classify(self, occurrence: Occurrence) -> Decision:
        code = occurrence.code
        entry, is_group = self.registry.resolve(code)

        if entry is None:
            return SKIP

        if self.registry.is_blocked(code):
            logger.debug("Blocklisted code %s offered as candidate", code)
            return Decision(DecisionKind.CANDIDATE, entry, is_group)

        if occurrence.raw_text == code:
            return Decision(DecisionKind.CONFIRMED, entry, is_group)
        return Decision(DecisionKind.CANDIDATE, entry, is_group)
