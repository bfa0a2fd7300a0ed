"""
Tokenizer for three-letter location codes.

Matching uses a single pre-compiled word-boundary regex. A run of three ASCII
letters only counts when it is not glued to another letter, digit or
underscore, so "SFO/JFK" gives two tokens while "SFOJFK" and "A320" give none.
The source casing is kept; lookups upper-case it later.
"""

from __future__ import annotations

import re
from typing import Iterator

from airport_flair.models import Occurrence

CODE_RE = re.compile(r"\b([A-Za-z]{3})\b")


def iter_occurrences(text: str) -> Iterator[Occurrence]:
    """Yield every whole-word three-letter run in `text`, left to right."""
    for match in CODE_RE.finditer(text):
        yield Occurrence(raw_text=match.group(1), start=match.start(1), end=match.end(1))
