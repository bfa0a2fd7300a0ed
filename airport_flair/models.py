"""
Pydantic models and value types shared by the registry, classifier and lifecycle.
These are pure data objects with no document coupling.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, ValidationInfo, field_validator


# ── Registry entities ─────────────────────────────────────────────────

class PrimaryEntity(BaseModel):
    """A single airport, keyed by its own IATA code."""
    code: str = Field(..., alias="iata_code", min_length=3, max_length=3)
    display_name: str = Field("", alias="name", validate_default=True)
    locality: Optional[str] = Field(None, alias="municipality")
    region_code: Optional[str] = Field(None, alias="iso_country")

    model_config = {"populate_by_name": True, "extra": "ignore", "frozen": True}

    @field_validator("code", mode="before")
    @classmethod
    def upper_code(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("display_name", mode="before")
    @classmethod
    def name_or_code(cls, v, info: ValidationInfo):
        """A missing or non-text name falls back to the code itself."""
        if isinstance(v, str) and v.strip():
            return v.strip()
        return info.data.get("code", v)

    @field_validator("locality", mode="before")
    @classmethod
    def text_locality(cls, v):
        if not isinstance(v, str) or not v.strip():
            return None
        return v.strip()

    @field_validator("region_code", mode="before")
    @classmethod
    def two_letter_region(cls, v):
        """Anything that is not a two-letter code is treated as missing."""
        if isinstance(v, str) and len(v.strip()) == 2 and v.strip().isalpha():
            return v.strip().upper()
        return None


class GroupEntity(BaseModel):
    """A metropolitan area code covering several airports (e.g. NYC, LON)."""
    code: str = Field(..., min_length=3, max_length=3)
    display_name: str = Field("", alias="name", validate_default=True)
    # Borrowed only to pick a flag; the referenced airport may be absent.
    flag_proxy_code: Optional[str] = Field(None, alias="flag_airport")

    model_config = {"populate_by_name": True, "extra": "ignore", "frozen": True}

    @field_validator("code", "flag_proxy_code", mode="before")
    @classmethod
    def upper_codes(cls, v):
        if isinstance(v, str):
            return v.strip().upper() or None
        return v

    @field_validator("display_name", mode="before")
    @classmethod
    def name_or_code(cls, v, info: ValidationInfo):
        if isinstance(v, str) and v.strip():
            return v.strip()
        return info.data.get("code", v)


Entity = Union[PrimaryEntity, GroupEntity]


class LoadResult(BaseModel):
    """Outcome of loading both registry tables."""
    primary_loaded: bool = False
    group_loaded: bool = False
    primary_count: int = 0
    group_count: int = 0
    dropped_records: int = 0
    errors: list[str] = Field(default_factory=list)
    # Populated only when the primary table loaded
    registry: Optional[Any] = Field(None, exclude=True)


# ── Scan-time values ──────────────────────────────────────────────────

@dataclass(frozen=True)
class Occurrence:
    raw_text: str   # casing as typed
    start: int
    end: int

    @property
    def code(self) -> str:
        return self.raw_text.upper()


class DecisionKind(str, Enum):
    SKIP = "skip"
    CANDIDATE = "candidate"
    CONFIRMED = "confirmed"


@dataclass(frozen=True)
class Decision:
    kind: DecisionKind
    entry: Optional[Entity] = None
    is_group: bool = False


SKIP = Decision(DecisionKind.SKIP)


@dataclass(frozen=True)
class Provenance:
    """State stored on an annotation node, enough to rebuild either state."""
    code: str
    original_casing: str
    is_group: bool = False
