"""
Airport and metro-area lookup tables.

Design:
  - The primary table maps an uppercase IATA code to a PrimaryEntity.
  - The group table maps an uppercase metro-area code (NYC, LON, TYO...) to a
    GroupEntity, which may borrow a flag from one airport of the primary table.
  - A compiled-in blocklist gates codes that are mostly acronyms, currencies
    or slang in running text. It never supplies data by itself.
  - The Registry value is built once by load() and never mutated afterwards.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional, Union

from pydantic import ValidationError

from airport_flair.errors import RegistryLoadError
from airport_flair.models import Entity, GroupEntity, LoadResult, PrimaryEntity

logger = logging.getLogger(__name__)

Source = Union[str, bytes, list, dict, None]


# ══════════════════════════════════════════════════════════════════════
# BLOCKLIST
# ══════════════════════════════════════════════════════════════════════

# Three-letter words that collide with real airport codes. A blocklisted code
# that also exists in a table is still offered, but only as a candidate.
BLOCKLIST: frozenset[str] = frozenset({
    # ── English words ──
    "THE", "AND", "FOR", "ARE", "BUT", "NOT", "YOU", "ALL", "ANY", "CAN",
    "HAD", "HER", "WAS", "ONE", "OUR", "OUT", "DAY", "GET", "HAS", "HIM",
    "HIS", "HOW", "MAN", "NEW", "NOW", "OLD", "SEE", "TWO", "WAY", "WHO",
    "BOY", "DID", "ITS", "LET", "PUT", "SAY", "SHE", "TOO", "USE", "YES",
    "YET", "AGO", "AGE", "AIR", "BAD", "BIG", "BOX", "CAR", "CUT", "END",
    "EYE", "FAR", "FEW", "FUN", "GOT", "HOT", "JOB", "LOT", "LOW", "OFF",
    "OWN", "PAY", "RUN", "SET", "SIT", "TOP", "TRY", "WIN", "WON", "MAY",
    "FLY", "BUY", "ADD", "ASK", "BED", "BIT", "DOG", "EAT", "RED", "SUN",
    "TEN", "SIX", "VIA", "PER", "NET", "MAX", "MIN", "AVG", "TBD", "TBA",
    # ── Acronyms and abbreviations ──
    "CEO", "CFO", "CTO", "COO", "FAQ", "API", "URL", "PDF", "USB", "DIY",
    "AKA", "ETA", "ETD", "FYI", "IMO", "PSA", "GPS", "ATM", "PIN", "SSN",
    "DOB", "VIP", "EST", "PST", "CST", "MST", "GMT", "UTC", "EDT", "PDT",
    "CDT", "MDT", "JAN", "FEB", "MAR", "APR", "JUN", "JUL", "AUG", "SEP",
    "OCT", "NOV", "DEC", "MON", "TUE", "WED", "THU", "FRI", "SAT", "IRS",
    "DMV", "TSA", "FAA", "CBP", "DHS", "FBI", "CIA", "NSA", "SEC", "FTC",
    "FCC", "NBA", "NFL", "NHL", "MLB", "CNN", "BBC", "ABC", "NBC", "CBS",
    "PHD", "MBA", "CPA", "APY", "IRA", "ETF", "IPO", "ROI", "KPI", "POS",
    # ── Card-forum shorthand ──
    "AMX", "CSR", "CSP", "CFU", "CIC", "BOA", "UAL", "DAL", "AAL", "SUB",
    "MSR", "SPG", "IHG", "MVP", "PTS", "MRS",
    # ── Currencies ──
    "USD", "EUR", "GBP", "JPY", "CNY", "RMB", "CAD", "AUD", "CHF", "HKD",
    "SGD", "NZD", "KRW", "INR", "MXN", "BRL", "THB", "TWD",
    # ── Slang ──
    "LOL", "OMG", "WTF", "BTW", "IDK", "SMH", "TBH", "LMK", "NVM", "BRB",
    "MEH", "BRO", "SIS", "YEP", "NAH",
})


# ══════════════════════════════════════════════════════════════════════
# REGISTRY VALUE
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Registry:
    """Read-only view over both tables plus the blocklist."""
    primary: Mapping[str, PrimaryEntity] = field(default_factory=lambda: MappingProxyType({}))
    group: Mapping[str, GroupEntity] = field(default_factory=lambda: MappingProxyType({}))
    blocklist: frozenset[str] = BLOCKLIST

    @classmethod
    def build(
        cls,
        primary: dict[str, PrimaryEntity],
        group: Optional[dict[str, GroupEntity]] = None,
        blocklist: frozenset[str] = BLOCKLIST,
    ) -> "Registry":
        return cls(
            primary=MappingProxyType(dict(primary)),
            group=MappingProxyType(dict(group or {})),
            blocklist=frozenset(blocklist),
        )

    def is_blocked(self, code: str) -> bool:
        return code.upper() in self.blocklist

    def lookup(self, code: str, is_group: bool) -> Optional[Entity]:
        """Strict lookup in one table only."""
        table = self.group if is_group else self.primary
        return table.get(code.upper())

    def resolve(self, code: str, prefer_group: bool = False) -> tuple[Optional[Entity], bool]:
        """
        Look a code up in the preferred table first, then the other one.
        Returns (entry, is_group); entry is None when neither table has it.
        """
        order = (True, False) if prefer_group else (False, True)
        for is_group in order:
            entry = self.lookup(code, is_group)
            if entry is not None:
                return entry, is_group
        return None, False

    def region_for(self, entry: Entity) -> Optional[str]:
        """Two-letter region used for the flag, borrowed by groups from an airport."""
        if isinstance(entry, PrimaryEntity):
            return entry.region_code
        if entry.flag_proxy_code:
            proxy = self.primary.get(entry.flag_proxy_code)
            if proxy is not None:
                return proxy.region_code
        return None


# ══════════════════════════════════════════════════════════════════════
# LOADING
# ══════════════════════════════════════════════════════════════════════

def _non_finite(token: str) -> None:
    # NaN / Infinity / -Infinity come out of pandas exports; they mean "missing"
    return None


def decode_json(text: str):
    """Parse JSON text, reading bare non-finite numbers as null."""
    return json.loads(text, parse_constant=_non_finite)


def _decode(source: Source, what: str):
    if source is None:
        raise RegistryLoadError(f"{what} source is empty")
    if isinstance(source, bytes):
        try:
            source = source.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise RegistryLoadError(f"{what} source is not UTF-8: {e}") from e
    if isinstance(source, str):
        if not source.strip():
            raise RegistryLoadError(f"{what} source is empty")
        try:
            return decode_json(source)
        except json.JSONDecodeError as e:
            raise RegistryLoadError(f"{what} source is not valid JSON: {e}") from e
    return source


def parse_primary(source: Source) -> tuple[dict[str, PrimaryEntity], int]:
    """
    Build the airport table. Records without a code are dropped silently,
    malformed ones are dropped with a debug log. The first record for a code wins.
    Returns (table, dropped_count).
    """
    data = _decode(source, "primary")
    if not isinstance(data, list):
        raise RegistryLoadError(
            f"primary source must be a list of records, got {type(data).__name__}"
        )

    table: dict[str, PrimaryEntity] = {}
    dropped = 0
    for record in data:
        if not isinstance(record, Mapping):
            dropped += 1
            continue
        raw_code = record.get("iata_code", record.get("code"))
        if not isinstance(raw_code, str) or not raw_code.strip():
            dropped += 1
            continue
        try:
            entity = PrimaryEntity.model_validate(record)
        except ValidationError as e:
            logger.debug("Dropping primary record %r: %s", raw_code, e)
            dropped += 1
            continue
        table.setdefault(entity.code, entity)

    if not table:
        raise RegistryLoadError("primary source contained no usable records")
    return table, dropped


def parse_group(source: Source) -> dict[str, GroupEntity]:
    """Build the metro-area table from a mapping keyed by code."""
    data = _decode(source, "group")
    if not isinstance(data, Mapping):
        raise RegistryLoadError(
            f"group source must be a mapping keyed by code, got {type(data).__name__}"
        )

    table: dict[str, GroupEntity] = {}
    for code, record in data.items():
        if not isinstance(code, str) or not isinstance(record, Mapping):
            continue
        try:
            entity = GroupEntity.model_validate({**record, "code": code})
        except ValidationError as e:
            logger.debug("Dropping group record %r: %s", code, e)
            continue
        table[entity.code] = entity
    return table


def load(primary_source: Source, group_source: Source) -> LoadResult:
    """
    Load both tables. The primary table is required; the group table is
    optional and its failure only disables metro-area annotations.
    """
    result = LoadResult()

    try:
        primary, dropped = parse_primary(primary_source)
    except RegistryLoadError as e:
        logger.error("Primary registry failed to load: %s", e)
        result.errors.append(str(e))
        return result

    result.primary_loaded = True
    result.primary_count = len(primary)
    result.dropped_records = dropped

    group: dict[str, GroupEntity] = {}
    try:
        group = parse_group(group_source)
        result.group_loaded = True
        result.group_count = len(group)
    except RegistryLoadError as e:
        logger.warning("Group registry unavailable, metro-area codes disabled: %s", e)
        result.errors.append(str(e))

    result.registry = Registry.build(primary, group)
    logger.info("Registry loaded: %d airports (%d dropped), %d metro areas",
                result.primary_count, dropped, result.group_count)
    return result
