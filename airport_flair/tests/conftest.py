"""Shared fixtures: a small airport table and metro-area table."""

from __future__ import annotations

import pytest

from airport_flair.config import Settings
from airport_flair.document import LiveDocument
from airport_flair.engine import FlairEngine
from airport_flair.registry import load

PRIMARY_RECORDS = [
    {"iata_code": "SFO", "name": "San Francisco International Airport",
     "municipality": "San Francisco", "iso_country": "US"},
    {"iata_code": "JFK", "name": "John F. Kennedy International Airport",
     "municipality": "New York", "iso_country": "US"},
    {"iata_code": "LAX", "name": "Los Angeles International Airport",
     "municipality": "Los Angeles", "iso_country": "US"},
    {"iata_code": "HOU", "name": "William P. Hobby Airport",
     "municipality": "Houston", "iso_country": "US"},
    {"iata_code": "LHR", "name": "London Heathrow Airport",
     "municipality": "London", "iso_country": "GB"},
    {"iata_code": "NRT", "name": "Narita International Airport",
     "municipality": None, "iso_country": None},
    # Teresina, Brazil; "the" in running text must stay a candidate
    {"iata_code": "THE", "name": "Teresina Airport",
     "municipality": "Teresina", "iso_country": "BR"},
    {"iata_code": None, "name": "Heliport without a code"},
]

GROUP_RECORDS = {
    "NYC": {"name": "New York City (all airports)", "flag_airport": "JFK"},
    "HOU": {"name": "Houston (all airports)", "flag_airport": "IAH"},
    "LON": {"name": "London (all airports)", "flag_airport": "LHR"},
    "CHI": {"name": "Chicago (all airports)", "flag_airport": "ORD"},
}


@pytest.fixture
def registry():
    return load(PRIMARY_RECORDS, GROUP_RECORDS).registry


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def engine(settings):
    eng = FlairEngine(settings)
    eng.initialize(PRIMARY_RECORDS, GROUP_RECORDS)
    return eng


def _make_document(body: str) -> LiveDocument:
    return LiveDocument.parse(f"<html><body>{body}</body></html>")


@pytest.fixture
def make_document():
    return _make_document
