"""Exception types raised by the annotation engine and its loaders."""

from __future__ import annotations


class FlairError(Exception):
    """Base class for all airport_flair errors."""


class SourceError(FlairError):
    """A registry source could not be read (missing file, HTTP failure)."""


class RegistryLoadError(FlairError):
    """A registry source could not be decoded into entities."""


class EngineNotRunningError(FlairError):
    """Scanning was requested before the primary registry loaded."""
