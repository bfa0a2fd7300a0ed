"""
Logging setup for the CLI and embedding applications.

JSON lines in production, a compact text format in development. Scanner and
lifecycle transitions log at DEBUG under their own module loggers, so
FLAIR_DEBUG=lifecycle,scanner turns on just those without flooding the rest.
"""

from __future__ import annotations

import logging
import sys

import json_log_formatter

from airport_flair.config import Settings, get_settings

PACKAGE_LOGGER = "airport_flair"


class FlairJSONFormatter(json_log_formatter.JSONFormatter):
    """JSONFormatter that also records the level and the emitting module."""

    def json_record(self, message, extra, record):
        extra = super().json_record(message, extra, record)
        extra["level"] = record.levelname
        extra["logger"] = record.name
        return extra


def setup_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # stdout carries annotated HTML from the CLI, so logs always go to stderr
    handler = logging.StreamHandler(sys.stderr)
    if settings.env == "production":
        handler.setFormatter(FlairJSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        ))

    handler.set_name(PACKAGE_LOGGER)
    root = logging.getLogger()
    root.setLevel(level)
    # replace only our own handler so repeated setup does not duplicate lines
    root.handlers = [h for h in root.handlers if h.get_name() != PACKAGE_LOGGER] + [handler]

    for module in debug_loggers(settings.debug_modules):
        logging.getLogger(module).setLevel(logging.DEBUG)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def debug_loggers(modules: str) -> list[str]:
    """Map "lifecycle, scanner" to fully qualified logger names."""
    names = []
    for module in modules.split(","):
        module = module.strip()
        if not module:
            continue
        names.append(module if module.startswith(PACKAGE_LOGGER) else f"{PACKAGE_LOGGER}.{module}")
    return names
