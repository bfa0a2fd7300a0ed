"""
Reads registry sources from disk or over HTTP.
The engine itself never does I/O; callers read text here and hand it to load().
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import httpx

from airport_flair.config import get_settings
from airport_flair.errors import SourceError

logger = logging.getLogger(__name__)


def read_source(location: str, timeout: Optional[float] = None) -> str:
    """Return the raw text behind a local path or an http(s) URL."""
    if location.startswith(("http://", "https://")):
        return _fetch(location, timeout)

    path = Path(location).expanduser()
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceError(f"cannot read {path}: {e}") from e


def _fetch(url: str, timeout: Optional[float]) -> str:
    settings = get_settings().sources
    headers = {"User-Agent": settings.user_agent}
    try:
        resp = httpx.get(
            url,
            headers=headers,
            timeout=timeout or settings.request_timeout,
            follow_redirects=True,
        )
        resp.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.error("HTTP %d fetching %s", e.response.status_code, url)
        raise SourceError(f"HTTP {e.response.status_code} fetching {url}") from e
    except httpx.RequestError as e:
        logger.error("Request error fetching %s: %s", url, e)
        raise SourceError(f"request error fetching {url}: {e}") from e

    logger.info("Fetched %s (%d bytes)", url, len(resp.content))
    return resp.text


def read_optional(location: Optional[str]) -> Optional[str]:
    """Like read_source, but a missing or unreadable source yields None."""
    if not location:
        return None
    try:
        return read_source(location)
    except SourceError as e:
        logger.warning("Source unavailable: %s", e)
        return None
