"""
Content scanner contract and lifecycle driver.

A scanner turns a URL into a ScanOutcome and never raises: every failure
mode (timeout, 404, non-HTML body, transport error) becomes
``ScanOutcome.failed()``. ``scan_result`` applies an outcome to a
SearchResult, walking it through pending → scanning → completed | error.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable
from urllib.parse import urlparse

from research_search.domain.entities.result import ScanOutcome, SearchResult

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 800
ELLIPSIS = "..."


@runtime_checkable
class ContentScanner(Protocol):
    """Anything that can turn a URL into scanned text."""

    async def scan(self, url: str) -> ScanOutcome: ...


def extract_domain(url: str) -> str:
    """Hostname without a leading ``www.``; ``unknown`` when the URL has none."""
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return "unknown"
    if not hostname:
        return "unknown"
    return hostname.removeprefix("www.")


def truncate_content(content: str, max_length: int = MAX_CONTENT_LENGTH) -> str:
    if len(content) > max_length:
        return content[:max_length] + ELLIPSIS
    return content


async def scan_result(scanner: ContentScanner, result: SearchResult) -> ScanOutcome:
    """
    Scan one result in place.

    Raises:
        ScanStateError: if the result is not pending
    """
    result.mark_scanning()
    try:
        outcome = await scanner.scan(result.url)
    except Exception:
        logger.exception(f"Scanner raised for {result.url}")
        outcome = ScanOutcome.failed()

    if outcome.ok:
        result.mark_completed(outcome.content)
    else:
        result.mark_failed()
    return outcome
