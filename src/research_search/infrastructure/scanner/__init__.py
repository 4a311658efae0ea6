"""
Content scanners.

- SimulatedContentScanner: canned per-domain text, no network (default)
- HttpContentScanner: real fetch + HTML text extraction
"""

from .base import ELLIPSIS, MAX_CONTENT_LENGTH, ContentScanner, extract_domain, scan_result, truncate_content
from .http_scanner import HttpContentScanner, html_to_text
from .simulated import DEFAULT_CONTENT, DOMAIN_CONTENT, SimulatedContentScanner

__all__ = [
    "ContentScanner",
    "SimulatedContentScanner",
    "HttpContentScanner",
    "scan_result",
    "extract_domain",
    "truncate_content",
    "MAX_CONTENT_LENGTH",
    "ELLIPSIS",
    "html_to_text",
    "DOMAIN_CONTENT",
    "DEFAULT_CONTENT",
]
