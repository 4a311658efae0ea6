"""
HttpContentScanner - real page fetching behind the scanner contract.

Fetches the page with httpx (through BaseAPIClient), rejects anything that
is not HTML or plain text, and reduces HTML to readable text with
selectolax. Any failure yields ``ScanOutcome.failed()``; nothing raises.
"""

from __future__ import annotations

import logging
import re
from typing import Any

import httpx
from selectolax.parser import HTMLParser

from research_search.domain.entities.result import ScanOutcome
from research_search.infrastructure.http.base_client import _CONTINUE, BaseAPIClient
from research_search.shared.async_utils import timeout_with_fallback
from research_search.shared.exceptions import DataError, ErrorContext, ParseError

from .base import extract_domain, truncate_content

logger = logging.getLogger(__name__)

ACCEPTED_CONTENT_TYPES = ("text/html", "text/plain", "application/xhtml+xml")
MAX_BODY_BYTES = 5_000_000

# Describe the wire body, not the buffered one
_WIRE_HEADERS = frozenset({"content-encoding", "content-length", "transfer-encoding"})

_WHITESPACE = re.compile(r"\s+")


def html_to_text(html: str) -> str:
    """Visible text of an HTML document, whitespace collapsed."""
    tree = HTMLParser(html)
    for node in tree.css("script, style, noscript, nav, footer, header"):
        node.decompose()
    root = tree.body or tree.root
    if root is None:
        return ""
    return _WHITESPACE.sub(" ", root.text(separator=" ")).strip()


class HttpContentScanner(BaseAPIClient):
    """
    Fetch-and-extract scanner.

    Usage:
        async with HttpContentScanner(timeout=10.0) as scanner:
            outcome = await scanner.scan("https://arxiv.org/abs/1706.03762")
    """

    _service_name = "ContentScanner"
    _MAX_RETRIES = 0

    DEFAULT_HEADERS = {
        "Accept": "text/html, text/plain;q=0.9",
        "User-Agent": "research-search-mcp/0.1 (+content scanner)",
    }

    def __init__(
        self,
        timeout: float = 10.0,
        min_interval: float = 0.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            timeout=timeout,
            min_interval=min_interval,
            headers=dict(self.DEFAULT_HEADERS),
            transport=transport,
        )

    async def scan(self, url: str) -> ScanOutcome:
        domain = extract_domain(url)
        if domain == "unknown":
            logger.warning(f"Not scanning unparsable URL: {url!r}")
            return ScanOutcome.failed()

        # Overall deadline on top of httpx's per-phase timeouts
        body = await timeout_with_fallback(
            self._make_request(url, expect_json=False),
            timeout=self._timeout * 1.5,
            fallback=None,
        )
        if not isinstance(body, str) or not body.strip():
            logger.info(f"Scan of {domain} failed")
            return ScanOutcome.failed()

        return ScanOutcome.completed(truncate_content(body))

    def _handle_expected_status(self, response: httpx.Response, url: str) -> Any:
        if response.status_code in (404, 410):
            logger.info(f"{self._service_name}: {response.status_code} for {url}")
            return None

        if response.is_success:
            content_type = response.headers.get("content-type", "").lower()
            if not content_type.startswith(ACCEPTED_CONTENT_TYPES):
                logger.info(f"{self._service_name}: rejected content type {content_type!r} for {url}")
                return None

        return _CONTINUE

    async def _execute_request(
        self,
        url: str,
        *,
        method: str = "GET",
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        """
        Stream the page, never buffering more than ``MAX_BODY_BYTES``.

        Raises:
            DataError: declared or received body is over the cap
        """
        async with self.client.stream(method, url, headers=headers or {}, params=params) as response:
            declared = response.headers.get("content-length", "")
            if declared.isdigit() and int(declared) > MAX_BODY_BYTES:
                raise DataError(
                    f"Body of {declared} bytes exceeds {MAX_BODY_BYTES}",
                    context=ErrorContext(operation="scan", input_value=url),
                )

            body = bytearray()
            async for chunk in response.aiter_bytes():
                body.extend(chunk)
                if len(body) > MAX_BODY_BYTES:
                    raise DataError(
                        f"Body exceeds {MAX_BODY_BYTES} bytes",
                        context=ErrorContext(operation="scan", input_value=url),
                    )

        return httpx.Response(
            response.status_code,
            headers=[(k, v) for k, v in response.headers.multi_items() if k.lower() not in _WIRE_HEADERS],
            content=bytes(body),
            request=response.request,
        )

    def _parse_response(self, response: httpx.Response, expect_json: bool) -> str:
        if b"\x00" in response.content[:1024]:
            raise ParseError("binary body served as text", source=self._service_name)

        content_type = response.headers.get("content-type", "").lower()
        if content_type.startswith("text/plain"):
            return _WHITESPACE.sub(" ", response.text).strip()
        return html_to_text(response.text)
