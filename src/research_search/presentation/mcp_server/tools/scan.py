"""
Scan Tools - content enrichment for search results.

Tools:
- scan_content: Fetch (or simulate) the readable content behind a URL
- scan_results: Scan a list of results and return them with content attached
"""

from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from research_search.application.search.service import SearchService

from ._common import format_error, parse_results, to_json

logger = logging.getLogger(__name__)


def register_scan_tools(mcp: FastMCP, service: SearchService) -> None:
    """Register content scanning tools."""

    @mcp.tool()
    async def scan_content(url: str) -> str:
        """
        Read the content behind one result URL (truncated to 800 characters).

        Args:
            url: Result URL (e.g., "https://arxiv.org/abs/1706.03762")

        Returns:
            JSON {content, scanStatus}; scanStatus is "completed" or "error"
        """
        if not url or not url.strip():
            return format_error(
                "Missing url",
                tool_name="scan_content",
                suggestion="Pass a result URL from search_web or deep_research",
            )
        outcome = await service.scan_content(url.strip())
        return to_json(outcome.to_dict())

    @mcp.tool()
    async def scan_results(results: str | list[dict[str, Any]]) -> str:
        """
        Scan several search results at once.

        Each pending result moves to "completed" (content attached) or
        "error". Already-scanned results are returned unchanged.

        Args:
            results: Results to scan (JSON list or search_web output)

        Returns:
            JSON with the updated results
        """
        try:
            parsed = parse_results(results)
        except Exception as e:
            return format_error(e, tool_name="scan_results")

        outcomes = await service.scan_results(parsed)
        completed = sum(1 for outcome in outcomes if outcome.ok)
        logger.info(f"scan_results: {completed}/{len(parsed)} completed")
        return to_json(
            {
                "scanned": len(parsed),
                "completed": completed,
                "results": [r.to_dict() for r in parsed],
            }
        )
