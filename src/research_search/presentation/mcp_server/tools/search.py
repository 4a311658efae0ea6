"""
Search Tools - web search, deep research and query intelligence.

Tools:
- search_web: Single-pass search across general, academic, news and expert sources
- deep_research: Multi-category, multi-variation search (up to 50 results, with progress)
- analyze_query: Language / intent / category / complexity of a query
- load_more_results: Further results for an existing result list
- suggest_refinements: Narrowing suggestions based on the shown results
"""

from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import Context, FastMCP

from research_search.application.search.service import DEFAULT_LIMIT, SearchService

from ._common import format_error, normalize_limit, parse_results, to_json

logger = logging.getLogger(__name__)

MAX_LIMIT = 50


def register_search_tools(mcp: FastMCP, service: SearchService) -> None:
    """Register search tools."""

    @mcp.tool()
    async def search_web(query: str, limit: int | str = DEFAULT_LIMIT) -> str:
        """
        Search the web for sources relevant to a question.

        Results come from general, academic, news and expert sites, are
        deduplicated, scored 15-100 and sorted by relevance. Arabic and
        English queries are both supported.

        Args:
            query: The user's question (e.g., "explain artificial intelligence")
            limit: Maximum number of results (1-50, default 15)

        Returns:
            JSON with results, totalResults, searchTime, expandedKeywords, searchSuggestions
        """
        limit = normalize_limit(limit, default=DEFAULT_LIMIT, max_val=MAX_LIMIT)
        logger.info(f"search_web: {query!r} (limit={limit})")
        response = await service.search_web(query or "", limit=limit)
        return to_json(response.to_dict())

    @mcp.tool()
    async def deep_research(query: str, ctx: Context) -> str:
        """
        Run deep research: seven source categories x up to 15 query variations.

        Slower than search_web; reports progress while running and returns up
        to 50 ranked results. Use for comprehensive, report-style questions.

        Args:
            query: The research question

        Returns:
            JSON with results, totalResults, searchTime, expandedKeywords, searchSuggestions
        """
        logger.info(f"deep_research: {query!r}")

        async def on_progress(percent: float, status: str) -> None:
            await ctx.report_progress(progress=percent, total=100, message=status)

        response = await service.deep_research(query or "", on_progress=on_progress)
        return to_json(response.to_dict())

    @mcp.tool()
    async def analyze_query(query: str) -> str:
        """
        Show how a query is understood: language, intent, category, complexity,
        keywords, synonyms, related terms and the derived search terms.

        Args:
            query: Any query string

        Returns:
            JSON analysis
        """
        analysis = service.analyze(query or "")
        data: dict[str, Any] = analysis.to_dict()
        return to_json(data)

    @mcp.tool()
    async def load_more_results(
        query: str,
        current_results: str | list[dict[str, Any]] | None = None,
        offset: int | str = 0,
    ) -> str:
        """
        Fetch additional results for an ongoing search (infinite scroll).

        URLs already present in ``current_results`` are excluded.

        Args:
            query: The original query
            current_results: Results already shown (JSON list or search_web output)
            offset: Page offset, used in result ids

        Returns:
            JSON with the new results
        """
        try:
            current = parse_results(current_results, "current_results")
        except Exception as e:
            return format_error(e, tool_name="load_more_results")

        page = normalize_limit(offset, default=0, max_val=10_000, min_val=0)
        results = await service.load_more_results(current, query or "", offset=page)
        return to_json({"count": len(results), "results": [r.to_dict() for r in results]})

    @mcp.tool()
    async def suggest_refinements(
        query: str,
        current_results: str | list[dict[str, Any]] | None = None,
    ) -> str:
        """
        Suggest narrower follow-up queries based on the shown results.

        Args:
            query: The original query
            current_results: Results already shown (JSON list or search_web output)

        Returns:
            JSON list of up to five suggestions
        """
        try:
            current = parse_results(current_results, "current_results")
            suggestions = service.refinement_suggestions(query or "", current)
        except Exception as e:
            logger.warning(f"suggest_refinements failed: {e}")
            return format_error(e, tool_name="suggest_refinements")
        return to_json({"query": query, "suggestions": suggestions})
