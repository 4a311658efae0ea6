"""
Tool Registry - central registration and lookup of MCP tools.

Usage:
    from .tool_registry import register_all_mcp_tools, list_registered_tools

    register_all_mcp_tools(mcp, search_service, composer)

    tools = list_registered_tools()
"""

from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP

from research_search.application.composer.composer import ResponseComposer
from research_search.application.search.service import SearchService

logger = logging.getLogger(__name__)


# ============================================================================
# Tool Categories
# ============================================================================

TOOL_CATEGORIES: dict[str, dict[str, str | list[str]]] = {
    "search": {
        "name": "Search",
        "description": "Standard and deep web search",
        "tools": ["search_web", "deep_research"],
    },
    "query_intelligence": {
        "name": "Query intelligence",
        "description": "Query analysis, pagination and refinement",
        "tools": ["analyze_query", "load_more_results", "suggest_refinements"],
    },
    "scan": {
        "name": "Content scanning",
        "description": "Readable content behind result URLs",
        "tools": ["scan_content", "scan_results"],
    },
    "answer": {
        "name": "Answer generation",
        "description": "Grounded answers and reasoning (requires GEMINI_API_KEY)",
        "tools": ["generate_answer", "explain_reasoning"],
    },
}


# ============================================================================
# Registration
# ============================================================================


def register_all_mcp_tools(
    mcp: FastMCP,
    search_service: SearchService,
    composer: ResponseComposer,
) -> dict[str, int]:
    """
    Register all MCP tools.

    Returns:
        Dict with category ids and tool counts
    """
    from .tools import register_all_tools

    logger.info("Registering search, scan and answer tools...")
    register_all_tools(mcp, search_service, composer)

    if not composer.available:
        logger.warning("Answer tools registered without a text generator; they will return errors")

    stats = {cat_id: len(cat_info["tools"]) for cat_id, cat_info in TOOL_CATEGORIES.items()}
    logger.info(f"Total registered: {sum(stats.values())} tools")
    return stats


def list_registered_tools() -> dict[str, list[str]]:
    """All defined tools, grouped by category."""
    return {cat_id: list(cat_info["tools"]) for cat_id, cat_info in TOOL_CATEGORIES.items()}


def get_tool_info(tool_name: str) -> dict[str, str] | None:
    """
    Category information for one tool.

    Returns:
        Dict with name, category, category_id and category_description, or None
    """
    for cat_id, cat_info in TOOL_CATEGORIES.items():
        if tool_name in cat_info["tools"]:
            return {
                "name": tool_name,
                "category": str(cat_info["name"]),
                "category_id": cat_id,
                "category_description": str(cat_info["description"]),
            }
    return None


# ============================================================================
# Validation
# ============================================================================


def validate_tool_registry(mcp: FastMCP) -> dict[str, list[str] | bool]:
    """
    Check that TOOL_CATEGORIES and the tools actually registered agree.

    Returns:
        Dict with defined, registered, missing, extra and valid
    """
    defined_tools: set[str] = set()
    for cat_info in TOOL_CATEGORIES.values():
        defined_tools.update(cat_info["tools"])

    registered_tools = {tool.name for tool in mcp._tool_manager.list_tools()}

    missing = defined_tools - registered_tools
    extra = registered_tools - defined_tools

    if missing:
        logger.warning(f"Tools defined but not registered: {missing}")
    if extra:
        logger.info(f"Tools registered but not in TOOL_CATEGORIES: {extra}")

    return {
        "defined": sorted(defined_tools),
        "registered": sorted(registered_tools),
        "missing": sorted(missing),
        "extra": sorted(extra),
        "valid": not missing and not extra,
    }
