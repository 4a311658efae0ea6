"""
Research Search MCP Tools

Search (5):
- search_web, deep_research, analyze_query, load_more_results, suggest_refinements

Scan (2):
- scan_content, scan_results

Answer (2):
- generate_answer, explain_reasoning

Usage:
    from .tools import register_all_tools
    register_all_tools(mcp, search_service, composer)
"""

from mcp.server.fastmcp import FastMCP

from research_search.application.composer.composer import ResponseComposer
from research_search.application.search.service import SearchService

from .answer import register_answer_tools
from .scan import register_scan_tools
from .search import register_search_tools


def register_all_tools(mcp: FastMCP, service: SearchService, composer: ResponseComposer) -> None:
    """Register every tool module on ``mcp``."""
    register_search_tools(mcp, service)
    register_scan_tools(mcp, service)
    register_answer_tools(mcp, composer)


__all__ = [
    "register_all_tools",
    "register_search_tools",
    "register_scan_tools",
    "register_answer_tools",
]
