"""
Research Search MCP Server

Usage as standalone server:
    python -m research_search.presentation.mcp_server

Or in mcp.json:
    {
        "servers": {
            "research-search": {
                "type": "stdio",
                "command": "research-search-mcp",
                "env": {"GEMINI_API_KEY": "..."}
            }
        }
    }

Usage for integration:
    from research_search.presentation.mcp_server import register_all_tools
    from research_search import SearchService, ResponseComposer

    register_all_tools(your_mcp_server, SearchService(), ResponseComposer(None))
"""

from __future__ import annotations

from .server import create_server, get_container, main
from .tools import register_all_tools

__all__ = ["create_server", "get_container", "main", "register_all_tools"]
