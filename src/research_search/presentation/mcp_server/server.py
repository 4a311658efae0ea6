"""
Research Search MCP Server

A Model Context Protocol server exposing the research-assistant search core:
web search, deep research, content scanning and grounded answer generation.

Architecture:
- instructions.py: SERVER_INSTRUCTIONS for AI agents
- tool_registry.py: Centralized tool registration
- tools/: Individual tool implementations by category
- container: DI container (dependency-injector) for service lifecycle

Configuration (environment):
- RESEARCH_SCAN_MODE: "simulated" (default) or "http"
- RESEARCH_SCAN_TIMEOUT: HTTP scan timeout in seconds (default 10)
- RESEARCH_PARALLEL_DEEP: run deep-research categories concurrently (default on)
- GEMINI_API_KEY / GEMINI_MODEL: answer generation
"""

from __future__ import annotations

import asyncio
import logging
import os
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import TYPE_CHECKING, Any, cast

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from research_search.container import ApplicationContainer
from research_search.infrastructure.http.base_client import BaseAPIClient

from .instructions import SERVER_INSTRUCTIONS
from .tool_registry import register_all_mcp_tools

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from research_search.application.composer.composer import ResponseComposer
    from research_search.application.search.service import SearchService

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}

# ── Module-level DI container ──────────────────────────────────────────────
_container: ApplicationContainer | None = None


def get_container() -> ApplicationContainer:
    """Get the application DI container.

    Raises:
        RuntimeError: If ``create_server()`` has not been called yet.
    """
    if _container is None:
        msg = "Container not initialized. Call create_server() first."
        raise RuntimeError(msg)
    return _container


async def close_http_clients(container: ApplicationContainer) -> int:
    """Close every HTTP client the container created. Returns how many were closed."""
    closed = 0
    for client in (container.content_scanner(), container.text_generator()):
        if isinstance(client, BaseAPIClient):
            await client.close()
            closed += 1
    return closed


def _make_lifespan(
    container: ApplicationContainer,
) -> Callable[[FastMCP[Any]], AbstractAsyncContextManager[ApplicationContainer]]:
    """
    Create a FastMCP lifespan handler bound to *container*.

    FastMCP enters the lifespan once per SSE connection or streamable-HTTP
    session, so it must not close the container's shared HTTP clients.
    Those are closed once per process by ``main()`` or ``run_server.py``.
    """

    @asynccontextmanager
    async def _lifespan(server: FastMCP[Any]) -> AsyncIterator[ApplicationContainer]:
        """Session lifecycle: startup → yield → shutdown."""
        logger.debug("Lifecycle: session started")
        try:
            yield container
        finally:
            logger.debug("Lifecycle: session ended")

    return _lifespan


def config_from_env() -> dict[str, Any]:
    """Container configuration from ``RESEARCH_*`` / ``GEMINI_*`` environment variables."""
    timeout = os.environ.get("RESEARCH_SCAN_TIMEOUT", "").strip()
    return {
        "scan_mode": os.environ.get("RESEARCH_SCAN_MODE", "simulated").strip() or "simulated",
        "scan_timeout": float(timeout) if timeout else None,
        "parallel_deep": os.environ.get("RESEARCH_PARALLEL_DEEP", "true").strip().lower() in _TRUTHY,
        "gemini_api_key": os.environ.get("GEMINI_API_KEY", "").strip() or None,
        "gemini_model": os.environ.get("GEMINI_MODEL", "").strip() or None,
    }


def create_server(
    config: dict[str, Any] | None = None,
    name: str = "research-search",
    disable_security: bool = False,
    json_response: bool = False,
    stateless_http: bool = False,
) -> FastMCP:
    """
    Create and configure the Research Search MCP server.

    Args:
        config: Container configuration (see ``config_from_env``). Defaults to the environment.
        name: Server name.
        disable_security: Disable DNS rebinding protection (needed for remote access).
        json_response: Use JSON responses instead of SSE.
        stateless_http: Use stateless HTTP mode (no session management).

    Returns:
        Configured FastMCP server instance.
    """
    global _container
    logger.info("Initializing Research Search MCP Server...")

    # ── DI container ────────────────────────────────────────────────────
    _container = ApplicationContainer()
    _container.config.from_dict(config if config is not None else config_from_env())

    search_service = cast("SearchService", _container.search_service())
    composer = cast("ResponseComposer", _container.response_composer())
    logger.info(f"Content scanner: {type(search_service.scanner).__name__}")

    # ── Transport security ──────────────────────────────────────────────
    if disable_security:
        transport_security = TransportSecuritySettings(enable_dns_rebinding_protection=False)
        logger.info("DNS rebinding protection disabled for remote access")
    else:
        transport_security = None

    # ── Create MCP server with lifespan ─────────────────────────────────
    mcp = FastMCP(
        name,
        instructions=SERVER_INSTRUCTIONS,
        transport_security=transport_security,
        json_response=json_response,
        stateless_http=stateless_http,
        lifespan=_make_lifespan(_container),
    )

    # ── Register all tools via centralized registry ─────────────────────
    stats = register_all_mcp_tools(mcp=mcp, search_service=search_service, composer=composer)
    logger.info("Tool registration complete: %s", stats)

    logger.info("Research Search MCP Server initialized successfully")
    return mcp


def main():
    """Run the MCP server (stdio)."""

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    server = create_server()
    try:
        server.run()
    finally:
        closed = asyncio.run(close_http_clients(get_container()))
        logger.info(f"Shutdown: {closed} HTTP client(s) closed")


if __name__ == "__main__":
    main()
