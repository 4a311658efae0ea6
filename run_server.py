#!/usr/bin/env python3
"""
Research Search MCP Server - HTTP Mode

Runs the Research Search MCP server over HTTP (SSE or streamable-http) so
remote clients can connect, plus a small JSON API for direct calls.

Usage:
    # Run with SSE transport (default, more compatible)
    python run_server.py --transport sse --port 8765

    # Run with streamable-http transport
    python run_server.py --transport streamable-http --port 8765

    # Fetch real page content instead of canned text
    python run_server.py --scan-mode http --scan-timeout 8

Environment Variables:
    RESEARCH_SCAN_MODE: simulated (default) or http
    RESEARCH_SCAN_TIMEOUT: HTTP scan timeout in seconds (default: 10)
    RESEARCH_PARALLEL_DEEP: run deep-research categories concurrently (default: true)
    GEMINI_API_KEY: enables generate_answer / explain_reasoning
    GEMINI_MODEL: Gemini model name (default: gemini-2.0-flash-exp)
    MCP_PORT: Server port (default: 8765)
    MCP_HOST: Server host (default: 0.0.0.0)
"""

import argparse
import logging
import os
from contextlib import asynccontextmanager

from research_search.container import SCAN_MODES
from research_search.presentation.mcp_server.server import (
    close_http_clients,
    config_from_env,
    create_server,
    get_container,
)

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


def main():
    env = config_from_env()

    parser = argparse.ArgumentParser(description="Run Research Search MCP Server in HTTP mode")
    parser.add_argument(
        "--transport",
        choices=["sse", "streamable-http"],
        default="sse",
        help="Transport protocol (default: sse)",
    )
    parser.add_argument(
        "--host",
        default=os.environ.get("MCP_HOST", "0.0.0.0"),
        help="Server host (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("MCP_PORT", "8765")),
        help="Server port (default: 8765)",
    )
    parser.add_argument(
        "--scan-mode",
        choices=SCAN_MODES,
        default=env["scan_mode"] if env["scan_mode"] in SCAN_MODES else "simulated",
        help="Content scanner (default: simulated)",
    )
    parser.add_argument(
        "--scan-timeout",
        type=float,
        default=env["scan_timeout"],
        help="HTTP scan timeout in seconds (default: 10)",
    )
    parser.add_argument(
        "--sequential-deep",
        action="store_true",
        default=not env["parallel_deep"],
        help="Research deep-research categories one after another",
    )
    parser.add_argument(
        "--gemini-model",
        default=env["gemini_model"],
        help="Gemini model for answer generation",
    )
    parser.add_argument(
        "--no-security",
        action="store_true",
        default=True,
        help="Disable DNS rebinding protection (default: True for remote access)",
    )

    args = parser.parse_args()

    config = {
        **env,
        "scan_mode": args.scan_mode,
        "scan_timeout": args.scan_timeout,
        "parallel_deep": not args.sequential_deep,
        "gemini_model": args.gemini_model,
    }

    logger.info("Creating Research Search MCP Server...")
    logger.info(f"  Transport: {args.transport}")
    logger.info(f"  Host: {args.host}")
    logger.info(f"  Port: {args.port}")
    logger.info(f"  Scan mode: {args.scan_mode}")
    logger.info(f"  Deep research: {'sequential' if args.sequential_deep else 'parallel'}")
    logger.info(f"  Gemini API key: {'Set' if config['gemini_api_key'] else 'Not set'}")
    logger.info(f"  DNS Rebinding Protection: {'Disabled' if args.no_security else 'Enabled'}")

    server = create_server(config=config, disable_security=args.no_security)
    service = get_container().search_service()

    logger.info(f"Starting server at http://{args.host}:{args.port}")

    if args.transport == "sse":
        logger.info("SSE endpoint: /sse")
        logger.info("Message endpoint: /messages")
    else:
        logger.info("Streamable HTTP endpoint: /mcp")

    # Run the server using uvicorn directly for proper host/port control
    import uvicorn
    from starlette.applications import Starlette
    from starlette.responses import JSONResponse
    from starlette.routing import Mount, Route

    if args.transport == "sse":
        mcp_app = server.sse_app()
    else:
        mcp_app = server.streamable_http_app()

    async def health(request):
        return JSONResponse({"status": "ok", "service": "research-search-mcp"})

    async def info(request):
        return JSONResponse(
            {
                "service": "Research Search MCP Server",
                "version": "0.1.0",
                "transport": args.transport,
                "endpoints": {
                    "mcp": {"sse": "/sse", "messages": "/messages"}
                    if args.transport == "sse"
                    else {"streamable_http": "/mcp"},
                    "api": {
                        "search": "/api/search?q=...&limit=15",
                        "scan": "/api/scan?url=...",
                    },
                    "utility": {"health": "/health"},
                },
                "usage": {
                    "vscode_mcp_json": {
                        "type": "sse" if args.transport == "sse" else "http",
                        "url": f"http://YOUR_SERVER_IP:{args.port}/"
                        + ("sse" if args.transport == "sse" else "mcp"),
                    }
                },
            }
        )

    # ===== Direct HTTP API =====

    async def api_search(request):
        """Standard search without going through an MCP client."""
        query = request.query_params.get("q", "")
        try:
            limit = int(request.query_params.get("limit", "15"))
        except ValueError:
            return JSONResponse({"error": "limit must be an integer"}, status_code=400)
        response = await service.search_web(query, limit=limit)
        return JSONResponse(response.to_dict())

    async def api_scan(request):
        url = request.query_params.get("url", "").strip()
        if not url:
            return JSONResponse({"error": "No url provided"}, status_code=400)
        outcome = await service.scan_content(url)
        return JSONResponse(outcome.to_dict())

    @asynccontextmanager
    async def lifespan(app):
        # A mounted streamable-http app does not run its own lifespan
        try:
            if args.transport == "streamable-http":
                async with server.session_manager.run():
                    yield
            else:
                yield
        finally:
            closed = await close_http_clients(get_container())
            logger.info(f"Shutdown: {closed} HTTP client(s) closed")

    routes = [
        Route("/", info),
        Route("/health", health),
        Route("/api/search", api_search),
        Route("/api/scan", api_scan),
        Mount("/", app=mcp_app),
    ]

    app = Starlette(routes=routes, lifespan=lifespan)

    logger.info("[HTTP API]")
    logger.info("  GET /api/search?q=...&limit=... - Standard search")
    logger.info("  GET /api/scan?url=... - Scan one URL")

    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        proxy_headers=True,
        forwarded_allow_ips="*",
        server_header=False,
    )


if __name__ == "__main__":
    main()
