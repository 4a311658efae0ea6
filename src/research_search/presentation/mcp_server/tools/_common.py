"""
Shared helpers for MCP tools: input normalization and response formatting.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from research_search.domain.entities.result import SearchResult
from research_search.shared.exceptions import ErrorContext, InvalidParameterError, ResearchSearchError

logger = logging.getLogger(__name__)


def normalize_limit(value: int | str | None, default: int, max_val: int, min_val: int = 1) -> int:
    """Coerce ``limit`` (agents often pass strings) into ``[min_val, max_val]``."""
    if value is None or value == "":
        return default
    try:
        limit = int(value)
    except (TypeError, ValueError):
        return default
    return max(min_val, min(limit, max_val))


def to_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def format_error(error: Exception | str, tool_name: str, suggestion: str | None = None) -> str:
    """Render any failure as the agent-facing Markdown error message."""
    if isinstance(error, ResearchSearchError):
        return error.to_agent_message()
    message = f"{tool_name} failed: {error}" if isinstance(error, Exception) else str(error)
    return ResearchSearchError(
        message,
        context=ErrorContext(tool_name=tool_name, suggestion=suggestion),
    ).to_agent_message()


def parse_results(payload: str | list[dict[str, Any]] | None, param_name: str = "results") -> list[SearchResult]:
    """
    Accept results as a JSON string, a list of dicts, or a full search response.

    Raises:
        InvalidParameterError: payload is not valid JSON or lacks result URLs
    """
    if payload is None or payload == "":
        return []

    data: Any = payload
    if isinstance(payload, str):
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise InvalidParameterError(param_name, payload[:80], "a JSON list of search results") from e

    if isinstance(data, dict) and "results" in data:
        data = data["results"]
    if not isinstance(data, list):
        raise InvalidParameterError(param_name, type(data).__name__, "a list of search results")

    try:
        return [SearchResult.from_dict(item) for item in data if isinstance(item, dict)]
    except KeyError as e:
        raise InvalidParameterError(param_name, "missing url", "results with a 'url' field") from e
