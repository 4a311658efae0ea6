"""
Answer Tools - grounded answer generation.

Tools:
- generate_answer: Answer a question from search results (word chunks sent as progress)
- explain_reasoning: Explain the methodology used to approach a question

Both require GEMINI_API_KEY. Failures are reported as errors, never as an
empty answer.
"""

from __future__ import annotations

import logging
from typing import Any

from mcp.server.fastmcp import Context, FastMCP

from research_search.application.composer.composer import ResponseComposer
from research_search.shared.exceptions import InvalidQueryError

from ._common import format_error, parse_results, to_json

logger = logging.getLogger(__name__)


def register_answer_tools(mcp: FastMCP, composer: ResponseComposer) -> None:
    """Register answer generation tools."""

    @mcp.tool()
    async def generate_answer(
        query: str,
        ctx: Context,
        results: str | list[dict[str, Any]] | None = None,
        history: list[dict[str, str]] | None = None,
        search_mode: str = "web",
        deep_research: bool = False,
        voice_input: bool = False,
    ) -> str:
        """
        Write an answer to ``query`` grounded on search results.

        Answer length follows the question: short questions get a few
        paragraphs, analytical ones a multi-section report, deep research a
        long document, voice input exactly three short sentences. The answer
        is in the language of the question (Arabic or English).

        Args:
            query: The user's question
            results: Sources to cite (JSON list or search_web / deep_research output)
            history: Earlier turns as [{"role": "user", "content": "..."}]; last six used
            search_mode: Mode label shown to the model (default "web")
            deep_research: Produce a long research document
            voice_input: Produce a short spoken-style answer

        Returns:
            JSON {text, sources, cancelled}
        """
        try:
            if not query or not query.strip():
                raise InvalidQueryError(query)
            sources = parse_results(results)

            streamed = 0

            async def on_chunk(chunk: str) -> None:
                nonlocal streamed
                streamed += 1
                await ctx.report_progress(progress=streamed, message=chunk)

            response = await composer.compose(
                query,
                search_mode=search_mode,
                history=history or [],
                results=sources,
                deep_research=deep_research,
                voice_input=voice_input,
                on_chunk=on_chunk,
            )
        except Exception as e:
            logger.warning(f"generate_answer failed: {e}")
            return format_error(e, tool_name="generate_answer")
        return to_json(response.to_dict())

    @mcp.tool()
    async def explain_reasoning(
        query: str,
        results: str | list[dict[str, Any]] | None = None,
    ) -> str:
        """
        Explain how the question would be analyzed: problem breakdown, source
        evaluation, logic, quality checks and limitations.

        Args:
            query: The user's question
            results: Sources considered (up to ten are described)

        Returns:
            JSON {text, sources, cancelled}
        """
        try:
            if not query or not query.strip():
                raise InvalidQueryError(query)
            response = await composer.reason(query, parse_results(results))
        except Exception as e:
            logger.warning(f"explain_reasoning failed: {e}")
            return format_error(e, tool_name="explain_reasoning")
        return to_json(response.to_dict())
