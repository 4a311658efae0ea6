"""
Tests for MCP tools - search, scan and answer tool functions called directly.
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from research_search.application.composer.composer import ResponseComposer
from research_search.presentation.mcp_server.tools import register_all_tools
from research_search.presentation.mcp_server.tools._common import format_error, normalize_limit, parse_results
from research_search.shared.exceptions import InvalidParameterError, RateLimitError


class FakeMCP:
    """Collects tool functions by name instead of registering them."""

    def __init__(self):
        self.tools = {}

    def tool(self):
        def decorator(func):
            self.tools[func.__name__] = func
            return func

        return decorator


@pytest.fixture
def tools(search_service, composer):
    mcp = FakeMCP()
    register_all_tools(mcp, search_service, composer)
    return mcp.tools


@pytest.fixture
def ctx():
    context = MagicMock()
    context.report_progress = AsyncMock()
    return context


# ============================================================================
# _common helpers
# ============================================================================


class TestNormalizeLimit:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(None, 15), ("", 15), ("abc", 15), ("7", 7), (0, 1), (500, 50), (20, 20)],
    )
    def test_values(self, value, expected):
        assert normalize_limit(value, default=15, max_val=50) == expected


class TestParseResults:
    def test_empty(self):
        assert parse_results(None) == []
        assert parse_results("") == []

    def test_json_list(self):
        parsed = parse_results('[{"url": "https://arxiv.org/search/?query=x", "title": "X"}]')
        assert parsed[0].domain == "arxiv.org"
        assert parsed[0].title == "X"

    def test_search_response_envelope(self, sample_results):
        payload = {"results": [r.to_dict() for r in sample_results], "totalResults": 3}
        assert [r.id for r in parse_results(payload)] == ["r-0", "r-1", "r-2"]

    def test_skips_non_dict_items(self):
        assert len(parse_results([{"url": "https://a.example"}, "junk", 3])) == 1

    def test_invalid_json(self):
        with pytest.raises(InvalidParameterError, match="results"):
            parse_results("{not json")

    def test_not_a_list(self):
        with pytest.raises(InvalidParameterError):
            parse_results('{"url": "https://a.example"}')

    def test_missing_url(self):
        with pytest.raises(InvalidParameterError, match="missing url"):
            parse_results([{"title": "no url"}])


class TestFormatError:
    def test_research_error_uses_agent_message(self):
        message = format_error(RateLimitError(retry_after=2.0), tool_name="search_web")
        assert "API rate limit exceeded" in message
        assert "Retry after 2.0 seconds" in message

    def test_plain_exception(self):
        message = format_error(ValueError("boom"), tool_name="scan_content", suggestion="try again")
        assert "scan_content failed: boom" in message
        assert "try again" in message

    def test_string(self):
        assert "Missing url" in format_error("Missing url", tool_name="scan_content")


# ============================================================================
# Search tools
# ============================================================================


class TestRegistration:
    def test_all_tools_registered(self, tools):
        assert set(tools) == {
            "search_web",
            "deep_research",
            "analyze_query",
            "load_more_results",
            "suggest_refinements",
            "scan_content",
            "scan_results",
            "generate_answer",
            "explain_reasoning",
        }


class TestSearchWebTool:
    async def test_returns_json_response(self, tools):
        data = json.loads(await tools["search_web"]("explain artificial intelligence", limit=5))

        assert 0 < data["totalResults"] <= 5
        assert data["totalResults"] == len(data["results"])
        assert data["results"][0]["scanStatus"] == "pending"
        assert "expandedKeywords" in data

    async def test_string_limit(self, tools):
        data = json.loads(await tools["search_web"]("renewable energy", limit="3"))
        assert len(data["results"]) <= 3

    async def test_invalid_limit_uses_default(self, tools):
        data = json.loads(await tools["search_web"]("renewable energy", limit="many"))
        assert 0 < len(data["results"]) <= 15

    async def test_oversized_limit_capped(self, tools):
        data = json.loads(await tools["search_web"]("renewable energy", limit=500))
        assert len(data["results"]) <= 50

    async def test_arabic_not_escaped(self, tools):
        text = await tools["search_web"]("ما هو التعلم الآلي", limit=5)
        assert "\\u06" not in text


class TestDeepResearchTool:
    async def test_reports_progress(self, tools, ctx):
        data = json.loads(await tools["deep_research"]("renewable energy policy", ctx))

        assert 0 < data["totalResults"] <= 50
        assert all(r["id"].startswith("deep-research-") for r in data["results"])

        calls = ctx.report_progress.await_args_list
        percents = [call.kwargs["progress"] for call in calls]
        assert percents == sorted(percents)
        assert percents[-1] == 100
        assert all(call.kwargs["total"] == 100 for call in calls)


class TestAnalyzeQueryTool:
    async def test_analysis(self, tools):
        data = json.loads(await tools["analyze_query"]("explain python programming"))

        assert data["language"] == "en"
        assert data["intent"] == "explanation"
        assert data["category"] == "tech"
        assert data["search_terms"]

    async def test_arabic(self, tools):
        data = json.loads(await tools["analyze_query"]("اشرح الذكاء الاصطناعي"))
        assert data["language"] == "ar"
        assert data["intent"] == "explanation"


class TestLoadMoreTool:
    async def test_excludes_shown_urls(self, tools):
        first = await tools["search_web"]("solar panels", limit=5)
        shown = {r["url"] for r in json.loads(first)["results"]}

        data = json.loads(await tools["load_more_results"]("solar panels", current_results=first, offset="2"))

        assert data["count"] == len(data["results"])
        assert not shown & {r["url"] for r in data["results"]}
        assert all(r["id"].startswith("smart-scroll-") for r in data["results"])
        assert all(r["id"].split("-")[3] == "2" for r in data["results"])

    async def test_invalid_json(self, tools):
        message = await tools["load_more_results"]("solar panels", current_results="[broken")
        assert "Invalid parameter 'current_results'" in message


class TestSuggestRefinementsTool:
    async def test_suggestions(self, tools, sample_results):
        payload = json.dumps([r.to_dict() for r in sample_results])
        data = json.loads(await tools["suggest_refinements"]("photosynthesis", current_results=payload))

        assert data["query"] == "photosynthesis"
        assert 0 < len(data["suggestions"]) <= 5

    async def test_invalid_payload(self, tools):
        message = await tools["suggest_refinements"]("photosynthesis", current_results='"text"')
        assert "**Error**" in message


# ============================================================================
# Scan tools
# ============================================================================


class TestScanContentTool:
    async def test_scan(self, tools):
        data = json.loads(await tools["scan_content"]("https://arxiv.org/abs/1706.03762"))

        assert data["scanStatus"] == "completed"
        assert 0 < len(data["content"]) <= 803

    @pytest.mark.parametrize("url", ["", "   "])
    async def test_missing_url(self, tools, url):
        assert "Missing url" in await tools["scan_content"](url)


class TestScanResultsTool:
    async def test_scans_search_output(self, tools):
        search = await tools["search_web"]("machine learning", limit=4)
        data = json.loads(await tools["scan_results"](search))

        assert data["scanned"] == len(data["results"])
        assert data["completed"] == data["scanned"]
        assert all(r["scanStatus"] == "completed" for r in data["results"])
        assert all(r["content"] for r in data["results"])

    async def test_already_scanned_left_alone(self, tools):
        payload = [{"url": "https://arxiv.org/x", "scanStatus": "error"}]
        data = json.loads(await tools["scan_results"](payload))

        assert data["completed"] == 0
        assert data["results"][0]["scanStatus"] == "error"

    async def test_invalid_payload(self, tools):
        assert "**Error**" in await tools["scan_results"]("nope")


# ============================================================================
# Answer tools
# ============================================================================


class TestGenerateAnswerTool:
    async def test_streams_chunks_as_progress(self, tools, ctx, sample_results, mock_text_generator):
        results = json.dumps({"results": [r.to_dict() for r in sample_results]})
        data = json.loads(await tools["generate_answer"]("What is photosynthesis?", ctx, results=results))

        assert data["text"] == "Photosynthesis converts light into chemical energy."
        assert data["cancelled"] is False
        assert [s["url"] for s in data["sources"]] == [r.url for r in sample_results]

        chunks = [call.kwargs["message"] for call in ctx.report_progress.await_args_list]
        assert "".join(chunks) == data["text"]
        assert [call.kwargs["progress"] for call in ctx.report_progress.await_args_list] == list(
            range(1, len(chunks) + 1)
        )

        prompt = mock_text_generator.generate.await_args.args[0]
        assert "What is photosynthesis?" in prompt

    @pytest.mark.parametrize("query", ["", "  "])
    async def test_empty_query(self, tools, ctx, query):
        message = await tools["generate_answer"](query, ctx)
        assert "Invalid query" in message
        ctx.report_progress.assert_not_awaited()

    async def test_generator_failure_reported(self, tools, ctx, mock_text_generator):
        mock_text_generator.generate.side_effect = RuntimeError("quota exhausted")
        message = await tools["generate_answer"]("What is photosynthesis?", ctx)

        assert "AI response failed" in message
        assert "quota exhausted" in message

    async def test_without_generator(self, search_service, ctx):
        mcp = FakeMCP()
        register_all_tools(mcp, search_service, ResponseComposer(None))

        message = await mcp.tools["generate_answer"]("What is photosynthesis?", ctx)
        assert "no text generator configured" in message
        assert "GEMINI_API_KEY" in message


class TestExplainReasoningTool:
    async def test_reasoning(self, tools, sample_results):
        data = json.loads(
            await tools["explain_reasoning"]("Why is the sky blue?", results=[r.to_dict() for r in sample_results])
        )
        assert data["text"]
        assert len(data["sources"]) == 3

    async def test_empty_query(self, tools):
        assert "Invalid query" in await tools["explain_reasoning"]("")
