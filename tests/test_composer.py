"""
Tests for answer composition - prompts, streaming, cancellation and failures.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from research_search.application.composer import (
    ResponseComposer,
    analyze_response_complexity,
    build_context_prompt,
    build_reasoning_prompt,
    detect_language_name,
    extract_sources,
    split_into_chunks,
)
from research_search.domain.entities.query import QueryComplexity
from research_search.shared.exceptions import GenerationError


# =============================================================================
# Prompts
# =============================================================================


class TestResponseComplexity:
    @pytest.mark.parametrize(
        ("query", "expected"),
        [
            ("python", QueryComplexity.SIMPLE),
            ("solar panel cost", QueryComplexity.SIMPLE),
            ("what is python", QueryComplexity.MEDIUM),
            ("renewable energy policy in europe today", QueryComplexity.MEDIUM),
            ("detailed analysis of renewable energy", QueryComplexity.COMPLEX),
            ("one two three four five six seven eight nine", QueryComplexity.COMPLEX),
        ],
    )
    def test_word_based_complexity(self, query, expected):
        assert analyze_response_complexity(query) is expected


class TestContextPrompt:
    def test_language_lock(self):
        assert "Respond in English language only!" in build_context_prompt("what is python")
        assert detect_language_name("ما هو الذكاء الاصطناعي") == "Arabic"
        assert "RESPOND IN Arabic ONLY!" in build_context_prompt("ما هو الذكاء الاصطناعي")

    def test_header_fields(self):
        prompt = build_context_prompt("what is python", search_mode="web")

        assert "Query Complexity: medium" in prompt
        assert "Search Mode: WEB" in prompt
        assert "Research Type: STANDARD SEARCH" in prompt
        assert "Input Method: TEXT INPUT" in prompt
        assert "DETAILED response (4-5 paragraphs)" in prompt

    def test_voice_input(self):
        prompt = build_context_prompt("what is python", voice_input=True)

        assert "VOICE INPUT INSTRUCTIONS" in prompt
        assert "EXACTLY 3 SHORT sentences" in prompt
        assert "Keep response SHORT" in prompt

    def test_deep_research(self, sample_results):
        prompt = build_context_prompt("what is python", results=sample_results, deep_research=True)

        assert "DEEP RESEARCH INSTRUCTIONS" in prompt
        assert "Use ALL 3 sources extensively" in prompt
        assert "Research Type: DEEP RESEARCH" in prompt

    def test_sources_listed(self, sample_results):
        sample_results[1].content = "c" * 500
        prompt = build_context_prompt("photosynthesis", results=sample_results)

        assert "COMPREHENSIVE SOURCE DATABASE (3 sources" in prompt
        assert "2. Website: Academic Research on photosynthesis - arXiv" in prompt
        assert "Domain: arxiv.org" in prompt
        assert f"Content: {'c' * 300}...\n" in prompt

    def test_history_keeps_last_six_turns(self):
        history = [{"role": "user", "content": f"msg-{i}"} for i in range(8)]
        prompt = build_context_prompt("follow up", history=history)

        assert "msg-1" not in prompt
        assert "user: msg-2" in prompt
        assert "user: msg-7" in prompt

    def test_history_truncates_long_messages(self):
        history = [{"role": "assistant", "content": "z" * 250}]
        prompt = build_context_prompt("follow up", history=history)
        assert f"assistant: {'z' * 200}...\n" in prompt

    def test_question_at_the_end(self):
        prompt = build_context_prompt("why is the sky blue")
        assert "User Question (in English): why is the sky blue" in prompt
        assert prompt.rstrip().endswith("- Include relevant analysis and insights")


class TestReasoningPrompt:
    def test_lists_at_most_ten_sources(self, make_result):
        results = [make_result(id=str(i), title=f"Source {i}", url=f"https://example.com/{i}") for i in range(12)]
        prompt = build_reasoning_prompt("why is the sky blue", results)

        assert "Available Sources for Analysis (12 sources)" in prompt
        assert "10. Source 9 (example.com)" in prompt
        assert "Source 10" not in prompt
        assert "REASONING MODE INSTRUCTIONS" in prompt

    def test_without_sources(self):
        prompt = build_reasoning_prompt("why is the sky blue")
        assert "Available Sources" not in prompt
        assert prompt.endswith("in English.")


class TestSources:
    def test_extract_sources_limit(self, make_result):
        results = [make_result(id=str(i), url=f"https://example.com/{i}") for i in range(8)]
        sources = extract_sources(results)

        assert len(sources) == 5
        assert set(sources[0]) == {"title", "url", "snippet"}


# =============================================================================
# Streaming
# =============================================================================


class TestSplitIntoChunks:
    def test_word_boundaries(self):
        assert split_into_chunks("one two three") == ["one", " two", " three"]

    def test_concatenation_restores_text(self):
        text = "Line one.\nLine  two"
        assert "".join(split_into_chunks(text)) == text


class TestResponseComposer:
    async def test_compose_streams_every_word(self, composer, mock_text_generator, sample_results):
        chunks: list[str] = []

        response = await composer.compose("what is photosynthesis", results=sample_results, on_chunk=chunks.append)

        assert response.text == "Photosynthesis converts light into chemical energy."
        assert chunks[0] == "Photosynthesis"
        assert chunks[1] == " converts"
        assert response.cancelled is False
        assert len(response.sources) == 3
        prompt = mock_text_generator.generate.await_args.args[0]
        assert "Website: Latest photosynthesis News - Reuters" in prompt

    async def test_async_chunk_callback(self, composer):
        received = []

        async def on_chunk(chunk):
            received.append(chunk)

        await composer.compose("what is photosynthesis", on_chunk=on_chunk)
        assert "".join(received) == "Photosynthesis converts light into chemical energy."

    async def test_stream(self, composer):
        chunks = [chunk async for chunk in composer.stream("what is photosynthesis")]
        assert len(chunks) == 6

    async def test_cancel_before_start(self, composer):
        cancel = asyncio.Event()
        cancel.set()

        response = await composer.compose("what is photosynthesis", cancel_event=cancel)

        assert response.text == ""
        assert response.cancelled is True

    async def test_cancel_mid_stream(self, composer):
        cancel = asyncio.Event()
        received = []

        def on_chunk(chunk):
            received.append(chunk)
            if len(received) == 2:
                cancel.set()

        response = await composer.compose("what is photosynthesis", on_chunk=on_chunk, cancel_event=cancel)

        assert response.text == "Photosynthesis converts"
        assert response.cancelled is True

    async def test_cancel_after_last_chunk_not_cancelled(self, composer):
        cancel = asyncio.Event()
        received = []

        def on_chunk(chunk):
            received.append(chunk)
            if len(received) == 6:
                cancel.set()

        response = await composer.compose("what is photosynthesis", on_chunk=on_chunk, cancel_event=cancel)

        assert response.text == "Photosynthesis converts light into chemical energy."
        assert response.cancelled is False

    async def test_missing_generator(self):
        composer = ResponseComposer(None)

        assert composer.available is False
        with pytest.raises(GenerationError, match="no text generator configured"):
            await composer.compose("what is photosynthesis")

    async def test_generator_exception_wrapped(self):
        failing = AsyncMock()
        failing.generate = AsyncMock(side_effect=RuntimeError("connection reset"))
        composer = ResponseComposer(failing, min_delay=0, max_delay=0)

        with pytest.raises(GenerationError, match="AI response failed: connection reset") as exc_info:
            await composer.compose("what is photosynthesis")

        assert exc_info.value.retryable is True

    async def test_generation_error_keeps_retryability(self):
        failing = AsyncMock()
        failing.generate = AsyncMock(side_effect=GenerationError("blocked", retryable=False))
        composer = ResponseComposer(failing, min_delay=0, max_delay=0)

        with pytest.raises(GenerationError) as exc_info:
            await composer.compose("what is photosynthesis")

        assert exc_info.value.retryable is False

    async def test_reason(self, composer, mock_text_generator, sample_results):
        response = await composer.reason("why is the sky blue", sample_results)

        assert response.text == "Photosynthesis converts light into chemical energy."
        assert "REASONING MODE INSTRUCTIONS" in mock_text_generator.generate.await_args.args[0]
        assert response.to_dict()["cancelled"] is False

    async def test_reason_failure(self):
        with pytest.raises(GenerationError, match="Reasoning generation failed"):
            await ResponseComposer(None).reason("why")
