"""
ResponseComposer - grounded answer generation with cancellable streaming.

The configured TextGenerator returns the whole completion at once; the
composer re-emits it word by word with a short randomized delay so callers
can render progressively.

Cancellation:
    Callers pass an ``asyncio.Event``. It is checked before every chunk, so
    setting it stops emission at the next word boundary instead of after
    the whole text has been replayed.

Errors:
    Generation is fail-loud. A missing generator or any generator failure
    raises GenerationError, which callers can tell apart from an empty
    search response.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import random
from collections.abc import AsyncIterator, Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from research_search.domain.entities.result import SearchResult
from research_search.shared.exceptions import ErrorContext, GenerationError

from .prompts import build_context_prompt, build_reasoning_prompt, extract_sources

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[str], Awaitable[None] | None]


@runtime_checkable
class TextGenerator(Protocol):
    """External LLM collaborator: prompt in, full text out."""

    async def generate(self, prompt: str) -> str: ...


@dataclass
class ComposedResponse:
    """Answer text plus the citations it was grounded on."""

    text: str
    sources: list[dict[str, Any]] = field(default_factory=list)
    cancelled: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "sources": self.sources, "cancelled": self.cancelled}


def split_into_chunks(text: str) -> list[str]:
    """First word bare, every later word prefixed with one space."""
    words = text.split(" ")
    return [word if index == 0 else f" {word}" for index, word in enumerate(words)]


class ResponseComposer:
    """
    Builds prompts, calls the generator, streams the answer.

    Usage:
        composer = ResponseComposer(GeminiClient(api_key=...))

        cancel = asyncio.Event()
        async for chunk in composer.stream(query, results=results, cancel_event=cancel):
            print(chunk, end="")
    """

    def __init__(
        self,
        generator: TextGenerator | None,
        min_delay: float = 0.02,
        max_delay: float = 0.05,
        rng: random.Random | None = None,
    ) -> None:
        self._generator = generator
        self._min_delay = min_delay
        self._max_delay = max(max_delay, min_delay)
        self._rng = rng or random.Random()

    @property
    def available(self) -> bool:
        return self._generator is not None

    async def _generate(self, prompt: str, failure: str) -> str:
        if self._generator is None:
            raise GenerationError(
                f"{failure}: no text generator configured",
                context=ErrorContext(suggestion="Set GEMINI_API_KEY to enable answer generation"),
                retryable=False,
            )
        try:
            return await self._generator.generate(prompt)
        except GenerationError as e:
            raise GenerationError(f"{failure}: {e}", context=e.context, retryable=e.retryable) from e
        except Exception as e:
            logger.exception(failure)
            raise GenerationError(f"{failure}: {e}") from e

    async def _answer_chunks(
        self,
        query: str,
        search_mode: str,
        history: Sequence[Mapping[str, str]],
        results: Sequence[SearchResult],
        deep_research: bool,
        voice_input: bool,
    ) -> list[str]:
        prompt = build_context_prompt(query, search_mode, history, results, deep_research, voice_input)
        logger.debug(f"Context prompt built ({len(prompt)} chars)")

        text = await self._generate(prompt, "AI response failed")
        return split_into_chunks(text)

    async def _emit(self, chunks: list[str], cancel_event: asyncio.Event | None) -> AsyncIterator[str]:
        # The event is checked before each chunk; setting it after the last one cancels nothing
        for chunk in chunks:
            if cancel_event is not None and cancel_event.is_set():
                logger.info("Answer streaming cancelled")
                return
            yield chunk
            delay = self._rng.uniform(self._min_delay, self._max_delay)
            if delay > 0:
                await asyncio.sleep(delay)

    async def stream(
        self,
        query: str,
        *,
        search_mode: str = "web",
        history: Sequence[Mapping[str, str]] = (),
        results: Sequence[SearchResult] = (),
        deep_research: bool = False,
        voice_input: bool = False,
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncIterator[str]:
        """
        Yield the answer word by word.

        Raises:
            GenerationError: generator missing or failed (before any chunk)
        """
        chunks = await self._answer_chunks(query, search_mode, history, results, deep_research, voice_input)
        async for chunk in self._emit(chunks, cancel_event):
            yield chunk

    async def compose(
        self,
        query: str,
        *,
        search_mode: str = "web",
        history: Sequence[Mapping[str, str]] = (),
        results: Sequence[SearchResult] = (),
        deep_research: bool = False,
        voice_input: bool = False,
        on_chunk: ChunkCallback | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> ComposedResponse:
        """
        Stream the answer into ``on_chunk`` and return the assembled response.

        ``text`` holds only what was emitted; ``cancelled`` tells whether the
        stream stopped early.
        """
        chunks = await self._answer_chunks(query, search_mode, history, results, deep_research, voice_input)
        emitted: list[str] = []
        async for chunk in self._emit(chunks, cancel_event):
            emitted.append(chunk)
            if on_chunk is not None:
                outcome = on_chunk(chunk)
                if inspect.isawaitable(outcome):
                    await outcome

        cancelled = len(emitted) < len(chunks)
        return ComposedResponse(text="".join(emitted), sources=extract_sources(results), cancelled=cancelled)

    async def reason(self, query: str, results: Sequence[SearchResult] = ()) -> ComposedResponse:
        """Explain the reasoning methodology for ``query`` (not streamed)."""
        text = await self._generate(build_reasoning_prompt(query, results), "Reasoning generation failed")
        return ComposedResponse(text=text, sources=extract_sources(results))
