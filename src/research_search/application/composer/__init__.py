"""
Answer Composition

Prompt building and cancellable word streaming on top of a TextGenerator.
"""

from __future__ import annotations

from .composer import ChunkCallback, ComposedResponse, ResponseComposer, TextGenerator, split_into_chunks
from .prompts import (
    SYSTEM_PROMPT,
    analyze_response_complexity,
    build_context_prompt,
    build_reasoning_prompt,
    detect_language_name,
    extract_sources,
)

__all__ = [
    "ResponseComposer",
    "ComposedResponse",
    "TextGenerator",
    "ChunkCallback",
    "split_into_chunks",
    "SYSTEM_PROMPT",
    "analyze_response_complexity",
    "build_context_prompt",
    "build_reasoning_prompt",
    "detect_language_name",
    "extract_sources",
]
