"""LLM text-generation clients."""

from .gemini import DEFAULT_MODEL, GeminiClient

__all__ = ["GeminiClient", "DEFAULT_MODEL"]
