"""
GeminiClient - text generation over the Gemini REST API.

Implements the ``TextGenerator`` protocol used by ResponseComposer:
``await client.generate(prompt) -> str``. The whole completion is
requested at once; word streaming is simulated downstream.

Unlike search, generation is fail-loud: any failure raises GenerationError.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from research_search.infrastructure.http.base_client import BaseAPIClient
from research_search.shared.exceptions import ConfigurationError, ErrorContext, GenerationError

logger = logging.getLogger(__name__)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.0-flash-exp"


class GeminiClient(BaseAPIClient):
    """
    Minimal Gemini ``generateContent`` client.

    Usage:
        client = GeminiClient(api_key="...", system_instruction=SYSTEM_PROMPT)
        text = await client.generate("Explain photosynthesis")
    """

    _service_name = "Gemini"
    _MAX_RETRIES = 2

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        system_instruction: str | None = None,
        temperature: float = 0.3,
        top_k: int = 20,
        top_p: float = 0.8,
        max_output_tokens: int = 4096,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError("GEMINI_API_KEY is required for answer generation")
        super().__init__(
            base_url=GEMINI_API_BASE,
            timeout=timeout,
            min_interval=0.0,
            headers={"Content-Type": "application/json", "x-goog-api-key": api_key},
            transport=transport,
        )
        self._model = model
        self._system_instruction = system_instruction
        self._generation_config = {
            "temperature": temperature,
            "topK": top_k,
            "topP": top_p,
            "maxOutputTokens": max_output_tokens,
        }

    @property
    def model(self) -> str:
        return self._model

    def build_payload(self, prompt: str) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": self._generation_config,
        }
        if self._system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": self._system_instruction}]}
        return payload

    async def generate(self, prompt: str) -> str:
        """
        Generate a full completion for ``prompt``.

        Raises:
            GenerationError: request failed or the response carried no text
        """
        data = await self._make_request(
            f"/models/{self._model}:generateContent",
            method="POST",
            data=self.build_payload(prompt),
        )
        if not isinstance(data, dict):
            raise GenerationError(
                f"{self._service_name} request failed",
                context=ErrorContext(operation="generate", tool_name=self._model),
            )

        text = self.extract_text(data)
        if not text:
            reason = data.get("promptFeedback", {}).get("blockReason") or "empty response"
            raise GenerationError(
                f"{self._service_name} returned no text ({reason})",
                context=ErrorContext(operation="generate", tool_name=self._model),
                retryable=False,
            )

        logger.debug(f"{self._service_name} generated {len(text)} chars")
        return text

    @staticmethod
    def extract_text(data: dict[str, Any]) -> str:
        """Concatenate the text parts of the first candidate."""
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts if isinstance(part, dict))
