"""
Application DI Container (dependency-injector).

Centralizes service creation and lifecycle management.

Usage::

    from research_search.container import ApplicationContainer

    container = ApplicationContainer()
    container.config.from_dict({
        "scan_mode": "simulated",
        "scan_timeout": 10.0,
        "parallel_deep": True,
        "gemini_api_key": None,
        "gemini_model": "gemini-2.0-flash-exp",
    })

    service = container.search_service()
    composer = container.response_composer()

    # In tests, override any provider:
    container.content_scanner.override(providers.Object(fake_scanner))
"""

from __future__ import annotations

import logging

from dependency_injector import containers, providers

from research_search.shared.exceptions import ConfigurationError, ErrorContext

logger = logging.getLogger(__name__)

SCAN_MODES = ("simulated", "http")
DEFAULT_SCAN_TIMEOUT = 10.0


def _create_term_expander() -> object:
    """Lazy factory for TermExpander (avoids top-level import)."""
    from research_search.application.search.term_expander import TermExpander

    return TermExpander()


def _create_query_analyzer(expander: object) -> object:
    from research_search.application.search.query_analyzer import QueryAnalyzer

    return QueryAnalyzer(expander)  # type: ignore[arg-type]


def _create_candidate_generator() -> object:
    from research_search.application.search.candidate_generator import CandidateGenerator

    return CandidateGenerator()


def _create_result_aggregator() -> object:
    from research_search.application.search.result_aggregator import ResultAggregator

    return ResultAggregator()


def _create_content_scanner(mode: str | None, timeout: float | None) -> object:
    """Scanner for ``RESEARCH_SCAN_MODE``: canned content or real HTTP fetching."""
    mode = (mode or "simulated").lower()
    if mode == "simulated":
        from research_search.infrastructure.scanner.simulated import SimulatedContentScanner

        return SimulatedContentScanner()
    if mode == "http":
        from research_search.infrastructure.scanner.http_scanner import HttpContentScanner

        return HttpContentScanner(timeout=float(timeout or DEFAULT_SCAN_TIMEOUT))

    raise ConfigurationError(
        f"Unknown scan mode: {mode!r}",
        context=ErrorContext(suggestion=f"Use one of: {', '.join(SCAN_MODES)}", input_value=mode),
    )


def _create_text_generator(api_key: str | None, model: str | None) -> object | None:
    """GeminiClient when a key is configured, else None (answer tools disabled)."""
    if not api_key:
        logger.info("GEMINI_API_KEY not set - answer generation disabled")
        return None

    from research_search.application.composer.prompts import SYSTEM_PROMPT
    from research_search.infrastructure.llm.gemini import DEFAULT_MODEL, GeminiClient

    return GeminiClient(api_key=api_key, model=model or DEFAULT_MODEL, system_instruction=SYSTEM_PROMPT)


def _create_response_composer(generator: object | None) -> object:
    from research_search.application.composer.composer import ResponseComposer

    return ResponseComposer(generator)  # type: ignore[arg-type]


def _create_search_service(
    analyzer: object,
    expander: object,
    generator: object,
    aggregator: object,
    scanner: object,
    parallel_deep: bool | None,
) -> object:
    from research_search.application.search.service import SearchService

    return SearchService(
        analyzer=analyzer,  # type: ignore[arg-type]
        expander=expander,  # type: ignore[arg-type]
        generator=generator,  # type: ignore[arg-type]
        aggregator=aggregator,  # type: ignore[arg-type]
        scanner=scanner,  # type: ignore[arg-type]
        parallel_deep=True if parallel_deep is None else bool(parallel_deep),
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Central DI container for Research Search MCP.

    Manages creation and lifecycle of all core services:
    - ``search_service``: search / deep research / scanning facade
    - ``content_scanner``: simulated or HTTP page scanner
    - ``text_generator``: Gemini client (``None`` without an API key)
    - ``response_composer``: prompt building + streamed answers
    """

    config = providers.Configuration()

    term_expander = providers.Singleton(_create_term_expander)

    query_analyzer = providers.Singleton(
        _create_query_analyzer,
        expander=term_expander,
    )

    candidate_generator = providers.Singleton(_create_candidate_generator)

    result_aggregator = providers.Singleton(_create_result_aggregator)

    content_scanner = providers.Singleton(
        _create_content_scanner,
        mode=config.scan_mode,
        timeout=config.scan_timeout,
    )

    text_generator = providers.Singleton(
        _create_text_generator,
        api_key=config.gemini_api_key,
        model=config.gemini_model,
    )

    response_composer = providers.Singleton(
        _create_response_composer,
        generator=text_generator,
    )

    search_service = providers.Singleton(
        _create_search_service,
        analyzer=query_analyzer,
        expander=term_expander,
        generator=candidate_generator,
        aggregator=result_aggregator,
        scanner=content_scanner,
        parallel_deep=config.parallel_deep,
    )


__all__ = ["ApplicationContainer", "SCAN_MODES"]
