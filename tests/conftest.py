"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import random
from datetime import UTC, datetime
from itertools import count
from unittest.mock import AsyncMock

import pytest

from research_search.application.composer.composer import ResponseComposer
from research_search.application.search.candidate_generator import CandidateGenerator
from research_search.application.search.query_analyzer import QueryAnalyzer
from research_search.application.search.result_aggregator import ResultAggregator
from research_search.application.search.service import SearchService
from research_search.application.search.term_expander import TermExpander
from research_search.domain.entities.result import ScanStatus, SearchResult, SourceType
from research_search.infrastructure.scanner.simulated import SimulatedContentScanner

FIXED_NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=UTC)


# ============================================================================
# Clocks and randomness
# ============================================================================


@pytest.fixture
def fixed_now():
    """Pinned wall clock for publish dates and freshness."""
    return lambda: FIXED_NOW


@pytest.fixture
def ms_clock():
    """Millisecond clock that advances by 7ms per call."""
    ticks = count(start=1_700_000_000_000, step=7)
    return lambda: next(ticks)


# ============================================================================
# Pipeline components
# ============================================================================


@pytest.fixture
def expander():
    return TermExpander()


@pytest.fixture
def analyzer(expander):
    return QueryAnalyzer(expander)


@pytest.fixture
def generator(fixed_now):
    """Seeded candidate generator."""
    return CandidateGenerator(rng=random.Random(42), now=fixed_now)


@pytest.fixture
def aggregator(fixed_now):
    return ResultAggregator(now=fixed_now)


@pytest.fixture
def scanner():
    """Simulated scanner without the fetch delay."""
    return SimulatedContentScanner(min_delay=0, max_delay=0, rng=random.Random(0))


@pytest.fixture
def search_service(analyzer, expander, generator, aggregator, scanner, ms_clock):
    """Fully wired, deterministic SearchService."""
    return SearchService(
        analyzer=analyzer,
        expander=expander,
        generator=generator,
        aggregator=aggregator,
        scanner=scanner,
        clock=ms_clock,
    )


@pytest.fixture
def mock_text_generator():
    """Text generator returning a fixed answer."""
    text_generator = AsyncMock()
    text_generator.generate = AsyncMock(return_value="Photosynthesis converts light into chemical energy.")
    return text_generator


@pytest.fixture
def composer(mock_text_generator):
    """ResponseComposer with no streaming delay."""
    return ResponseComposer(mock_text_generator, min_delay=0, max_delay=0)


# ============================================================================
# Sample data
# ============================================================================


@pytest.fixture
def make_result():
    """Factory for SearchResult instances."""

    def _create(
        id: str = "r-0",
        title: str = "Comprehensive photosynthesis Guide - Wikipedia",
        url: str = "https://en.wikipedia.org/wiki/Special:Search?search=photosynthesis",
        snippet: str = "Detailed information and comprehensive guide about photosynthesis.",
        domain: str = "wikipedia.org",
        category: str | None = "general",
        source_type: SourceType | None = SourceType.GENERAL,
        publish_date: str | None = None,
        scan_status: ScanStatus = ScanStatus.PENDING,
    ) -> SearchResult:
        return SearchResult(
            id=id,
            title=title,
            url=url,
            snippet=snippet,
            domain=domain,
            category=category,
            source_type=source_type,
            publish_date=publish_date,
            scan_status=scan_status,
        )

    return _create


@pytest.fixture
def sample_results(make_result):
    """Three results from different categories."""
    return [
        make_result(),
        make_result(
            id="r-1",
            title="Academic Research on photosynthesis - arXiv",
            url="https://arxiv.org/search/?query=photosynthesis",
            snippet="Peer-reviewed academic research on photosynthesis.",
            domain="arxiv.org",
            category="academic",
            source_type=SourceType.ACADEMIC,
        ),
        make_result(
            id="r-2",
            title="Latest photosynthesis News - Reuters",
            url="https://reuters.com/search?q=photosynthesis",
            snippet="Breaking news coverage and latest developments in photosynthesis.",
            domain="reuters.com",
            category="news",
            source_type=SourceType.NEWS,
        ),
    ]
