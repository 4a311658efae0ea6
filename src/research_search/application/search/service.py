"""
SearchService - the produced search interface.

Orchestrates the pipeline for each request:

    query → QueryAnalyzer → CandidateGenerator (per category)
          → ResultAggregator (dedup + rank) → SearchResponse

and exposes content scanning over a pluggable ContentScanner.

Error policy:
    Search is an enrichment, so every failure inside ``search_web``,
    ``deep_research`` or ``load_more_results`` is logged and turned into
    an empty, well-formed response. Scanning never raises either; a failed
    scan is reported as ``scan_status="error"``.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import math
import time
from collections.abc import Awaitable, Callable, Sequence

from research_search.domain.entities.query import QueryAnalysis
from research_search.domain.entities.result import ScanOutcome, SearchCategory, SearchResponse, SearchResult
from research_search.infrastructure.scanner.base import ContentScanner, scan_result
from research_search.infrastructure.scanner.simulated import SimulatedContentScanner
from research_search.shared.async_utils import batch_process, gather_with_errors
from research_search.shared.exceptions import InvalidParameterError, ValidationError

from .candidate_generator import CandidateGenerator
from .query_analyzer import QueryAnalyzer
from .result_aggregator import RankingConfig, ResultAggregator
from .term_expander import TermExpander

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, str], Awaitable[None] | None]

STANDARD_CATEGORIES: tuple[SearchCategory, ...] = (
    SearchCategory.GENERAL,
    SearchCategory.ACADEMIC,
    SearchCategory.NEWS,
    SearchCategory.EXPERT,
)

DEEP_RESEARCH_CATEGORIES: tuple[SearchCategory, ...] = (
    SearchCategory.ACADEMIC,
    SearchCategory.NEWS,
    SearchCategory.INDUSTRY,
    SearchCategory.GOVERNMENT,
    SearchCategory.EXPERT,
    SearchCategory.STATISTICAL,
    SearchCategory.GENERAL,
)

DEFAULT_LIMIT = 15
DEEP_RESEARCH_SITES_PER_VARIATION = 8
DEEP_RESEARCH_MAX_RESULTS = 50
LOAD_MORE_LIMIT = 10
SCAN_BATCH_SIZE = 5


class SearchService:
    """
    Facade over the search pipeline.

    Usage:
        service = SearchService()
        response = await service.search_web("explain artificial intelligence", limit=10)

        async def progress(percent, status):
            print(f"{percent:5.1f}% {status}")

        deep = await service.deep_research("renewable energy policy", on_progress=progress)
    """

    def __init__(
        self,
        analyzer: QueryAnalyzer | None = None,
        expander: TermExpander | None = None,
        generator: CandidateGenerator | None = None,
        aggregator: ResultAggregator | None = None,
        scanner: ContentScanner | None = None,
        parallel_deep: bool = True,
        clock: Callable[[], int] | None = None,
    ) -> None:
        """
        Initialize SearchService.

        Args:
            analyzer: Query analyzer (shares ``expander`` when created here)
            expander: Term expander used for variations and suggestions
            generator: Candidate generator
            aggregator: Deduplicator / ranker
            scanner: Content scanner (defaults to the simulated one)
            parallel_deep: Run deep-research categories as concurrent tasks
            clock: Millisecond wall clock, used for ids and timings
        """
        self._expander = expander or TermExpander()
        self._analyzer = analyzer or QueryAnalyzer(self._expander)
        self._generator = generator or CandidateGenerator()
        self._aggregator = aggregator or ResultAggregator()
        self._scanner = scanner or SimulatedContentScanner()
        self._parallel_deep = parallel_deep
        self._clock = clock or (lambda: int(time.time() * 1000))

    @property
    def scanner(self) -> ContentScanner:
        return self._scanner

    def analyze(self, query: str) -> QueryAnalysis:
        return self._analyzer.analyze(query)

    # =========================================================================
    # Standard search
    # =========================================================================

    async def search_web(self, query: str, limit: int = DEFAULT_LIMIT) -> SearchResponse:
        """
        Single-pass search across general, academic, news and expert sites.

        Args:
            query: User query (any string, empty included)
            limit: Maximum number of results (>= 1)

        Returns:
            SearchResponse with at most ``limit`` pending results, sorted by
            relevance; an empty response on any failure.
        """
        started = self._clock()
        try:
            if limit < 1:
                raise InvalidParameterError("limit", limit, "an integer >= 1")

            analysis = self._analyzer.analyze(query)
            logger.info(
                f"Search: lang={analysis.language.value} intent={analysis.intent.value} "
                f"category={analysis.category.value} complexity={analysis.complexity.value}"
            )

            per_category = math.ceil(limit / len(STANDARD_CATEGORIES))
            batches = [self._generator.generate(category, analysis, per_category) for category in STANDARD_CATEGORIES]

            ranked, stats = self._aggregator.aggregate_and_rank(
                batches, query, analysis, RankingConfig.standard(max_results=limit)
            )
            results = self._assign_ids(ranked, "ai-search")

            logger.info(f"Search completed: {len(results)} results ({stats.duplicates_removed} duplicates removed)")
            return SearchResponse(
                results=results,
                total_results=len(results),
                search_time_ms=self._clock() - started,
                expanded_keywords=analysis.expansion_terms,
                search_suggestions=self._expander.search_suggestions(analysis),
            )
        except ValidationError as e:
            logger.warning(f"Search rejected: {e}")
            return SearchResponse.empty(self._clock() - started)
        except Exception:
            logger.exception(f"Search failed for query {query!r}")
            return SearchResponse.empty(self._clock() - started)

    # =========================================================================
    # Deep research
    # =========================================================================

    async def deep_research(
        self,
        query: str,
        on_progress: ProgressCallback | None = None,
    ) -> SearchResponse:
        """
        Multi-category, multi-variation search capped at 50 results.

        ``on_progress(percent, status)`` receives a non-decreasing sequence of
        percentages that always ends at 100, on success and on failure. It
        may be a plain function or a coroutine function.
        """
        started = self._clock()
        try:
            await self._report(on_progress, 5, "Initializing comprehensive research analysis...")
            analysis = self._analyzer.analyze(query)

            await self._report(on_progress, 15, "Generating advanced keyword variations and synonyms...")
            expanded = self._expander.expanded_keywords(analysis)

            await self._report(on_progress, 25, "Creating comprehensive search strategies...")
            variations = self._expander.search_variations(query, expanded, analysis)
            logger.info(f"Deep research: {len(expanded)} expanded keywords, {len(variations)} variations")

            await self._report(on_progress, 35, "Searching across 50+ specialized databases...")
            batches = await self._research_categories(analysis, variations, on_progress)

            await self._report(on_progress, 70, "Analyzing content quality and relevance...")
            unique, stats = self._aggregator.aggregate(batches)

            await self._report(on_progress, 80, "Calculating advanced relevance scores...")
            ranked = self._aggregator.rank(
                unique, query, analysis, RankingConfig.deep_research(DEEP_RESEARCH_MAX_RESULTS)
            )

            await self._report(on_progress, 90, "Finalizing comprehensive research results...")
            results = self._assign_ids(ranked, "deep-research")

            await self._report(on_progress, 100, "Deep research completed with 50+ comprehensive sources!")
            logger.info(
                f"Deep research completed: {len(results)} results from {stats.total_input} candidates "
                f"({stats.duplicates_removed} duplicates removed)"
            )
            return SearchResponse(
                results=results,
                total_results=len(results),
                search_time_ms=self._clock() - started,
                expanded_keywords=analysis.expansion_terms,
                search_suggestions=self._expander.search_suggestions(analysis),
            )
        except Exception:
            logger.exception(f"Deep research failed for query {query!r}")
            await self._report_safely(on_progress, 100, "Research completed with errors")
            return SearchResponse.empty(self._clock() - started)

    async def _research_categories(
        self,
        analysis: QueryAnalysis,
        variations: Sequence[str],
        on_progress: ProgressCallback | None,
    ) -> list[list[SearchResult]]:
        """Candidates per category, always returned in category order."""
        total = len(DEEP_RESEARCH_CATEGORIES)

        if not self._parallel_deep:
            batches = []
            for index, category in enumerate(DEEP_RESEARCH_CATEGORIES):
                await self._report(on_progress, 35 + index / total * 30, f"Researching {category.value} sources...")
                batches.append(await self._research_category(category, analysis, variations))
            return batches

        for index, category in enumerate(DEEP_RESEARCH_CATEGORIES):
            await self._report(on_progress, 35 + index / total * 30, f"Researching {category.value} sources...")
        return await gather_with_errors(
            *[self._research_category(category, analysis, variations) for category in DEEP_RESEARCH_CATEGORIES]
        )

    async def _research_category(
        self,
        category: SearchCategory,
        analysis: QueryAnalysis,
        variations: Sequence[str],
    ) -> list[SearchResult]:
        results: list[SearchResult] = []
        for variation in variations:
            results.extend(
                self._generator.generate(category, analysis, DEEP_RESEARCH_SITES_PER_VARIATION, query=variation)
            )
            # Let sibling category tasks interleave
            await asyncio.sleep(0)
        logger.debug(f"Deep research [{category.value}]: {len(results)} candidates")
        return results

    # =========================================================================
    # Follow-up operations
    # =========================================================================

    async def load_more_results(
        self,
        current: Sequence[SearchResult],
        query: str,
        offset: int = 0,
    ) -> list[SearchResult]:
        """
        Further results for infinite scroll, excluding URLs already shown.

        Returns:
            New ranked results with ``smart-scroll-`` ids; empty on failure.
        """
        try:
            analysis = self._analyzer.analyze(query)
            per_category = math.ceil(LOAD_MORE_LIMIT / len(STANDARD_CATEGORIES))
            batches = [self._generator.generate(category, analysis, per_category) for category in STANDARD_CATEGORIES]
            ranked, _ = self._aggregator.aggregate_and_rank(batches, query, analysis, RankingConfig.standard())

            shown = {result.url for result in current}
            fresh = [result for result in ranked if result.url not in shown]
            logger.info(f"Load more (offset={offset}): {len(fresh)} new of {len(ranked)} candidates")
            return self._assign_ids(fresh, "smart-scroll", offset)
        except Exception:
            logger.exception(f"Load more failed for query {query!r}")
            return []

    def refinement_suggestions(self, query: str, current: Sequence[SearchResult]) -> list[str]:
        """Narrowing suggestions based on the categories of the shown results."""
        analysis = self._analyzer.analyze(query)
        return self._expander.refinement_suggestions(query, analysis, current)

    # =========================================================================
    # Scanning
    # =========================================================================

    async def scan_content(self, url: str) -> ScanOutcome:
        """Scan one URL. Never raises."""
        try:
            return await self._scanner.scan(url)
        except Exception:
            logger.exception(f"Scanner raised for {url}")
            return ScanOutcome.failed()

    async def scan_results(
        self,
        results: Sequence[SearchResult],
        batch_size: int = SCAN_BATCH_SIZE,
    ) -> list[ScanOutcome]:
        """
        Scan results in place, ``batch_size`` at a time.

        Each result moves pending → scanning → completed | error. Results
        that are not pending are left untouched and reported as failed.
        """
        outcomes = await batch_process(
            list(results),
            lambda result: scan_result(self._scanner, result),
            batch_size=max(batch_size, 1),
        )

        final: list[ScanOutcome] = []
        for result, outcome in zip(results, outcomes, strict=True):
            if isinstance(outcome, Exception):
                logger.warning(f"Skipped scan of {result.id}: {outcome}")
                final.append(ScanOutcome.failed())
            else:
                final.append(outcome)
        return final

    # =========================================================================
    # Helpers
    # =========================================================================

    def _assign_ids(self, results: list[SearchResult], prefix: str, *parts: object) -> list[SearchResult]:
        """Stamp ids as ``{prefix}-{ms}-{parts...}-{index}``."""
        head = "-".join([prefix, str(self._clock()), *(str(part) for part in parts)])
        for index, result in enumerate(results):
            result.id = f"{head}-{index}"
        return results

    @staticmethod
    async def _report(on_progress: ProgressCallback | None, percent: float, status: str) -> None:
        if on_progress is None:
            return
        outcome = on_progress(percent, status)
        if inspect.isawaitable(outcome):
            await outcome

    async def _report_safely(self, on_progress: ProgressCallback | None, percent: float, status: str) -> None:
        try:
            await self._report(on_progress, percent, status)
        except Exception:
            logger.exception("Progress callback failed")
