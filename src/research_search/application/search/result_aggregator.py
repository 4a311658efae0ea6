"""
ResultAggregator - Deduplication and relevance ranking of search candidates.

This module merges candidates produced for several categories:
1. Deduplication: first-seen wins per URL *and* per normalized title
2. Relevance scoring: one additive scoring function for every search path
3. Stable descending sort and result capping

Architecture Decision:
    Standard search and deep research used to carry two near-identical
    formulas. There is now exactly one, parameterized by RankingConfig; the
    two presets differ only in the freshness toggle and the result cap, so
    for fresh-less configs both paths score a result identically.

    Scores are clamped to [15, 100]. The floor keeps the UI from showing a
    "0% relevant" badge.

Example:
    >>> aggregator = ResultAggregator()
    >>> ranked, stats = aggregator.aggregate_and_rank(
    ...     [academic_results, news_results],
    ...     query="explain artificial intelligence",
    ...     analysis=analysis,
    ...     config=RankingConfig.standard(max_results=15),
    ... )
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from research_search.domain.entities.query import QueryAnalysis, QueryCategory, QueryIntent
from research_search.domain.entities.result import SearchResult

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

AUTHORITY_DOMAINS: tuple[str, ...] = (
    "wikipedia.org",
    "github.com",
    "stackoverflow.com",
    "medium.com",
    "nature.com",
    "science.org",
    "ieee.org",
    "acm.org",
    "arxiv.org",
    "bbc.com",
    "cnn.com",
    "reuters.com",
    "nytimes.com",
    "who.int",
    "cdc.gov",
    "nih.gov",
    "gov.uk",
    "europa.eu",
)

# Canonical domains per query category (substring match on result.domain)
CATEGORY_DOMAINS: Mapping[QueryCategory, tuple[str, ...]] = MappingProxyType(
    {
        QueryCategory.TECH: ("stackoverflow.com", "github.com", "developer.mozilla.org", "techcrunch.com"),
        QueryCategory.EDUCATION: ("wikipedia.org", "coursera.org", "edx.org", "khanacademy.org"),
        QueryCategory.NEWS: ("bbc.com", "cnn.com", "reuters.com", "aljazeera.net"),
        QueryCategory.HEALTH: ("who.int", "cdc.gov", "nih.gov", "mayoclinic.org"),
        QueryCategory.GOVERNMENT: ("gov.uk", "europa.eu", "un.org", "whitehouse.gov"),
        QueryCategory.INDUSTRY: ("mckinsey.com", "deloitte.com", "pwc.com", "bcg.com"),
    }
)

# Source types preferred by each intent. Some entries name provenance kinds
# the generator never emits (e.g. "guide"); they simply never match.
INTENT_SOURCE_TYPES: Mapping[QueryIntent, frozenset[str]] = MappingProxyType(
    {
        QueryIntent.EXPLANATION: frozenset({"academic", "expert", "whitepaper"}),
        QueryIntent.TUTORIAL: frozenset({"educational", "guide", "documentation"}),
        QueryIntent.COMPARISON: frozenset({"industry", "expert", "case_study"}),
        QueryIntent.STATISTICAL: frozenset({"statistical", "government", "academic"}),
    }
)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class RankingConfig:
    """
    Weights and switches for relevance scoring.

    Presets:
    - standard(): single-pass search, no freshness bonus
    - deep_research(): freshness bonus on, capped at 50 results
    """

    # Raw query words (len > 2) found in title / snippet / domain
    title_word_weight: int = 25
    snippet_word_weight: int = 10
    domain_word_weight: int = 10

    # Analysis terms found in title / snippet
    keyword_title_weight: int = 15
    keyword_snippet_weight: int = 5
    synonym_title_weight: int = 20
    synonym_snippet_weight: int = 10
    related_title_weight: int = 15
    related_snippet_weight: int = 8

    # Flat bonuses
    authority_bonus: int = 20
    category_bonus: int = 15
    source_type_bonus: int = 10

    # Freshness
    include_freshness: bool = False
    fresh_days: int = 30
    fresh_bonus: int = 10
    recent_days: int = 90
    recent_bonus: int = 5

    # Output bounds
    min_score: int = 15
    max_score: int = 100
    max_results: int | None = None

    authority_domains: tuple[str, ...] = AUTHORITY_DOMAINS

    @classmethod
    def standard(cls, max_results: int | None = None) -> RankingConfig:
        """Configuration for the single-pass web search."""
        return cls(max_results=max_results)

    @classmethod
    def deep_research(cls, max_results: int = 50) -> RankingConfig:
        """Configuration for deep research: freshness counts, 50 results max."""
        return cls(include_freshness=True, max_results=max_results)


@dataclass
class DeduplicationStats:
    """Statistics from the deduplication pass."""

    total_input: int = 0
    unique_results: int = 0
    duplicates_removed: int = 0
    dedup_by_url: int = 0
    dedup_by_title: int = 0
    by_category: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "total_input": self.total_input,
            "unique_results": self.unique_results,
            "duplicates_removed": self.duplicates_removed,
            "dedup_by_url": self.dedup_by_url,
            "dedup_by_title": self.dedup_by_title,
            "by_category": self.by_category,
        }


class ResultAggregator:
    """
    Deduplicates and ranks SearchResult candidates.

    Usage:
        aggregator = ResultAggregator()

        unique, stats = aggregator.aggregate([general, academic, news])
        ranked = aggregator.rank(unique, query, analysis, RankingConfig.deep_research())
    """

    def __init__(
        self,
        config: RankingConfig | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize ResultAggregator.

        Args:
            config: Default ranking configuration (can be overridden per call)
            now: Clock used for the freshness bonus
        """
        self._config = config or RankingConfig.standard()
        self._now = now or (lambda: datetime.now(UTC))

    # =========================================================================
    # Deduplication
    # =========================================================================

    def aggregate(
        self,
        result_lists: Sequence[Sequence[SearchResult]],
    ) -> tuple[list[SearchResult], DeduplicationStats]:
        """
        Flatten candidate lists in order and drop duplicates.

        Returns:
            Tuple of (unique results in first-seen order, statistics)
        """
        flat = [result for results in result_lists for result in results]
        return self.deduplicate(flat)

    def deduplicate(self, results: Sequence[SearchResult]) -> tuple[list[SearchResult], DeduplicationStats]:
        """A candidate is dropped if its URL *or* normalized title was already seen."""
        stats = DeduplicationStats(total_input=len(results))
        seen_urls: set[str] = set()
        seen_titles: set[str] = set()
        unique: list[SearchResult] = []

        for result in results:
            title_key = self._normalize_title(result.title)
            if result.url in seen_urls:
                stats.dedup_by_url += 1
                continue
            if title_key in seen_titles:
                stats.dedup_by_title += 1
                continue
            seen_urls.add(result.url)
            seen_titles.add(title_key)
            unique.append(result)
            if result.category:
                stats.by_category[result.category] = stats.by_category.get(result.category, 0) + 1

        stats.unique_results = len(unique)
        stats.duplicates_removed = stats.total_input - stats.unique_results
        logger.debug(
            f"Deduplicated {stats.total_input} candidates → {stats.unique_results} "
            f"(url={stats.dedup_by_url}, title={stats.dedup_by_title})"
        )
        return unique, stats

    # =========================================================================
    # Ranking
    # =========================================================================

    def score(
        self,
        result: SearchResult,
        query: str,
        analysis: QueryAnalysis,
        config: RankingConfig | None = None,
    ) -> int:
        """Relevance of one result, clamped to [min_score, max_score]."""
        config = config or self._config
        title = result.title.lower()
        snippet = result.snippet.lower()
        domain = result.domain.lower()
        raw = 0

        for word in self._query_words(query):
            if word in title:
                raw += config.title_word_weight
            if word in snippet:
                raw += config.snippet_word_weight
            if word in domain:
                raw += config.domain_word_weight

        raw += self._term_score(analysis.keywords, title, snippet, config.keyword_title_weight, config.keyword_snippet_weight)
        raw += self._term_score(analysis.synonyms, title, snippet, config.synonym_title_weight, config.synonym_snippet_weight)
        raw += self._term_score(
            analysis.related_terms, title, snippet, config.related_title_weight, config.related_snippet_weight
        )

        if any(authority in domain for authority in config.authority_domains):
            raw += config.authority_bonus

        if any(canonical in domain for canonical in CATEGORY_DOMAINS.get(analysis.category, ())):
            raw += config.category_bonus

        preferred = INTENT_SOURCE_TYPES.get(analysis.intent)
        if preferred and result.source_type is not None and result.source_type.value in preferred:
            raw += config.source_type_bonus

        if config.include_freshness:
            raw += self._freshness_bonus(result, config)

        return max(config.min_score, min(round(raw), config.max_score))

    def rank(
        self,
        results: Sequence[SearchResult],
        query: str,
        analysis: QueryAnalysis,
        config: RankingConfig | None = None,
    ) -> list[SearchResult]:
        """
        Assign ``relevance_score`` and sort descending.

        The sort is stable, so ties keep their input (category) order.
        """
        config = config or self._config
        for result in results:
            result.relevance_score = self.score(result, query, analysis, config)

        ranked = sorted(results, key=lambda r: r.relevance_score or 0, reverse=True)
        if config.max_results is not None:
            ranked = ranked[: config.max_results]
        return ranked

    def aggregate_and_rank(
        self,
        result_lists: Sequence[Sequence[SearchResult]],
        query: str,
        analysis: QueryAnalysis,
        config: RankingConfig | None = None,
    ) -> tuple[list[SearchResult], DeduplicationStats]:
        """
        Convenience method: aggregate and rank in one call.

        Returns:
            Tuple of (ranked results, deduplication statistics)
        """
        unique, stats = self.aggregate(result_lists)
        return self.rank(unique, query, analysis, config), stats

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _query_words(query: str) -> list[str]:
        return [word for word in query.lower().split() if len(word) > 2]

    @staticmethod
    def _term_score(terms: Sequence[str], title: str, snippet: str, title_weight: int, snippet_weight: int) -> int:
        total = 0
        for term in terms:
            needle = term.lower()
            if needle in title:
                total += title_weight
            if needle in snippet:
                total += snippet_weight
        return total

    def _freshness_bonus(self, result: SearchResult, config: RankingConfig) -> int:
        if not result.publish_date:
            return 0
        try:
            published = datetime.fromisoformat(result.publish_date)
        except ValueError:
            logger.debug(f"Unparseable publish date on {result.id}: {result.publish_date!r}")
            return 0
        if published.tzinfo is None:
            published = published.replace(tzinfo=UTC)

        age_days = (self._now() - published).total_seconds() / 86400
        if age_days < config.fresh_days:
            return config.fresh_bonus
        if age_days < config.recent_days:
            return config.recent_bonus
        return 0

    @staticmethod
    def _normalize_title(title: str) -> str:
        """Normalize title for comparison."""
        if not title:
            return ""

        title = title.lower()

        # Remove punctuation
        title = re.sub(r"[^\w\s]", "", title)

        # Remove extra whitespace
        return re.sub(r"\s+", " ", title).strip()


# =============================================================================
# Convenience Functions
# =============================================================================


def aggregate_results(
    result_lists: Sequence[Sequence[SearchResult]],
) -> tuple[list[SearchResult], DeduplicationStats]:
    """
    Deduplicate results from several categories.

    Args:
        result_lists: Candidate lists in generation order

    Returns:
        Tuple of (deduplicated results, statistics)
    """
    return ResultAggregator().aggregate(result_lists)


def rank_results(
    results: Sequence[SearchResult],
    query: str,
    analysis: QueryAnalysis,
    config: RankingConfig | None = None,
) -> list[SearchResult]:
    """
    Score and sort results.

    Args:
        results: Results to rank
        query: Original query
        analysis: Analysis of the query
        config: Ranking configuration

    Returns:
        Sorted list of results
    """
    return ResultAggregator(config).rank(results, query, analysis, config)
