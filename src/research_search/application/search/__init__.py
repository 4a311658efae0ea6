"""
Search Pipeline

Turns a raw query into a ranked list of source candidates.

Key Components:
- QueryAnalyzer: language, intent, category, complexity, keywords
- TermExpander: synonyms, related terms, variations, suggestions
- CandidateGenerator: per-category source candidates
- ResultAggregator: deduplication and relevance ranking
- SearchService: the public search / deep research / scan facade

Architecture:
    User Query
        │
        ▼
    ┌──────────────────┐
    │  QueryAnalyzer   │  ← Language, intent, category (first match wins)
    └────────┬─────────┘
             │
             ▼
    ┌──────────────────┐
    │   TermExpander   │  ← Synonyms, related terms, query variations
    └────────┬─────────┘
             │
    ┌────────┴─────────┐
    ▼        ▼         ▼
 academic   news  ...  general  ← CandidateGenerator per category
    │        │         │
    └────────┴─────────┘
             │
             ▼
    ┌──────────────────┐
    │ ResultAggregator │  ← Dedup (URL / title) + relevance score
    └────────┬─────────┘
             │
             ▼
    SearchResponse
"""

from __future__ import annotations

from .candidate_generator import (
    CandidateGenerator,
    Site,
    build_search_url,
    calculate_credibility,
)
from .query_analyzer import QueryAnalyzer, analyze_query, detect_language
from .result_aggregator import (
    DeduplicationStats,
    RankingConfig,
    ResultAggregator,
    aggregate_results,
    rank_results,
)
from .service import (
    DEEP_RESEARCH_CATEGORIES,
    STANDARD_CATEGORIES,
    ProgressCallback,
    SearchService,
)
from .term_expander import TermExpander

__all__ = [
    # Analysis
    "QueryAnalyzer",
    "analyze_query",
    "detect_language",
    "TermExpander",
    # Generation
    "CandidateGenerator",
    "Site",
    "build_search_url",
    "calculate_credibility",
    # Ranking
    "ResultAggregator",
    "RankingConfig",
    "DeduplicationStats",
    "aggregate_results",
    "rank_results",
    # Service
    "SearchService",
    "ProgressCallback",
    "STANDARD_CATEGORIES",
    "DEEP_RESEARCH_CATEGORIES",
]
