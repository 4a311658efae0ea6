"""
Research Search - search core of a research assistant

Analyzes queries (Arabic and English), expands them, generates candidate
sources per category, deduplicates and ranks them, scans their content and
composes grounded answers.

Usage:
    from research_search import SearchService

    service = SearchService()
    response = await service.search_web("explain artificial intelligence", limit=10)

    for result in response.results:
        print(f"{result.relevance_score:3d} {result.title} ({result.domain})")
"""

from .application.composer import ComposedResponse, ResponseComposer
from .application.search import (
    CandidateGenerator,
    QueryAnalyzer,
    RankingConfig,
    ResultAggregator,
    SearchService,
    TermExpander,
    analyze_query,
)
from .domain.entities import (
    Language,
    QueryAnalysis,
    QueryCategory,
    QueryComplexity,
    QueryIntent,
    ScanOutcome,
    ScanStatus,
    SearchCategory,
    SearchResponse,
    SearchResult,
    SourceType,
)
from .shared.exceptions import GenerationError, ResearchSearchError

__version__ = "0.1.0"

__all__ = [
    # High-level API
    "SearchService",
    "ResponseComposer",
    "ComposedResponse",
    # Pipeline
    "QueryAnalyzer",
    "TermExpander",
    "CandidateGenerator",
    "ResultAggregator",
    "RankingConfig",
    "analyze_query",
    # Entities
    "SearchResult",
    "SearchResponse",
    "ScanOutcome",
    "ScanStatus",
    "SourceType",
    "SearchCategory",
    "QueryAnalysis",
    "Language",
    "QueryIntent",
    "QueryCategory",
    "QueryComplexity",
    # Errors
    "ResearchSearchError",
    "GenerationError",
]
