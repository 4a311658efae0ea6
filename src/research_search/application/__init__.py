"""
Application Layer - Use Cases and Business Logic Orchestration

Contains:
- search: query analysis, candidate generation, ranking, the SearchService facade
- composer: prompt construction and streamed answer generation
"""

from .composer import ComposedResponse, ResponseComposer, TextGenerator
from .search import (
    CandidateGenerator,
    QueryAnalyzer,
    RankingConfig,
    ResultAggregator,
    SearchService,
    TermExpander,
)

__all__ = [
    # Search
    "QueryAnalyzer",
    "TermExpander",
    "CandidateGenerator",
    "ResultAggregator",
    "RankingConfig",
    "SearchService",
    # Composer
    "ResponseComposer",
    "ComposedResponse",
    "TextGenerator",
]
