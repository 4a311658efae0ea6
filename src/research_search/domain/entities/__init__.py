"""
Domain Entities

Core business objects for research search.
"""

from __future__ import annotations

from .query import (
    Language,
    QueryAnalysis,
    QueryCategory,
    QueryComplexity,
    QueryIntent,
)
from .result import (
    ScanOutcome,
    ScanStatus,
    SearchCategory,
    SearchResponse,
    SearchResult,
    SourceType,
)

__all__ = [
    # Result entities
    "SearchResult",
    "SearchResponse",
    "ScanOutcome",
    "ScanStatus",
    "SourceType",
    "SearchCategory",
    # Query analysis
    "QueryAnalysis",
    "Language",
    "QueryIntent",
    "QueryCategory",
    "QueryComplexity",
]
