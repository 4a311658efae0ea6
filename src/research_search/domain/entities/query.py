"""
QueryAnalysis - derived, request-scoped classification of a raw query.

Never persisted. Produced by ``QueryAnalyzer`` and consumed by the term
expander, candidate generator, ranker and prompt builder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Language(Enum):
    """Query language, detected from the Arabic Unicode block."""

    ARABIC = "ar"
    ENGLISH = "en"


class QueryIntent(Enum):
    """What the user wants from the answer. First matching pattern wins."""

    EXPLANATION = "explanation"
    TUTORIAL = "tutorial"
    COMPARISON = "comparison"
    NEWS = "news"
    PROGRAMMING = "programming"
    LEARNING = "learning"
    STATISTICAL = "statistical"
    GENERAL = "general"


class QueryCategory(Enum):
    """Topical domain of the query. First matching pattern wins."""

    TECH = "tech"
    EDUCATION = "education"
    NEWS = "news"
    HEALTH = "health"
    COOKING = "cooking"
    GOVERNMENT = "government"
    INDUSTRY = "industry"
    GENERAL = "general"


class QueryComplexity(Enum):
    """
    Length-based complexity.

    SIMPLE: fewer than 20 characters
    MEDIUM: fewer than 50 characters and no boolean operators
    COMPLEX: everything else
    """

    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


@dataclass
class QueryAnalysis:
    """Result of analyzing one raw query."""

    query: str
    language: Language = Language.ENGLISH
    intent: QueryIntent = QueryIntent.GENERAL
    category: QueryCategory = QueryCategory.GENERAL
    complexity: QueryComplexity = QueryComplexity.SIMPLE

    keywords: list[str] = field(default_factory=list)
    synonyms: list[str] = field(default_factory=list)
    related_terms: list[str] = field(default_factory=list)
    phrases: list[str] = field(default_factory=list)
    boolean_operators: list[str] = field(default_factory=list)

    # Final deduplicated, capped list that drives candidate generation
    search_terms: list[str] = field(default_factory=list)

    @property
    def is_arabic(self) -> bool:
        return self.language is Language.ARABIC

    @property
    def main_keyword(self) -> str:
        return self.keywords[0] if self.keywords else "information"

    @property
    def expansion_terms(self) -> list[str]:
        """Synonyms followed by related terms, as reported in responses."""
        return [*self.synonyms, *self.related_terms]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "query": self.query,
            "language": self.language.value,
            "intent": self.intent.value,
            "category": self.category.value,
            "complexity": self.complexity.value,
            "keywords": self.keywords,
            "synonyms": self.synonyms,
            "related_terms": self.related_terms,
            "phrases": self.phrases,
            "boolean_operators": self.boolean_operators,
            "search_terms": self.search_terms,
        }
