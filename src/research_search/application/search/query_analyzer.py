"""
QueryAnalyzer - Language, intent and category classification of raw queries.

This module analyzes user queries to determine:
1. Language (Arabic vs English, from the Arabic Unicode block)
2. Keywords, quoted phrases and boolean operators
3. Intent and category (ordered regex lists, first match wins)
4. Complexity (character length + boolean operators)
5. Expanded terms (delegated to TermExpander)

Architecture Decision:
    QueryAnalyzer is stateless, pure and total. It never calls external
    services and never raises, whatever string it is given. An empty or
    whitespace-only query degrades to English / general / general / simple
    with empty keyword sets.

    The intent and category lists are evaluated in a fixed priority order.
    Some later patterns can never fire once an earlier, broader one has
    matched (e.g. "study" is claimed by LEARNING before STATISTICAL); that
    order is part of the observable behavior and is kept as is.

Example:
    >>> analyzer = QueryAnalyzer()
    >>> result = analyzer.analyze("explain artificial intelligence")
    >>> result.language, result.intent
    (<Language.ENGLISH: 'en'>, <QueryIntent.EXPLANATION: 'explanation'>)
"""

from __future__ import annotations

import re

from research_search.domain.entities.query import (
    Language,
    QueryAnalysis,
    QueryCategory,
    QueryComplexity,
    QueryIntent,
)

from .term_expander import TermExpander

ARABIC_PATTERN = re.compile(r"[\u0600-\u06FF]")


def detect_language(text: str) -> Language:
    """Any codepoint in the Arabic block makes the text Arabic."""
    return Language.ARABIC if ARABIC_PATTERN.search(text) else Language.ENGLISH


class QueryAnalyzer:
    """
    Rule-based query analyzer.

    Usage:
        analyzer = QueryAnalyzer()
        analysis = analyzer.analyze("how to learn python")

        print(analysis.intent)      # QueryIntent.TUTORIAL
        print(analysis.category)    # QueryCategory.TECH
        print(analysis.keywords)    # ['learn', 'python']
    """

    STOP_WORDS: dict[Language, frozenset[str]] = {
        Language.ARABIC: frozenset(
            {
                "ما",
                "هو",
                "هي",
                "كيف",
                "لماذا",
                "متى",
                "أين",
                "من",
                "في",
                "على",
                "إلى",
                "عن",
                "مع",
                "بين",
                "تحت",
                "فوق",
                "أم",
                "أو",
                "لكن",
                "إذا",
                "عندما",
                "حيث",
                "التي",
                "الذي",
                "اللذان",
                "اللتان",
                "الذين",
                "اللواتي",
                "هذا",
                "هذه",
                "ذلك",
                "تلك",
            }
        ),
        Language.ENGLISH: frozenset(
            {
                "what",
                "how",
                "why",
                "when",
                "where",
                "who",
                "is",
                "are",
                "the",
                "a",
                "an",
                "and",
                "or",
                "but",
                "in",
                "on",
                "at",
                "to",
                "for",
                "of",
                "with",
                "by",
                "from",
                "about",
                "into",
                "through",
                "during",
                "before",
                "after",
                "above",
                "below",
                "up",
                "down",
                "out",
                "off",
                "over",
                "under",
                "again",
                "further",
                "then",
                "once",
                "this",
                "that",
                "these",
                "those",
            }
        ),
    }

    # Punctuation → space; letters, digits and the Arabic block are kept
    NON_WORD_PATTERN = re.compile(r"[^\w\s\u0600-\u06FF]")
    PHRASE_PATTERN = re.compile(r'"([^"]+)"')
    BOOLEAN_PATTERN = re.compile(r"\b(AND|OR|NOT)\b", re.IGNORECASE | re.ASCII)

    # Ordered: first match wins
    INTENT_PATTERNS: dict[Language, tuple[tuple[re.Pattern[str], QueryIntent], ...]] = {
        Language.ARABIC: (
            (re.compile(r"شرح|اشرح|وضح|فسر|اعرف|تعريف"), QueryIntent.EXPLANATION),
            (re.compile(r"كيف|طريقة|خطوات|دليل"), QueryIntent.TUTORIAL),
            (re.compile(r"أفضل|احسن|مقارنة|الفرق|مقابل"), QueryIntent.COMPARISON),
            (re.compile(r"أخبار|جديد|حديث|آخر|تطورات"), QueryIntent.NEWS),
            (re.compile(r"برمجة|كود|تطوير|موقع|تطبيق"), QueryIntent.PROGRAMMING),
            (re.compile(r"تعلم|دراسة|تعليم|دورة|بحث"), QueryIntent.LEARNING),
            (re.compile(r"إحصائيات|أرقام|بيانات|دراسة"), QueryIntent.STATISTICAL),
        ),
        Language.ENGLISH: (
            (re.compile(r"explain|what is|define|meaning|definition"), QueryIntent.EXPLANATION),
            (re.compile(r"how to|tutorial|guide|steps|instructions"), QueryIntent.TUTORIAL),
            (re.compile(r"best|compare|vs|difference|versus"), QueryIntent.COMPARISON),
            (re.compile(r"news|latest|recent|breaking|current"), QueryIntent.NEWS),
            (re.compile(r"code|programming|development|website|app"), QueryIntent.PROGRAMMING),
            (re.compile(r"learn|study|course|education|research"), QueryIntent.LEARNING),
            (re.compile(r"statistics|data|numbers|study|analysis"), QueryIntent.STATISTICAL),
        ),
    }

    CATEGORY_PATTERNS: dict[Language, tuple[tuple[re.Pattern[str], QueryCategory], ...]] = {
        Language.ARABIC: (
            (re.compile(r"برمجة|كود|تطوير|javascript|python|react|html|css|تقنية"), QueryCategory.TECH),
            (re.compile(r"تعلم|دراسة|تعليم|جامعة|مدرسة|أكاديمي"), QueryCategory.EDUCATION),
            (re.compile(r"أخبار|سياسة|اقتصاد|رياضة|إعلام"), QueryCategory.NEWS),
            (re.compile(r"صحة|طب|علاج|مرض|طبي"), QueryCategory.HEALTH),
            (re.compile(r"طبخ|وصفة|أكل|طعام"), QueryCategory.COOKING),
            (re.compile(r"حكومة|رسمي|قانون|سياسة"), QueryCategory.GOVERNMENT),
            (re.compile(r"صناعة|تقرير|شركة|أعمال"), QueryCategory.INDUSTRY),
        ),
        Language.ENGLISH: (
            (
                re.compile(r"code|programming|javascript|python|react|html|css|development|tech"),
                QueryCategory.TECH,
            ),
            (re.compile(r"learn|study|education|university|school|academic"), QueryCategory.EDUCATION),
            (re.compile(r"news|politics|economy|sports|media"), QueryCategory.NEWS),
            (re.compile(r"health|medical|treatment|disease|healthcare"), QueryCategory.HEALTH),
            (re.compile(r"cooking|recipe|food|cuisine"), QueryCategory.COOKING),
            (re.compile(r"government|official|law|policy|public"), QueryCategory.GOVERNMENT),
            (re.compile(r"industry|report|business|corporate"), QueryCategory.INDUSTRY),
        ),
    }

    SIMPLE_MAX_LENGTH = 20
    MEDIUM_MAX_LENGTH = 50

    def __init__(self, expander: TermExpander | None = None) -> None:
        self._expander = expander or TermExpander()

    def analyze(self, query: str) -> QueryAnalysis:
        """
        Analyze a raw query.

        Args:
            query: User's query, any string (empty and mixed-script included)

        Returns:
            Fully populated QueryAnalysis
        """
        query = query or ""
        language = detect_language(query)
        lowered = query.lower()

        keywords = self._extract_keywords(lowered, language)
        phrases = self.PHRASE_PATTERN.findall(query)
        boolean_operators = self.BOOLEAN_PATTERN.findall(query)

        intent = self._first_match(self.INTENT_PATTERNS[language], lowered, QueryIntent.GENERAL)
        category = self._first_match(self.CATEGORY_PATTERNS[language], lowered, QueryCategory.GENERAL)
        complexity = self._determine_complexity(query, boolean_operators)

        synonyms = self._expander.synonyms(keywords, language)
        related_terms = self._expander.related_terms(keywords, language)
        search_terms = self._expander.search_terms(keywords, intent, language, synonyms, related_terms)

        return QueryAnalysis(
            query=query,
            language=language,
            intent=intent,
            category=category,
            complexity=complexity,
            keywords=keywords,
            synonyms=synonyms,
            related_terms=related_terms,
            phrases=phrases,
            boolean_operators=boolean_operators,
            search_terms=search_terms,
        )

    def _extract_keywords(self, lowered: str, language: Language) -> list[str]:
        """Strip punctuation, split on whitespace, drop short tokens and stop words."""
        stop_words = self.STOP_WORDS[language]
        words = self.NON_WORD_PATTERN.sub(" ", lowered).split()
        return [word for word in words if len(word) > 2 and word not in stop_words]

    @staticmethod
    def _first_match[E](patterns: tuple[tuple[re.Pattern[str], E], ...], text: str, default: E) -> E:
        for pattern, value in patterns:
            if pattern.search(text):
                return value
        return default

    def _determine_complexity(self, query: str, boolean_operators: list[str]) -> QueryComplexity:
        length = len(query)
        if length < self.SIMPLE_MAX_LENGTH:
            return QueryComplexity.SIMPLE
        if length < self.MEDIUM_MAX_LENGTH and not boolean_operators:
            return QueryComplexity.MEDIUM
        return QueryComplexity.COMPLEX


# Convenience function
def analyze_query(query: str) -> QueryAnalysis:
    """
    Analyze a query (convenience function).

    Args:
        query: User's query

    Returns:
        QueryAnalysis with analysis results
    """
    return QueryAnalyzer().analyze(query)
