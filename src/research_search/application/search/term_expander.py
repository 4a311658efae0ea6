"""
TermExpander - static synonym / related-term expansion.

All lookups run against module-level read-only tables; unmatched keywords
simply contribute nothing. Nothing here raises.

Table semantics:
    SYNONYM_MAP  - a keyword matches a concept when it equals one entry of
                   that concept's list for the query language; every *other*
                   entry of the list becomes a synonym.
    RELATED_MAP  - a keyword matches when it *contains* the concept key as a
                   substring; the whole list becomes related terms.

Example:
    >>> expander = TermExpander()
    >>> expander.synonyms(["coding"], Language.ENGLISH)
    ['development', 'software', 'computing', 'tech']
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import TYPE_CHECKING

from research_search.domain.entities.query import Language, QueryAnalysis, QueryCategory, QueryIntent

if TYPE_CHECKING:
    from research_search.domain.entities.result import SearchResult


# =============================================================================
# Static tables
# =============================================================================

SYNONYM_MAP: Mapping[str, Mapping[Language, tuple[str, ...]]] = MappingProxyType(
    {
        "programming": {
            Language.ARABIC: ("برمجة", "تطوير", "كود", "تقنية", "حاسوب"),
            Language.ENGLISH: ("coding", "development", "software", "computing", "tech"),
        },
        "learning": {
            Language.ARABIC: ("تعلم", "دراسة", "تعليم", "معرفة", "فهم"),
            Language.ENGLISH: ("education", "study", "knowledge", "understanding", "training"),
        },
        "health": {
            Language.ARABIC: ("صحة", "طب", "علاج", "طبي", "صحي"),
            Language.ENGLISH: ("medical", "healthcare", "wellness", "medicine", "treatment"),
        },
        "business": {
            Language.ARABIC: ("أعمال", "تجارة", "شركة", "اقتصاد", "مال"),
            Language.ENGLISH: ("commerce", "trade", "corporate", "economy", "finance"),
        },
    }
)

RELATED_MAP: Mapping[str, Mapping[Language, tuple[str, ...]]] = MappingProxyType(
    {
        "ai": {
            Language.ARABIC: ("ذكاء اصطناعي", "تعلم آلي", "خوارزميات", "روبوت", "أتمتة"),
            Language.ENGLISH: ("machine learning", "algorithms", "automation", "neural networks", "deep learning"),
        },
        "web": {
            Language.ARABIC: ("موقع", "إنترنت", "متصفح", "صفحة", "رابط"),
            Language.ENGLISH: ("website", "internet", "browser", "page", "link", "online"),
        },
        "data": {
            Language.ARABIC: ("بيانات", "معلومات", "إحصائيات", "تحليل", "قاعدة بيانات"),
            Language.ENGLISH: ("information", "statistics", "analysis", "database", "metrics"),
        },
    }
)

# Boilerplate appended to search terms for intents that benefit from it
INTENT_TERMS: Mapping[QueryIntent, Mapping[Language, tuple[str, ...]]] = MappingProxyType(
    {
        QueryIntent.EXPLANATION: {
            Language.ARABIC: ("شرح", "تفسير", "معنى", "مفهوم"),
            Language.ENGLISH: ("explanation", "meaning", "definition", "concept"),
        },
        QueryIntent.TUTORIAL: {
            Language.ARABIC: ("طريقة", "خطوات", "كيفية", "دليل"),
            Language.ENGLISH: ("tutorial", "guide", "how-to", "steps"),
        },
        QueryIntent.COMPARISON: {
            Language.ARABIC: ("مقارنة", "الفرق", "أفضل", "مقابل"),
            Language.ENGLISH: ("comparison", "difference", "vs", "versus"),
        },
        QueryIntent.STATISTICAL: {
            Language.ARABIC: ("إحصائيات", "أرقام", "بيانات", "تحليل"),
            Language.ENGLISH: ("statistics", "data", "numbers", "analysis"),
        },
    }
)

# Category vocabulary used to widen deep-research keyword sets
CATEGORY_TERMS: Mapping[QueryCategory, Mapping[Language, tuple[str, ...]]] = MappingProxyType(
    {
        QueryCategory.TECH: {
            Language.ARABIC: ("تقنية", "برمجة", "تطوير", "كود", "تكنولوجيا", "حاسوب", "ذكي", "رقمي", "إنترنت"),
            Language.ENGLISH: (
                "technology",
                "programming",
                "development",
                "software",
                "computer",
                "digital",
                "tech",
                "innovation",
                "coding",
            ),
        },
        QueryCategory.EDUCATION: {
            Language.ARABIC: ("تعليم", "دراسة", "تعلم", "معرفة", "علم", "أكاديمي", "جامعة", "بحث", "تدريب"),
            Language.ENGLISH: (
                "education",
                "learning",
                "study",
                "knowledge",
                "academic",
                "university",
                "research",
                "training",
                "course",
            ),
        },
        QueryCategory.NEWS: {
            Language.ARABIC: ("أخبار", "جديد", "حديث", "آخر", "تطورات", "أحداث", "معلومات", "تقرير", "إعلام"),
            Language.ENGLISH: (
                "news",
                "latest",
                "recent",
                "current",
                "updates",
                "breaking",
                "information",
                "report",
                "media",
            ),
        },
        QueryCategory.HEALTH: {
            Language.ARABIC: ("صحة", "طب", "علاج", "مرض", "طبي", "صحي", "دواء", "مستشفى", "طبيب"),
            Language.ENGLISH: (
                "health",
                "medical",
                "medicine",
                "treatment",
                "healthcare",
                "wellness",
                "disease",
                "hospital",
                "doctor",
            ),
        },
        QueryCategory.GOVERNMENT: {
            Language.ARABIC: ("حكومة", "رسمي", "قانون", "سياسة", "دولة", "وزارة", "مؤسسة", "عام"),
            Language.ENGLISH: ("government", "official", "policy", "public", "federal", "state", "ministry", "department"),
        },
        QueryCategory.INDUSTRY: {
            Language.ARABIC: ("صناعة", "تقرير", "شركة", "أعمال", "اقتصاد", "سوق", "تجارة", "مؤسسة"),
            Language.ENGLISH: ("industry", "business", "corporate", "market", "economy", "commercial", "enterprise", "sector"),
        },
    }
)

# Caps
MAX_SEARCH_TERMS = 12
MAX_EXPANDED_KEYWORDS = 20
MAX_SEARCH_VARIATIONS = 15
MAX_SUGGESTIONS = 5


def _dedupe(items: Iterable[str]) -> list[str]:
    """Order-preserving de-duplication."""
    return list(dict.fromkeys(items))


class TermExpander:
    """
    Derives synonyms, related terms and search-term sets from keywords.

    Stateless; safe to share across concurrent requests.
    """

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def synonyms(self, keywords: Sequence[str], language: Language) -> list[str]:
        found: list[str] = []
        for keyword in keywords:
            kw = keyword.lower()
            for terms_by_language in SYNONYM_MAP.values():
                terms = terms_by_language[language]
                if kw in terms:
                    found.extend(term for term in terms if term != kw)
        return _dedupe(found)

    def related_terms(self, keywords: Sequence[str], language: Language) -> list[str]:
        found: list[str] = []
        for keyword in keywords:
            kw = keyword.lower()
            for key, terms_by_language in RELATED_MAP.items():
                if key in kw:
                    found.extend(terms_by_language[language])
        return _dedupe(found)

    # ------------------------------------------------------------------
    # Term set assembly
    # ------------------------------------------------------------------

    def search_terms(
        self,
        keywords: Sequence[str],
        intent: QueryIntent,
        language: Language,
        synonyms: Sequence[str],
        related_terms: Sequence[str],
    ) -> list[str]:
        """keywords + top-3 synonyms + top-2 related + intent boilerplate, capped at 12."""
        terms = [*keywords, *synonyms[:3], *related_terms[:2]]
        intent_terms = INTENT_TERMS.get(intent)
        if intent_terms:
            terms.extend(intent_terms[language])
        return _dedupe(terms)[:MAX_SEARCH_TERMS]

    def expanded_keywords(self, analysis: QueryAnalysis) -> list[str]:
        """Wider keyword set for deep research, capped at 20."""
        expanded = [*analysis.keywords, *analysis.synonyms, *analysis.related_terms]
        category_terms = CATEGORY_TERMS.get(analysis.category)
        if category_terms:
            expanded.extend(category_terms[analysis.language][:5])
        return _dedupe(expanded)[:MAX_EXPANDED_KEYWORDS]

    def search_variations(self, query: str, expanded: Sequence[str], analysis: QueryAnalysis) -> list[str]:
        """
        Query rewrites fanned out by deep research, capped at 15.

        Order: the query itself, keyword pairs (with triples among the top
        keywords), quoted-phrase variants, then AND / OR combinations.
        """
        variations = [query]
        main = list(expanded[:8])

        for i in range(len(main)):
            for j in range(i + 1, len(main)):
                variations.append(f"{main[i]} {main[j]}")
                if i < 3 and j < 4:
                    for k in range(j + 1, min(len(main), 5)):
                        variations.append(f"{main[i]} {main[j]} {main[k]}")

        for phrase in analysis.phrases:
            variations.append(phrase)
            variations.extend(f'"{phrase}" {keyword}' for keyword in main[:3])

        if len(main) >= 2:
            variations.append(f"{main[0]} AND {main[1]}")
            variations.append(f"{main[0]} OR {main[1]}")

        return _dedupe(variations)[:MAX_SEARCH_VARIATIONS]

    # ------------------------------------------------------------------
    # Suggestions
    # ------------------------------------------------------------------

    def search_suggestions(self, analysis: QueryAnalysis) -> list[str]:
        """'keyword and synonym' pairs, then 'first-keyword related-term'."""
        joiner = " و " if analysis.is_arabic else " and "
        suggestions = [
            f"{keyword}{joiner}{synonym}" for keyword in analysis.keywords for synonym in analysis.synonyms
        ]
        if analysis.keywords:
            first = analysis.keywords[0]
            suggestions.extend(f"{first} {term}" for term in analysis.related_terms)
        return suggestions[:MAX_SUGGESTIONS]

    def refinement_suggestions(
        self,
        query: str,
        analysis: QueryAnalysis,
        results: Sequence[SearchResult],
    ) -> list[str]:
        """Narrowing suggestions driven by the dominant categories of shown results."""
        counts = Counter(r.category for r in results if r.category)
        common = [category for category, _ in counts.most_common(3)]

        suggestions: list[str] = []
        if "academic" in common:
            suggestions.extend([f"{query} research papers", f"{query} academic study"])
        if "news" in common:
            suggestions.extend([f"{query} latest news", f"{query} recent developments"])
        suggestions.extend(f"{query} {synonym}" for synonym in analysis.synonyms)
        return suggestions[:MAX_SUGGESTIONS]
