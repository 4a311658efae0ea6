"""
Tests for QueryAnalyzer - language, intent, category and complexity detection.
"""

import pytest

from research_search.application.search.query_analyzer import (
    QueryAnalyzer,
    analyze_query,
    detect_language,
)
from research_search.domain.entities.query import (
    Language,
    QueryCategory,
    QueryComplexity,
    QueryIntent,
)


class TestDetectLanguage:
    """Arabic block detection."""

    def test_english(self):
        assert detect_language("machine learning") is Language.ENGLISH

    def test_arabic(self):
        assert detect_language("الذكاء الاصطناعي") is Language.ARABIC

    def test_mixed_script_is_arabic(self):
        assert detect_language("python برمجة") is Language.ARABIC

    def test_empty(self):
        assert detect_language("") is Language.ENGLISH


class TestAnalyzeEnglish:
    """English queries."""

    def test_explanation_query(self, analyzer):
        result = analyzer.analyze("what is photosynthesis")

        assert result.language is Language.ENGLISH
        assert result.intent is QueryIntent.EXPLANATION
        assert result.category is QueryCategory.GENERAL
        # 22 characters, no boolean operators
        assert result.complexity is QueryComplexity.MEDIUM
        assert result.keywords == ["photosynthesis"]
        assert result.synonyms == []
        assert result.related_terms == []
        assert result.search_terms == ["photosynthesis", "explanation", "meaning", "definition", "concept"]

    def test_tutorial_query(self, analyzer):
        result = analyzer.analyze("how to learn python")

        assert result.intent is QueryIntent.TUTORIAL
        assert result.category is QueryCategory.TECH
        assert result.complexity is QueryComplexity.SIMPLE
        assert result.keywords == ["learn", "python"]

    def test_comparison_query(self, analyzer):
        result = analyzer.analyze("best python vs javascript")
        assert result.intent is QueryIntent.COMPARISON

    def test_news_query(self, analyzer):
        result = analyzer.analyze("latest news on elections")
        assert result.intent is QueryIntent.NEWS
        assert result.category is QueryCategory.NEWS

    def test_learning_claims_study_before_statistical(self, analyzer):
        """'study' is matched by LEARNING first; STATISTICAL never sees it."""
        result = analyzer.analyze("study statistics")
        assert result.intent is QueryIntent.LEARNING
        assert result.category is QueryCategory.EDUCATION

    def test_statistical_query(self, analyzer):
        result = analyzer.analyze("unemployment numbers 2024")
        assert result.intent is QueryIntent.STATISTICAL

    def test_general_fallback(self, analyzer):
        result = analyzer.analyze("sunflowers")
        assert result.intent is QueryIntent.GENERAL
        assert result.category is QueryCategory.GENERAL

    def test_punctuation_stripped_from_keywords(self, analyzer):
        result = analyzer.analyze("photosynthesis, chlorophyll!")
        assert result.keywords == ["photosynthesis", "chlorophyll"]

    def test_short_tokens_and_stop_words_dropped(self, analyzer):
        result = analyzer.analyze("what is the AI of go")
        assert result.keywords == []

    def test_synonyms_and_related_terms(self, analyzer):
        result = analyzer.analyze("coding web apps")

        assert "development" in result.synonyms
        assert "coding" not in result.synonyms
        assert "website" in result.related_terms

    def test_search_terms_capped(self, analyzer):
        query = "coding database webhooks training economy medicine quantum physics rockets lasers"
        result = analyzer.analyze(query)
        assert len(result.search_terms) <= 12
        assert len(result.search_terms) == len(set(result.search_terms))


class TestAnalyzeArabic:
    """Arabic queries use the Arabic tables."""

    def test_arabic_explanation(self, analyzer):
        result = analyzer.analyze("اشرح الذكاء الاصطناعي")

        assert result.language is Language.ARABIC
        assert result.intent is QueryIntent.EXPLANATION
        assert result.is_arabic
        assert "الذكاء" in result.keywords
        assert "شرح" in result.search_terms

    def test_arabic_stop_words_removed(self, analyzer):
        result = analyzer.analyze("كيف تعمل الخلايا")
        assert "كيف" not in result.keywords
        assert result.intent is QueryIntent.TUTORIAL

    def test_arabic_health_category(self, analyzer):
        result = analyzer.analyze("علاج مرض السكري")
        assert result.category is QueryCategory.HEALTH


class TestStructure:
    """Phrases, boolean operators and complexity."""

    def test_quoted_phrases(self, analyzer):
        result = analyzer.analyze('learn "machine learning" fast')
        assert result.phrases == ["machine learning"]

    def test_boolean_operators_force_complex(self, analyzer):
        result = analyzer.analyze("python AND java OR rust")
        assert result.boolean_operators == ["AND", "OR"]
        assert result.complexity is QueryComplexity.COMPLEX

    def test_lowercase_boolean_operators_detected(self, analyzer):
        result = analyzer.analyze("cats or dogs")
        assert result.boolean_operators == ["or"]

    @pytest.mark.parametrize(
        ("query", "expected"),
        [
            ("short", QueryComplexity.SIMPLE),
            ("x" * 19, QueryComplexity.SIMPLE),
            ("x" * 20, QueryComplexity.MEDIUM),
            ("x" * 49, QueryComplexity.MEDIUM),
            ("x" * 50, QueryComplexity.COMPLEX),
        ],
    )
    def test_complexity_thresholds(self, analyzer, query, expected):
        assert analyzer.analyze(query).complexity is expected


class TestTotality:
    """The analyzer never raises."""

    @pytest.mark.parametrize("query", ["", "   ", "!!!???", "\n\t", "١٢٣", "🙂🙂🙂"])
    def test_degenerate_queries(self, analyzer, query):
        result = analyzer.analyze(query)
        assert result.query == query
        assert isinstance(result.keywords, list)

    def test_empty_query_defaults(self, analyzer):
        result = analyzer.analyze("")

        assert result.language is Language.ENGLISH
        assert result.intent is QueryIntent.GENERAL
        assert result.category is QueryCategory.GENERAL
        assert result.complexity is QueryComplexity.SIMPLE
        assert result.keywords == []
        assert result.search_terms == []
        assert result.main_keyword == "information"

    def test_none_treated_as_empty(self):
        result = QueryAnalyzer().analyze(None)  # type: ignore[arg-type]
        assert result.query == ""

    def test_convenience_function(self):
        result = analyze_query("explain artificial intelligence")
        assert result.intent is QueryIntent.EXPLANATION
        assert result.to_dict()["intent"] == "explanation"
