"""
Tests for TermExpander - synonyms, related terms, variations and suggestions.
"""

from research_search.application.search.term_expander import (
    MAX_SEARCH_VARIATIONS,
    TermExpander,
)
from research_search.domain.entities.query import Language, QueryAnalysis, QueryCategory, QueryIntent


class TestLookups:
    def test_synonyms_exclude_the_matched_word(self, expander):
        assert expander.synonyms(["coding"], Language.ENGLISH) == [
            "development",
            "software",
            "computing",
            "tech",
        ]

    def test_concept_key_itself_is_not_a_match(self, expander):
        # "programming" names the concept but is not one of its English entries
        assert expander.synonyms(["programming"], Language.ENGLISH) == []

    def test_arabic_synonyms(self, expander):
        found = expander.synonyms(["برمجة"], Language.ARABIC)
        assert "تطوير" in found
        assert "برمجة" not in found

    def test_synonyms_deduplicated(self, expander):
        found = expander.synonyms(["coding", "software"], Language.ENGLISH)
        assert len(found) == len(set(found))
        assert "coding" in found  # synonym of "software"

    def test_related_terms_substring_match(self, expander):
        assert expander.related_terms(["webdev"], Language.ENGLISH)[0] == "website"

    def test_related_terms_deduplicated(self, expander):
        found = expander.related_terms(["data", "database"], Language.ENGLISH)
        assert found == ["information", "statistics", "analysis", "database", "metrics"]

    def test_no_matches(self, expander):
        assert expander.synonyms(["zebra"], Language.ENGLISH) == []
        assert expander.related_terms(["zebra"], Language.ENGLISH) == []


class TestSearchTerms:
    def test_order_and_intent_boilerplate(self, expander):
        terms = expander.search_terms(
            ["coding"],
            QueryIntent.TUTORIAL,
            Language.ENGLISH,
            ["development", "software", "computing", "tech"],
            ["website", "internet", "browser"],
        )
        assert terms == [
            "coding",
            "development",
            "software",
            "computing",
            "website",
            "internet",
            "tutorial",
            "guide",
            "how-to",
            "steps",
        ]

    def test_general_intent_adds_nothing(self, expander):
        assert expander.search_terms(["zebra"], QueryIntent.GENERAL, Language.ENGLISH, [], []) == ["zebra"]

    def test_capped_at_twelve(self, expander):
        keywords = [f"kw{i}" for i in range(20)]
        terms = expander.search_terms(keywords, QueryIntent.EXPLANATION, Language.ENGLISH, [], [])
        assert len(terms) == 12


class TestExpandedKeywords:
    def test_category_terms_appended(self, expander):
        analysis = QueryAnalysis(
            query="python tips",
            category=QueryCategory.TECH,
            keywords=["python", "tips"],
        )
        expanded = expander.expanded_keywords(analysis)
        assert expanded[:2] == ["python", "tips"]
        assert "technology" in expanded
        assert len(expanded) <= 20

    def test_general_category_has_no_extra_terms(self, expander):
        analysis = QueryAnalysis(query="zebra", keywords=["zebra"])
        assert expander.expanded_keywords(analysis) == ["zebra"]


class TestSearchVariations:
    def test_query_comes_first(self, expander):
        analysis = QueryAnalysis(query="solar panels")
        variations = expander.search_variations("solar panels", ["solar", "panels"], analysis)
        assert variations == ["solar panels", "solar AND panels", "solar OR panels"]

    def test_pairs_and_triples(self, expander):
        analysis = QueryAnalysis(query="q")
        variations = expander.search_variations("q", ["a", "b", "c"], analysis)
        assert variations[:4] == ["q", "a b", "a b c", "a c"]
        assert "b c" in variations

    def test_phrase_variants(self, expander):
        analysis = QueryAnalysis(query='"solar power" cost', phrases=["solar power"])
        variations = expander.search_variations(analysis.query, ["cost"], analysis)
        assert "solar power" in variations
        assert '"solar power" cost' in variations

    def test_capped(self, expander):
        analysis = QueryAnalysis(query="q")
        expanded = [f"t{i}" for i in range(20)]
        variations = expander.search_variations("q", expanded, analysis)
        assert len(variations) == MAX_SEARCH_VARIATIONS
        assert len(variations) == len(set(variations))

    def test_single_keyword(self, expander):
        analysis = QueryAnalysis(query="zebra")
        assert expander.search_variations("zebra", ["zebra"], analysis) == ["zebra"]


class TestSuggestions:
    def test_search_suggestions_english(self, expander):
        analysis = QueryAnalysis(
            query="coding",
            keywords=["coding"],
            synonyms=["development", "software"],
            related_terms=["website"],
        )
        assert expander.search_suggestions(analysis) == [
            "coding and development",
            "coding and software",
            "coding website",
        ]

    def test_search_suggestions_arabic_joiner(self, expander):
        analysis = QueryAnalysis(
            query="برمجة",
            language=Language.ARABIC,
            keywords=["برمجة"],
            synonyms=["تطوير"],
        )
        assert expander.search_suggestions(analysis) == ["برمجة و تطوير"]

    def test_search_suggestions_capped(self, expander):
        analysis = QueryAnalysis(query="x", keywords=["a", "b"], synonyms=["c", "d", "e"])
        assert len(expander.search_suggestions(analysis)) == 5

    def test_refinements_from_result_categories(self, expander, sample_results):
        analysis = QueryAnalysis(query="photosynthesis", keywords=["photosynthesis"])
        suggestions = expander.refinement_suggestions("photosynthesis", analysis, sample_results)

        assert suggestions == [
            "photosynthesis research papers",
            "photosynthesis academic study",
            "photosynthesis latest news",
            "photosynthesis recent developments",
        ]

    def test_refinements_without_results(self, expander):
        analysis = QueryAnalysis(query="coding", synonyms=["development"])
        assert expander.refinement_suggestions("coding", analysis, []) == ["coding development"]
