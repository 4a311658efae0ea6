"""
CandidateGenerator - template-based synthesis of search results.

For one category and one analyzed query this produces one SearchResult per
configured site: a search-engine-style URL on the site's real domain, a
title and snippet from per-language templates, a publish date drawn from a
source-type dependent recency window, and a credibility score.

Architecture Decision:
    This stage is a simulation layer. It performs no network I/O; the URLs
    it builds are plausible query URLs, not fetched documents. A real search
    backend can replace it behind the same ``generate()`` signature.

    Randomness (publish dates) and the clock are injected so that tests and
    reproducible runs can pin them.
"""

from __future__ import annotations

import random
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from types import MappingProxyType
from urllib.parse import quote

from research_search.domain.entities.query import Language, QueryAnalysis
from research_search.domain.entities.result import ScanStatus, SearchCategory, SearchResult, SourceType


@dataclass(frozen=True, slots=True)
class Site:
    """A fixed search target: real domain, display name, kind and provenance."""

    domain: str
    name: str
    type: str
    source_type: SourceType


# =============================================================================
# Site tables
# =============================================================================

_A, _N, _I, _G, _E, _S, _GEN = (
    SourceType.ACADEMIC,
    SourceType.NEWS,
    SourceType.INDUSTRY,
    SourceType.GOVERNMENT,
    SourceType.EXPERT,
    SourceType.STATISTICAL,
    SourceType.GENERAL,
)

SITES: Mapping[SearchCategory, tuple[Site, ...]] = MappingProxyType(
    {
        SearchCategory.ACADEMIC: (
            Site("arxiv.org", "arXiv", "preprint", _A),
            Site("pubmed.ncbi.nlm.nih.gov", "PubMed", "medical", _A),
            Site("scholar.google.com", "Google Scholar", "academic", _A),
            Site("jstor.org", "JSTOR", "academic", _A),
            Site("ieee.org", "IEEE Xplore", "technical", _A),
            Site("acm.org", "ACM Digital Library", "computing", _A),
            Site("nature.com", "Nature", "science", _A),
            Site("science.org", "Science", "science", _A),
        ),
        SearchCategory.INDUSTRY: (
            Site("mckinsey.com", "McKinsey & Company", "consulting", _I),
            Site("deloitte.com", "Deloitte Insights", "consulting", _I),
            Site("pwc.com", "PwC", "consulting", _I),
            Site("bcg.com", "Boston Consulting Group", "consulting", _I),
            Site("accenture.com", "Accenture", "consulting", _I),
            Site("kpmg.com", "KPMG", "consulting", _I),
            Site("ey.com", "Ernst & Young", "consulting", _I),
            Site("gartner.com", "Gartner", "research", _I),
        ),
        SearchCategory.GOVERNMENT: (
            Site("who.int", "World Health Organization", "health", _G),
            Site("cdc.gov", "CDC", "health", _G),
            Site("nih.gov", "National Institutes of Health", "health", _G),
            Site("gov.uk", "UK Government", "policy", _G),
            Site("europa.eu", "European Union", "policy", _G),
            Site("un.org", "United Nations", "international", _G),
            Site("worldbank.org", "World Bank", "economic", _G),
            Site("imf.org", "International Monetary Fund", "economic", _G),
        ),
        SearchCategory.EXPERT: (
            Site("ted.com", "TED Talks", "expert", _E),
            Site("medium.com", "Medium", "expert", _E),
            Site("linkedin.com", "LinkedIn", "professional", _E),
            Site("quora.com", "Quora", "qa", _E),
            Site("stackoverflow.com", "Stack Overflow", "technical", _E),
            Site("researchgate.net", "ResearchGate", "academic", _E),
        ),
        SearchCategory.STATISTICAL: (
            Site("statista.com", "Statista", "statistics", _S),
            Site("data.gov", "Data.gov", "government", _S),
            Site("census.gov", "US Census Bureau", "demographic", _S),
            Site("oecd.org", "OECD", "economic", _S),
            Site("worldometers.info", "Worldometers", "global", _S),
            Site("kaggle.com", "Kaggle", "datasets", _S),
        ),
        SearchCategory.GENERAL: (
            Site("wikipedia.org", "Wikipedia", "encyclopedia", _GEN),
            Site("reddit.com", "Reddit", "community", _GEN),
            Site("youtube.com", "YouTube", "video", _GEN),
            Site("coursera.org", "Coursera", "education", _GEN),
            Site("edx.org", "edX", "education", _GEN),
        ),
    }
)

# News is the only category with language-specific outlets
NEWS_SITES: Mapping[Language, tuple[Site, ...]] = MappingProxyType(
    {
        Language.ARABIC: (
            Site("aljazeera.net", "الجزيرة", "news", _N),
            Site("alarabiya.net", "العربية", "news", _N),
            Site("bbc.com/arabic", "BBC عربي", "news", _N),
            Site("cnn.com/arabic", "CNN عربي", "news", _N),
            Site("skynewsarabia.com", "سكاي نيوز عربية", "news", _N),
            Site("france24.com/ar", "فرانس 24", "news", _N),
        ),
        Language.ENGLISH: (
            Site("reuters.com", "Reuters", "news", _N),
            Site("apnews.com", "Associated Press", "news", _N),
            Site("bbc.com", "BBC News", "news", _N),
            Site("cnn.com", "CNN", "news", _N),
            Site("theguardian.com", "The Guardian", "news", _N),
            Site("nytimes.com", "New York Times", "news", _N),
            Site("washingtonpost.com", "Washington Post", "news", _N),
            Site("npr.org", "NPR", "news", _N),
        ),
    }
)

# Well-known search endpoints; everything else gets https://{domain}/search?q=
SEARCH_URL_TEMPLATES: Mapping[str, str] = MappingProxyType(
    {
        "arxiv.org": "https://arxiv.org/search/?query={q}",
        "pubmed.ncbi.nlm.nih.gov": "https://pubmed.ncbi.nlm.nih.gov/?term={q}",
        "scholar.google.com": "https://scholar.google.com/scholar?q={q}",
        "stackoverflow.com": "https://stackoverflow.com/search?q={q}",
        "github.com": "https://github.com/search?q={q}",
        "reddit.com": "https://www.reddit.com/search/?q={q}",
        "youtube.com": "https://www.youtube.com/results?search_query={q}",
        "medium.com": "https://medium.com/search?q={q}",
        "wikipedia.org": "https://en.wikipedia.org/wiki/Special:Search?search={q}",
    }
)

FAVICON_TEMPLATE = "https://www.google.com/s2/favicons?domain={domain}&sz=32"

# Publish-date window in days, uniform offset back from "now"
RECENCY_WINDOW_DAYS: Mapping[SourceType, int] = MappingProxyType(
    {
        SourceType.NEWS: 7,
        SourceType.ACADEMIC: 365,
        SourceType.INDUSTRY: 90,
    }
)
DEFAULT_RECENCY_WINDOW_DAYS = 180

CREDIBILITY_SCORES: Mapping[str, int] = MappingProxyType(
    {
        "nature.com": 95,
        "science.org": 95,
        "arxiv.org": 90,
        "ieee.org": 90,
        "who.int": 95,
        "cdc.gov": 95,
        "nih.gov": 95,
        "reuters.com": 90,
        "bbc.com": 88,
        "wikipedia.org": 85,
        "stackoverflow.com": 85,
        "github.com": 80,
        "medium.com": 70,
        "reddit.com": 60,
    }
)
DEFAULT_CREDIBILITY = 70

CREDIBILITY_BONUS: Mapping[SourceType, int] = MappingProxyType(
    {
        SourceType.ACADEMIC: 10,
        SourceType.GOVERNMENT: 15,
        SourceType.NEWS: 5,
        SourceType.EXPERT: 0,
        SourceType.INDUSTRY: 5,
        SourceType.STATISTICAL: 10,
    }
)

# =============================================================================
# Text templates: {k} = primary keyword, {name} = site display name
# =============================================================================

TITLE_TEMPLATES: Mapping[Language, Mapping[SourceType | None, str]] = MappingProxyType(
    {
        Language.ENGLISH: {
            _A: "Academic Research on {k} - {name}",
            _N: "Latest {k} News - {name}",
            _I: "Industry Report: {k} - {name}",
            _G: "Official {k} Information - {name}",
            _E: "Expert Analysis: {k} - {name}",
            _S: "{k} Statistics & Data - {name}",
            None: "Comprehensive {k} Guide - {name}",
        },
        Language.ARABIC: {
            _A: "بحث أكاديمي في {k} - {name}",
            _N: "آخر أخبار {k} - {name}",
            _I: "تقرير صناعي حول {k} - {name}",
            _G: "معلومات رسمية عن {k} - {name}",
            _E: "رأي خبراء في {k} - {name}",
            _S: "إحصائيات {k} - {name}",
            None: "معلومات شاملة عن {k} - {name}",
        },
    }
)

SNIPPET_TEMPLATES: Mapping[Language, Mapping[SourceType | None, str]] = MappingProxyType(
    {
        Language.ENGLISH: {
            _A: (
                "Peer-reviewed academic research on {k} with comprehensive methodology, "
                "data analysis, and scholarly references from {name}."
            ),
            _N: (
                "Breaking news coverage and latest developments in {k} from trusted journalists "
                "and verified sources with real-time updates."
            ),
            _I: (
                "Professional industry analysis of {k} trends, market insights, and strategic "
                "recommendations from leading consulting experts."
            ),
            _G: (
                "Official government data and policy information regarding {k} with verified "
                "statistics and regulatory guidelines."
            ),
            _E: (
                "Expert opinions and professional insights on {k} from industry leaders with "
                "practical experience and proven expertise."
            ),
            _S: (
                "Comprehensive statistical data and quantitative analysis of {k} with charts, "
                "trends, and predictive modeling."
            ),
            None: (
                "Detailed information and comprehensive guide about {k} with practical examples "
                "and actionable insights."
            ),
        },
        Language.ARABIC: {
            _A: "دراسة أكاديمية محكمة حول {k} مع مراجع علمية موثقة ونتائج بحثية متقدمة من {name}.",
            _N: "تغطية إخبارية شاملة ومحدثة لآخر التطورات في {k} من مصادر موثوقة ومراسلين متخصصين.",
            _I: "تقرير صناعي متخصص يحلل اتجاهات السوق والفرص في {k} مع توقعات مستقبلية وتوصيات عملية.",
            _G: "معلومات رسمية وسياسات حكومية متعلقة بـ {k} مع إحصائيات دقيقة وتوجيهات معتمدة.",
            _E: "تحليل خبراء وآراء متخصصين في {k} مع خبرات عملية ونصائح مهنية من قادة الصناعة.",
            _S: "بيانات إحصائية شاملة ومؤشرات دقيقة حول {k} مع تحليلات كمية وتوجهات زمنية.",
            None: "معلومات شاملة ومفصلة حول {k} مع شرح واضح وأمثلة عملية تطبيقية.",
        },
    }
)

# encodeURIComponent leaves these unescaped
_URI_COMPONENT_SAFE = "-_.!~*'()"


def coerce_category(category: SearchCategory | str) -> SearchCategory:
    """Map a category name to the enum. Unknown names fall back to GENERAL."""
    if isinstance(category, SearchCategory):
        return category
    try:
        return SearchCategory(category)
    except ValueError:
        return SearchCategory.GENERAL


def build_search_url(domain: str, text: str) -> str:
    q = quote(text, safe=_URI_COMPONENT_SAFE)
    template = SEARCH_URL_TEMPLATES.get(domain)
    if template:
        return template.format(q=q)
    return f"https://{domain}/search?q={q}"


def calculate_credibility(domain: str, source_type: SourceType) -> int:
    """Per-domain base score plus a source-type bonus, capped at 100."""
    base = CREDIBILITY_SCORES.get(domain, DEFAULT_CREDIBILITY)
    return min(base + CREDIBILITY_BONUS.get(source_type, 0), 100)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with milliseconds and a ``Z`` suffix."""
    return moment.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CandidateGenerator:
    """
    Synthesizes SearchResult candidates for one category at a time.

    Usage:
        generator = CandidateGenerator(rng=random.Random(42))
        results = generator.generate("academic", analysis, limit=4)
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._now = now or (lambda: datetime.now(UTC))

    @staticmethod
    def sites_for(category: SearchCategory | str, language: Language) -> tuple[Site, ...]:
        resolved = coerce_category(category)
        if resolved is SearchCategory.NEWS:
            return NEWS_SITES[language]
        return SITES[resolved]

    def generate(
        self,
        category: SearchCategory | str,
        analysis: QueryAnalysis,
        limit: int,
        query: str | None = None,
    ) -> list[SearchResult]:
        """
        Build up to ``limit`` results, one per site of ``category``.

        Args:
            category: Category name or enum (unknown names use the general sites)
            analysis: Analyzed query
            limit: Maximum number of sites to use
            query: Optional query variation to put in the URLs. Defaults to the
                top three search terms of the analysis.

        Returns:
            Results with empty ids and ``pending`` scan status
        """
        resolved = coerce_category(category)
        url_text = query if query is not None else " ".join(analysis.search_terms[:3])
        sites = self.sites_for(resolved, analysis.language)[: max(limit, 0)]
        return [self._build_result(site, resolved, analysis, url_text) for site in sites]

    def _build_result(
        self,
        site: Site,
        category: SearchCategory,
        analysis: QueryAnalysis,
        url_text: str,
    ) -> SearchResult:
        return SearchResult(
            id="",
            title=self._render(TITLE_TEMPLATES, site, analysis),
            url=build_search_url(site.domain, url_text),
            snippet=self._render(SNIPPET_TEMPLATES, site, analysis),
            domain=site.domain,
            favicon=FAVICON_TEMPLATE.format(domain=site.domain),
            scan_status=ScanStatus.PENDING,
            category=category.value,
            keywords=analysis.search_terms[:5],
            source_type=site.source_type,
            publish_date=self._publish_date(site.source_type),
            author_credibility=calculate_credibility(site.domain, site.source_type),
        )

    @staticmethod
    def _render(
        templates: Mapping[Language, Mapping[SourceType | None, str]],
        site: Site,
        analysis: QueryAnalysis,
    ) -> str:
        by_type = templates[analysis.language]
        template = by_type.get(site.source_type, by_type[None])
        return template.format(k=analysis.main_keyword, name=site.name)

    def _publish_date(self, source_type: SourceType) -> str:
        window = RECENCY_WINDOW_DAYS.get(source_type, DEFAULT_RECENCY_WINDOW_DAYS)
        days_ago = self._rng.randrange(window)
        return format_timestamp(self._now() - timedelta(days=days_ago))
