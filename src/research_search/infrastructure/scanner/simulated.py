"""
SimulatedContentScanner - offline stand-in for page fetching.

Returns a canned, domain-specific description after a randomized delay.
Used by default so the server runs without outbound network access.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Mapping
from types import MappingProxyType

from research_search.domain.entities.result import ScanOutcome

from .base import extract_domain, truncate_content

logger = logging.getLogger(__name__)

DEFAULT_CONTENT = (
    "Authoritative content with comprehensive information, expert analysis, and practical insights. "
    "The source provides detailed explanations, current data, research findings, and actionable "
    "recommendations for practical application."
)

DOMAIN_CONTENT: Mapping[str, str] = MappingProxyType(
    {
        "arxiv.org": (
            "This peer-reviewed academic paper presents novel research findings with rigorous methodology, "
            "comprehensive literature review, and significant contributions to the field. The study includes "
            "detailed experimental results, statistical analysis, and implications for future research directions."
        ),
        "nature.com": (
            "This high-impact scientific publication features groundbreaking research with extensive peer "
            "review, detailed methodology, and significant implications for the scientific community. The "
            "article includes comprehensive data analysis, expert commentary, and future research recommendations."
        ),
        "who.int": (
            "Official World Health Organization guidelines and recommendations based on extensive global health "
            "data, expert consensus, and evidence-based medical research. The document includes policy "
            "recommendations, implementation strategies, and public health implications."
        ),
        "mckinsey.com": (
            "Strategic business analysis and industry insights from leading management consultants, featuring "
            "comprehensive market research, data-driven recommendations, and actionable business strategies for "
            "organizational transformation and growth."
        ),
        "stackoverflow.com": (
            "Community-verified programming solutions with detailed code examples, best practices, performance "
            "optimizations, and expert explanations. The discussion includes multiple approaches, common "
            "pitfalls, and production-ready implementations."
        ),
        "github.com": (
            "Open-source project with comprehensive documentation, well-structured codebase, extensive testing "
            "suite, and active community contributions. The repository includes detailed API documentation, "
            "usage examples, and contribution guidelines."
        ),
        "reuters.com": (
            "Professional journalism with verified sources, comprehensive fact-checking, and balanced reporting "
            "from experienced correspondents. The article includes expert analysis, historical context, and "
            "implications for stakeholders."
        ),
        "ted.com": (
            "Expert presentation featuring innovative ideas, research-backed insights, and practical "
            "applications from recognized thought leaders. The talk includes compelling storytelling, data "
            "visualization, and actionable takeaways."
        ),
        "statista.com": (
            "Comprehensive statistical analysis with verified data sources, trend analysis, and market insights. "
            "The report includes detailed charts, comparative analysis, and predictive modeling with confidence "
            "intervals."
        ),
    }
)


class SimulatedContentScanner:
    """
    Canned-content scanner.

    Args:
        min_delay: Lower bound of the simulated fetch delay, seconds
        max_delay: Upper bound of the simulated fetch delay, seconds
        rng: Random source for the delay
        content: Domain → text table (defaults to DOMAIN_CONTENT)
    """

    def __init__(
        self,
        min_delay: float = 0.6,
        max_delay: float = 1.4,
        rng: random.Random | None = None,
        content: Mapping[str, str] | None = None,
    ) -> None:
        self._min_delay = min_delay
        self._max_delay = max(max_delay, min_delay)
        self._rng = rng or random.Random()
        self._content = content if content is not None else DOMAIN_CONTENT

    async def scan(self, url: str) -> ScanOutcome:
        domain = extract_domain(url)
        text = self._content.get(domain, DEFAULT_CONTENT)

        delay = self._rng.uniform(self._min_delay, self._max_delay)
        if delay > 0:
            await asyncio.sleep(delay)

        logger.debug(f"Simulated scan of {domain} ({len(text)} chars)")
        return ScanOutcome.completed(truncate_content(text))
