"""
SearchResult - the central entity of a search response.

Results are synthesized per site by the candidate generator, ranked once per
response, and later enriched by a content scan. The scan lifecycle is
one-directional:

    pending → scanning → completed
                       ↘ error

``content`` is only ever set together with the ``completed`` state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import urlparse

from research_search.shared.exceptions import ScanStateError


class ScanStatus(Enum):
    """Lifecycle state of a result's content-enrichment step."""

    PENDING = "pending"
    SCANNING = "scanning"
    COMPLETED = "completed"
    ERROR = "error"


class SourceType(Enum):
    """Provenance classification, drives both display and scoring bonuses."""

    ACADEMIC = "academic"
    NEWS = "news"
    INDUSTRY = "industry"
    GOVERNMENT = "government"
    EXPERT = "expert"
    STATISTICAL = "statistical"
    CASE_STUDY = "case_study"
    WHITEPAPER = "whitepaper"
    GENERAL = "general"


class SearchCategory(Enum):
    """Source categories the candidate generator fans out over."""

    ACADEMIC = "academic"
    NEWS = "news"
    INDUSTRY = "industry"
    GOVERNMENT = "government"
    EXPERT = "expert"
    STATISTICAL = "statistical"
    GENERAL = "general"


# Allowed scan transitions: current -> reachable states
_SCAN_TRANSITIONS: dict[ScanStatus, frozenset[ScanStatus]] = {
    ScanStatus.PENDING: frozenset({ScanStatus.SCANNING}),
    ScanStatus.SCANNING: frozenset({ScanStatus.COMPLETED, ScanStatus.ERROR}),
    ScanStatus.COMPLETED: frozenset(),
    ScanStatus.ERROR: frozenset(),
}


@dataclass
class SearchResult:
    """
    One synthesized search hit.

    ``url`` is a search-engine-style query URL on a real domain. It is not
    guaranteed to resolve to a live document.
    """

    id: str
    title: str
    url: str
    snippet: str
    domain: str
    favicon: str | None = None
    scan_status: ScanStatus = ScanStatus.PENDING
    content: str | None = None
    category: str | None = None
    relevance_score: int | None = None
    keywords: list[str] = field(default_factory=list)
    source_type: SourceType | None = None
    publish_date: str | None = None
    author_credibility: int | None = None

    # ------------------------------------------------------------------
    # Scan lifecycle
    # ------------------------------------------------------------------

    def _transition(self, target: ScanStatus) -> None:
        if target not in _SCAN_TRANSITIONS[self.scan_status]:
            raise ScanStateError(self.id, self.scan_status.value, target.value)
        self.scan_status = target

    def mark_scanning(self) -> None:
        """pending → scanning."""
        self._transition(ScanStatus.SCANNING)

    def mark_completed(self, content: str) -> None:
        """scanning → completed, attaching the scanned content."""
        self._transition(ScanStatus.COMPLETED)
        self.content = content

    def mark_failed(self) -> None:
        """scanning → error."""
        self._transition(ScanStatus.ERROR)

    @property
    def is_scanned(self) -> bool:
        return self.scan_status in (ScanStatus.COMPLETED, ScanStatus.ERROR)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase wire shape consumed by the chat UI."""
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "snippet": self.snippet,
            "domain": self.domain,
            "scanStatus": self.scan_status.value,
        }
        if self.favicon is not None:
            data["favicon"] = self.favicon
        if self.content is not None:
            data["content"] = self.content
        if self.category is not None:
            data["category"] = self.category
        if self.relevance_score is not None:
            data["relevanceScore"] = self.relevance_score
        if self.keywords:
            data["keywords"] = list(self.keywords)
        if self.source_type is not None:
            data["sourceType"] = self.source_type.value
        if self.publish_date is not None:
            data["publishDate"] = self.publish_date
        if self.author_credibility is not None:
            data["authorCredibility"] = self.author_credibility
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SearchResult:
        """
        Rebuild a result from its wire shape (camelCase or snake_case keys).

        Only ``url`` is required. Unknown scan states and source types fall
        back to ``pending`` / ``None``.
        """
        url = str(data["url"])

        def pick(camel: str, snake: str) -> Any:
            return data.get(camel, data.get(snake))

        try:
            scan_status = ScanStatus(pick("scanStatus", "scan_status") or ScanStatus.PENDING.value)
        except ValueError:
            scan_status = ScanStatus.PENDING
        try:
            raw_source = pick("sourceType", "source_type")
            source_type = SourceType(raw_source) if raw_source else None
        except ValueError:
            source_type = None

        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title", "")),
            url=url,
            snippet=str(data.get("snippet", "")),
            domain=str(data.get("domain") or urlparse(url).hostname or ""),
            favicon=data.get("favicon"),
            scan_status=scan_status,
            content=data.get("content"),
            category=data.get("category"),
            relevance_score=pick("relevanceScore", "relevance_score"),
            keywords=list(data.get("keywords") or []),
            source_type=source_type,
            publish_date=pick("publishDate", "publish_date"),
            author_credibility=pick("authorCredibility", "author_credibility"),
        )


@dataclass
class SearchResponse:
    """Envelope returned by ``search_web`` and ``deep_research``."""

    results: list[SearchResult]
    total_results: int
    search_time_ms: int
    expanded_keywords: list[str] | None = None
    search_suggestions: list[str] | None = None

    @classmethod
    def empty(cls, search_time_ms: int = 0) -> SearchResponse:
        """Fail-soft response: no results, no expansion data."""
        return cls(results=[], total_results=0, search_time_ms=search_time_ms)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "results": [r.to_dict() for r in self.results],
            "totalResults": self.total_results,
            "searchTime": self.search_time_ms,
        }
        if self.expanded_keywords is not None:
            data["expandedKeywords"] = self.expanded_keywords
        if self.search_suggestions is not None:
            data["searchSuggestions"] = self.search_suggestions
        return data


@dataclass(frozen=True, slots=True)
class ScanOutcome:
    """Result of scanning one URL. Only ``completed`` or ``error``."""

    content: str
    scan_status: ScanStatus

    @classmethod
    def completed(cls, content: str) -> ScanOutcome:
        return cls(content=content, scan_status=ScanStatus.COMPLETED)

    @classmethod
    def failed(cls) -> ScanOutcome:
        return cls(content="", scan_status=ScanStatus.ERROR)

    @property
    def ok(self) -> bool:
        return self.scan_status is ScanStatus.COMPLETED

    def to_dict(self) -> dict[str, str]:
        return {"content": self.content, "scanStatus": self.scan_status.value}
