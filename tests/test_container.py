"""
Tests for the DI container - provider wiring, scan modes and overrides.
"""

from __future__ import annotations

import pytest
from dependency_injector import providers

from research_search.application.composer.composer import ResponseComposer
from research_search.application.search.service import SearchService
from research_search.container import SCAN_MODES, ApplicationContainer
from research_search.infrastructure.llm import GeminiClient
from research_search.infrastructure.scanner import HttpContentScanner, SimulatedContentScanner
from research_search.shared.exceptions import ConfigurationError


def _container(**config) -> ApplicationContainer:
    container = ApplicationContainer()
    container.config.from_dict(
        {
            "scan_mode": "simulated",
            "scan_timeout": None,
            "parallel_deep": True,
            "gemini_api_key": None,
            "gemini_model": None,
            **config,
        }
    )
    return container


class TestScanner:
    def test_modes(self):
        assert SCAN_MODES == ("simulated", "http")

    def test_simulated_default(self):
        assert isinstance(_container().content_scanner(), SimulatedContentScanner)

    def test_missing_mode_falls_back_to_simulated(self):
        assert isinstance(_container(scan_mode=None).content_scanner(), SimulatedContentScanner)

    async def test_http_mode(self):
        scanner = _container(scan_mode="HTTP", scan_timeout=3.5).content_scanner()
        try:
            assert isinstance(scanner, HttpContentScanner)
        finally:
            await scanner.close()

    def test_unknown_mode(self):
        with pytest.raises(ConfigurationError, match="Unknown scan mode"):
            _container(scan_mode="crawler").content_scanner()


class TestTextGenerator:
    def test_disabled_without_key(self):
        container = _container()

        assert container.text_generator() is None
        assert container.response_composer().available is False

    async def test_gemini_with_key(self):
        container = _container(gemini_api_key="k", gemini_model="gemini-test")
        client = container.text_generator()
        try:
            assert isinstance(client, GeminiClient)
            assert client.model == "gemini-test"
            assert container.response_composer().available is True
        finally:
            await client.close()


class TestSearchService:
    def test_wiring(self):
        container = _container()
        service = container.search_service()

        assert isinstance(service, SearchService)
        assert service.scanner is container.content_scanner()

    def test_singletons(self):
        container = _container()
        assert container.search_service() is container.search_service()
        assert container.term_expander() is container.term_expander()
        assert isinstance(container.response_composer(), ResponseComposer)

    @pytest.mark.parametrize(("value", "expected"), [(None, True), (True, True), (False, False)])
    def test_parallel_deep(self, value, expected):
        service = _container(parallel_deep=value).search_service()
        assert service._parallel_deep is expected

    def test_override_scanner(self, scanner):
        container = _container()
        container.content_scanner.override(providers.Object(scanner))
        try:
            assert container.search_service().scanner is scanner
        finally:
            container.content_scanner.reset_override()
