import json

import pytest

from healing_guide.core.exceptions import ProviderConfigError, ProviderTimeoutError
from healing_guide.core.models import CandidateResult, SearchDegraded, SearchOk
from healing_guide.core.search import CandidateResolver

from conftest import FakeGenerator, make_candidates


@pytest.fixture
def make_resolver(search_cache, resilience, background):
    def _make(generator, **kwargs):
        kwargs.setdefault("search_cache", search_cache)
        return CandidateResolver(
            generator=generator, resilience_manager=resilience, background=background, **kwargs
        )

    return _make


async def test_search_cache_hit_never_calls_provider(search_cache, make_resolver):
    cached = [CandidateResult.model_validate(c) for c in make_candidates("Ansiedad", "Angustia", "Asma")]
    await search_cache.insert("ansi", cached)
    generator = FakeGenerator()

    outcome = await make_resolver(generator).search("  ANSI ")

    assert isinstance(outcome, SearchOk)
    assert outcome.source == "cache"
    assert [r.name for r in outcome.results] == ["Ansiedad", "Angustia", "Asma"]
    assert generator.calls == []


async def test_generated_results_are_cached(search_cache, make_resolver, background):
    payload = make_candidates("Migraña", "Cefalea", "Sinusitis")
    generator = FakeGenerator("```json\n" + json.dumps(payload) + "\n```")

    outcome = await make_resolver(generator).search("dolor de cabeza")

    assert isinstance(outcome, SearchOk)
    assert outcome.source == "provider"
    assert outcome.to_payload() == payload
    assert generator.calls[0]["json_mode"] is True
    await background.drain()
    assert [r.name for r in await search_cache.get("dolor de cabeza")] == ["Migraña", "Cefalea", "Sinusitis"]


async def test_permanent_failure_degrades_to_fallback(make_resolver, sleeper, search_cache, background):
    generator = FakeGenerator(
        ProviderTimeoutError("La conexión tardó demasiado"),
        ProviderTimeoutError("La conexión tardó demasiado"),
        ProviderTimeoutError("La conexión tardó demasiado"),
    )

    outcome = await make_resolver(generator).search("ansi")

    assert isinstance(outcome, SearchDegraded)
    assert outcome.reason == "La conexión tardó demasiado"
    assert len(outcome.results) == 5
    assert len(generator.calls) == 3
    assert sleeper.delays == [2.0, 4.0]

    payload = outcome.to_payload()
    assert len(payload) == 5
    assert payload[0]["isFallback"] is True
    assert payload[0]["errorMessage"] == "La conexión tardó demasiado"
    assert [p["name"] for p in payload] == ["Dolor de Cabeza", "Dolor de Espalda", "Ansiedad", "Gastritis", "Gripe"]
    assert "errorMessage" not in payload[1]

    await background.drain()
    assert await search_cache.get("ansi") is None


async def test_config_error_degrades_without_retry(make_resolver, sleeper):
    generator = FakeGenerator(ProviderConfigError("Provider API key is not configured"))

    payload = await make_resolver(generator).search_payload("gripe")

    assert len(payload) == 5
    assert payload[0]["isFallback"] is True
    assert payload[0]["errorMessage"] == "Provider API key is not configured"
    assert len(generator.calls) == 1
    assert sleeper.delays == []


async def test_empty_or_malformed_answers_degrade(make_resolver):
    generator = FakeGenerator("[]", "not json", '{"name": "solo uno"}')

    outcome = await make_resolver(generator).search("xyz")

    assert outcome.degraded
    assert outcome.reason
    assert len(generator.calls) == 3


async def test_broken_search_cache_read_falls_through_to_provider(make_resolver, background):
    class BrokenCache:
        async def get(self, key):
            raise RuntimeError("database is locked")

        async def insert(self, key, results):
            raise RuntimeError("database is locked")

    generator = FakeGenerator(json.dumps(make_candidates("Tos", "Asma", "Gripe")))

    outcome = await make_resolver(generator, search_cache=BrokenCache()).search("tos")

    assert isinstance(outcome, SearchOk)
    assert len(outcome.results) == 3
    await background.drain()
    assert background.pending == 0
