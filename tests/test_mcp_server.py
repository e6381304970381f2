import json

import pytest

from healing_guide.config.settings import AppConfig
from healing_guide.core.llm_client import GeminiClient
from healing_guide.mcp.server import HealingGuideServer
from healing_guide.mcp.services.session import SessionService

from conftest import make_document, seed_catalog


@pytest.fixture
def config(tmp_path):
    return AppConfig(database_path=tmp_path / "guide.db")


@pytest.fixture
async def server(config):
    guide_server = HealingGuideServer(SessionService(config=config))
    yield guide_server
    await guide_server.cleanup()


def text_of(result) -> str:
    return result.content[0].text


async def test_tools_are_advertised(server):
    names = {tool.name for tool in server.get_tools()}
    assert names == {"get_symptom_details", "search_symptoms", "suggest_symptoms", "chat", "regenerate_symptom"}


async def test_details_from_catalog(server):
    await server.session_service.initialize()
    seed_catalog(server.session_service.database, "gastritis", make_document("Gastritis"))

    result = await server.call_tool("get_symptom_details", {"query": "Gastritis"})

    assert not result.isError
    assert text_of(result).startswith("# Gastritis")
    assert "## Zona corporal" in text_of(result)
    assert "— Tengo que poder con todo" in text_of(result)


async def test_details_failure_is_error_result(server):
    result = await server.call_tool("get_symptom_details", {"query": "Gripe"})

    assert result.isError
    assert "try again" in text_of(result)


async def test_search_degrades_into_text(server):
    result = await server.call_tool("search_symptoms", {"query": "ansi"})

    assert not result.isError
    assert "Search unavailable" in text_of(result)
    assert "Dolor de Espalda" in text_of(result)


async def test_generated_details_are_cached(config, monkeypatch):
    async def fake_generate(self, prompt, json_mode=False, **kwargs):
        return json.dumps(make_document("Migraña"))

    monkeypatch.setattr(GeminiClient, "generate", fake_generate)
    session = SessionService(config=config.model_copy(update={"api_key": "test-key"}))
    guide_server = HealingGuideServer(session)

    result = await guide_server.call_tool("get_symptom_details", {"query": "Migraña"})
    assert not result.isError
    await session.background.drain()
    entry = await session.cache.get("migra-a")
    await guide_server.cleanup()

    assert entry is not None
    assert entry.document.name == "Migraña"


async def test_argument_validation_and_unknown_tool(server):
    assert (await server.call_tool("get_symptom_details", {})).isError
    assert (await server.call_tool("chat", {"message": ""})).isError
    assert (await server.call_tool("nope", {})).isError


async def test_suggest_and_chat_fallback(server):
    suggestions = await server.call_tool("suggest_symptoms", {"query": "dolor", "limit": 2})
    assert text_of(suggestions).splitlines() == ["Dolor de cabeza", "Dolor de espalda"]

    reply = await server.call_tool("chat", {"message": "hola"})
    assert "interferencia" in text_of(reply)


async def test_suggest_limit_is_clamped(server):
    for limit in (0, -3):
        result = await server.call_tool("suggest_symptoms", {"query": "dolor", "limit": limit})
        assert text_of(result).splitlines() == ["Dolor de cabeza"]
