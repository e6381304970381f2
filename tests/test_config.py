import json

import pytest

from healing_guide.config.settings import load_config
from healing_guide.core.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in (
        "HEALING_GUIDE_API_KEY",
        "GEMINI_API_KEY",
        "HEALING_GUIDE_MODEL",
        "HEALING_GUIDE_DB",
        "HEALING_GUIDE_LOG_LEVEL",
        "HEALING_GUIDE_COALESCE",
    ):
        monkeypatch.delenv(var, raising=False)


def test_defaults(tmp_path):
    config = load_config(tmp_path)

    assert config.api_key is None
    assert config.model == "gemini-flash-latest"
    assert config.request_timeout == 45.0
    assert config.database_path == tmp_path / "healing_guide.db"
    assert config.coalesce_inflight is True
    assert config.document_retry.max_retries == 2
    assert config.chat_retry.initial_delay == 1.0


def test_file_then_environment(tmp_path, monkeypatch):
    (tmp_path / "config.json").write_text(
        json.dumps({"api_key": "from-file", "model": "gemini-pro", "search_retry": {"max_retries": 1}}),
        encoding="utf-8",
    )
    monkeypatch.setenv("GEMINI_API_KEY", "from-env")
    monkeypatch.setenv("HEALING_GUIDE_COALESCE", "off")

    config = load_config(tmp_path)

    assert config.api_key == "from-env"
    assert config.model == "gemini-pro"
    assert config.search_retry.max_retries == 1
    assert config.search_retry.initial_delay == 2.0
    assert config.coalesce_inflight is False


def test_specific_key_wins_over_generic(tmp_path, monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "generic")
    monkeypatch.setenv("HEALING_GUIDE_API_KEY", "specific")
    assert load_config(tmp_path).api_key == "specific"


def test_invalid_file_raises(tmp_path):
    (tmp_path / "config.json").write_text("{broken", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(tmp_path)


def test_invalid_values_raise(tmp_path):
    (tmp_path / "config.json").write_text(json.dumps({"request_timeout": -1}), encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(tmp_path)
