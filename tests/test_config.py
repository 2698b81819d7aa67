"""Tests for settings and language-model client selection."""

from routeviz import config
from routeviz.config import Settings
from routeviz.tools.llm import GeminiClient, OpenAICompatibleClient, create_llm_client


def clear_env(monkeypatch):
    for name in (
        "MAPBOX_TOKEN", "LLM_PROVIDER", "GEMINI_API_KEY", "GITHUB_TOKEN",
        "MODEL_ID", "USE_OLLAMA", "EXPORT_FORMATS", "EXTRACTION_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


class TestSettings:

    def test_missing_mapbox_token_is_reported(self, monkeypatch):
        clear_env(monkeypatch)
        assert Settings().validate_required() == ["MAPBOX_TOKEN"]

    def test_values_come_from_environment(self, monkeypatch):
        clear_env(monkeypatch)
        monkeypatch.setenv("MAPBOX_TOKEN", "pk.test")
        monkeypatch.setenv("EXPORT_FORMATS", "GPX, geojson")
        monkeypatch.setenv("EXTRACTION_TIMEOUT", "4.5")

        settings = Settings()

        assert settings.validate_required() == []
        assert settings.export_formats == ["gpx", "geojson"]
        assert settings.extraction_timeout_seconds == 4.5

    def test_settings_are_read_when_constructed(self, monkeypatch):
        """Importing the module must not freeze the environment into a shared instance."""
        clear_env(monkeypatch)
        assert not hasattr(config, "settings")

        monkeypatch.setenv("MAPBOX_TOKEN", "pk.later")
        assert Settings().mapbox_token == "pk.later"


class TestLLMSelection:

    def test_no_key_means_no_client(self, monkeypatch):
        clear_env(monkeypatch)
        assert create_llm_client(Settings()) is None

    def test_disabled_provider(self, monkeypatch):
        clear_env(monkeypatch)
        monkeypatch.setenv("LLM_PROVIDER", "none")
        monkeypatch.setenv("GEMINI_API_KEY", "secret")
        assert create_llm_client(Settings()) is None

    def test_gemini(self, monkeypatch):
        clear_env(monkeypatch)
        monkeypatch.setenv("GEMINI_API_KEY", "secret")
        client = create_llm_client(Settings())
        assert isinstance(client, GeminiClient)
        assert client.api_key == "secret"

    def test_ollama(self, monkeypatch):
        clear_env(monkeypatch)
        monkeypatch.setenv("LLM_PROVIDER", "openai")
        monkeypatch.setenv("USE_OLLAMA", "true")
        client = create_llm_client(Settings())
        assert isinstance(client, OpenAICompatibleClient)
        assert client.model == "qwen2.5:7b"

    def test_github_models(self, monkeypatch):
        clear_env(monkeypatch)
        monkeypatch.setenv("LLM_PROVIDER", "openai")
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_test")
        client = create_llm_client(Settings())
        assert isinstance(client, OpenAICompatibleClient)
        assert client.model == "openai/gpt-4.1"
