"""Configuration management."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field


# Load environment variables from .env file
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").lower() in ("true", "1", "yes")


def _env_list(name: str) -> list[str]:
    raw = os.getenv(name, "")
    return [item.strip().lower() for item in raw.split(",") if item.strip()]


class Settings(BaseModel):
    """Application settings."""

    # Mapbox (geocoding + directions)
    mapbox_token: str | None = Field(
        default_factory=lambda: os.getenv("MAPBOX_TOKEN")
    )
    mapbox_base_url: str = Field(
        default_factory=lambda: os.getenv("MAPBOX_BASE_URL", "https://api.mapbox.com")
    )

    # Language model used for location extraction: gemini, openai or none
    llm_provider: str = Field(
        default_factory=lambda: os.getenv("LLM_PROVIDER", "gemini").lower()
    )
    gemini_api_key: str | None = Field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY")
    )
    gemini_model: str = Field(
        default_factory=lambda: os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    )
    gemini_base_url: str = Field(
        default_factory=lambda: os.getenv(
            "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com"
        )
    )

    # OpenAI-compatible provider (GitHub Models, or Ollama with USE_OLLAMA)
    github_token: str | None = Field(
        default_factory=lambda: os.getenv("GITHUB_TOKEN")
    )
    model_id: str | None = Field(
        default_factory=lambda: os.getenv("MODEL_ID")
    )
    use_ollama: bool = Field(default_factory=lambda: _env_flag("USE_OLLAMA"))
    ollama_url: str = Field(
        default_factory=lambda: os.getenv("OLLAMA_URL", "http://localhost:11434/v1")
    )

    # Timeouts in seconds
    extraction_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("EXTRACTION_TIMEOUT", "10"))
    )
    http_timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("HTTP_TIMEOUT", "10"))
    )

    # Output settings
    export_formats: list[str] = Field(
        default_factory=lambda: _env_list("EXPORT_FORMATS")
    )
    output_dir: Path = Field(
        default_factory=lambda: Path(__file__).parent.parent / "output"
    )
    log_level: str = Field(
        default_factory=lambda: os.getenv("LOG_LEVEL", "WARNING").upper()
    )

    def validate_required(self) -> list[str]:
        """Check for missing required configuration."""
        missing = []

        if not self.mapbox_token:
            missing.append("MAPBOX_TOKEN")

        # The language model is optional - searches fall back to pattern extraction

        return missing

    def llm_configured(self) -> bool:
        """Whether the configured language-model provider can be called."""
        if self.llm_provider == "gemini":
            return bool(self.gemini_api_key)
        if self.llm_provider == "openai":
            return self.use_ollama or bool(self.github_token)
        return False
