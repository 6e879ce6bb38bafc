"""Configuration management for Foreman.

Loads configuration from TOML files with environment variable overrides.
Uses pydantic-settings for validation and type safety.
"""

from __future__ import annotations

import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeneralSettings(BaseSettings):
    """General application settings."""

    model_config = SettingsConfigDict(env_prefix="FOREMAN_")

    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Enable JSON structured logging")


class LLMSettings(BaseSettings):
    """LLM provider settings."""

    model_config = SettingsConfigDict(env_prefix="FOREMAN_LLM_")

    provider: str = Field(default="mock", description="LLM provider: mock, anthropic, openai")
    model: str = Field(default="claude-sonnet-4-20250514", description="Model name")
    api_key: str | None = Field(default=None, description="API key for provider")
    max_tokens: int = Field(default=1000, description="Max tokens for responses")
    temperature: float = Field(default=0.7, description="Temperature for generation")
    max_retries: int = Field(
        default=1, description="Validation retries performed by the instructor client"
    )


class OrchestratorSettings(BaseSettings):
    """Orchestrator loop settings."""

    model_config = SettingsConfigDict(env_prefix="FOREMAN_ORCHESTRATOR_")

    max_iterations: int = Field(default=30, description="Planning rounds before giving up")
    max_tokens: int = Field(default=16384, description="Response ceiling for each model call")
    planning_retries: int = Field(
        default=2, description="Re-prompts allowed after a malformed plan"
    )
    task_concurrency: int = Field(
        default=4, description="Tasks of one step that may run at the same time"
    )


class TracingSettings(BaseSettings):
    """OpenTelemetry tracing settings."""

    model_config = SettingsConfigDict(env_prefix="FOREMAN_TRACING_")

    enabled: bool = Field(default=False, description="Enable tracing")
    otlp_endpoint: str = Field(default="http://localhost:4317", description="OTLP endpoint")
    service_name: str = Field(default="foreman", description="Service name")


class Settings(BaseSettings):
    """Main application settings.

    Configuration is loaded in the following order (later overrides earlier):
    1. Default values in this class
    2. Environment variables (FOREMAN_* prefix)
    3. Values from config.toml (if exists)
    """

    model_config = SettingsConfigDict(env_prefix="FOREMAN_")

    general: GeneralSettings = Field(default_factory=GeneralSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    orchestrator: OrchestratorSettings = Field(default_factory=OrchestratorSettings)
    tracing: TracingSettings = Field(default_factory=TracingSettings)

    @classmethod
    def from_toml(cls, path: Path | str) -> Settings:
        """Load settings from a TOML file.

        Args:
            path: Path to the TOML file.

        Returns:
            Settings instance with values from the file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
        """
        path = Path(path)
        with path.open("rb") as f:
            data = tomllib.load(f)

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create settings from a dictionary."""
        return cls(
            general=GeneralSettings(**data.get("general", {})),
            llm=LLMSettings(**data.get("llm", {})),
            orchestrator=OrchestratorSettings(**data.get("orchestrator", {})),
            tracing=TracingSettings(**data.get("tracing", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert settings to a dictionary."""
        return {
            "general": self.general.model_dump(),
            "llm": {
                **self.llm.model_dump(),
                "api_key": "***" if self.llm.api_key else None,  # Mask API key
            },
            "orchestrator": self.orchestrator.model_dump(),
            "tracing": self.tracing.model_dump(),
        }


def _find_config_file() -> Path | None:
    """Find the config file in standard locations."""
    candidates = [
        Path("config.toml"),
        Path("foreman.toml"),
        Path.home() / ".config" / "foreman" / "config.toml",
    ]
    for path in candidates:
        if path.exists():
            return path
    return None


@lru_cache
def get_settings(config_path: str | None = None) -> Settings:
    """Get the application settings.

    Settings are loaded from:
    1. Default values
    2. Environment variables
    3. Config file (if found or specified)

    The result is cached after first call.

    Args:
        config_path: Optional explicit path to config file.

    Returns:
        The resolved Settings instance.
    """
    settings = Settings()

    path = Path(config_path) if config_path else _find_config_file()
    if path and path.exists():
        settings = Settings.from_toml(path)

    # Environment variables fill in whatever the TOML file leaves unset.
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache. Useful for testing."""
    get_settings.cache_clear()
