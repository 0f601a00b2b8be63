"""Runtime settings for ChatBridge, read from the environment and `.env`."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Every field can be overridden by an environment variable of the same name
    (e.g. ``PORT=9000``). List fields take JSON, e.g.
    ``MCP_ARGS='["-y", "@modelcontextprotocol/server-filesystem"]'``.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- HTTP server ---
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    CORS_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    # --- Completion service ---
    LLM_SERVER_URL: str = "http://localhost:8001/v1/completions"
    LLM_TIMEOUT_SECONDS: float = 60.0
    LLM_MAX_TOKENS: int = 150
    LLM_TEMPERATURE: float = 0.2

    # --- MCP resource server (spawned over stdio) ---
    MCP_COMMAND: str = "npx"
    MCP_ARGS: list[str] = ["-y", "@modelcontextprotocol/server-filesystem"]
    # Directory served by the filesystem server, appended to MCP_ARGS
    MCP_ROOT: Path = Field(default_factory=Path.cwd)

    # Maximum characters of file content placed in a prompt
    CONTEXT_MAX_CHARS: int = 8000


# Global settings instance
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings_instance
    _settings_instance = None
