"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ up front
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=True)


class ProviderSettings(BaseSettings):
    """Connection settings shared by every OpenAI-compatible chat provider.

    Subclasses only change the env prefix and the defaults, so the factory can
    treat all providers the same way.
    """

    api_key: str | None = Field(
        None,
        description="Provider API key; the chat endpoint answers 500 when missing",
    )
    model: str = Field(..., description="Model name sent with every completion")
    base_url: str = Field(..., description="OpenAI-compatible endpoint for the provider")
    timeout_seconds: float = Field(
        30.0,
        description="Request timeout in seconds",
    )


class GroqSettings(ProviderSettings):
    model: str = "llama-3.3-70b-versatile"
    base_url: str = "https://api.groq.com/openai/v1"

    model_config = SettingsConfigDict(env_prefix="GROQ_", case_sensitive=False)


class GeminiSettings(ProviderSettings):
    model: str = "gemini-1.5-flash"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"

    model_config = SettingsConfigDict(env_prefix="GEMINI_", case_sensitive=False)


class PerplexitySettings(ProviderSettings):
    model: str = "sonar"
    base_url: str = "https://api.perplexity.ai"

    model_config = SettingsConfigDict(env_prefix="PERPLEXITY_", case_sensitive=False)


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    debug: bool = Field(
        False,
        description="Enable debug mode with verbose logging",
    )
    api_key_required: bool = Field(
        True,
        description="Whether API key authentication is required",
    )
    api_keys: str | None = Field(
        None,
        description="Comma-separated list of valid API keys for authentication",
    )

    rate_limit_enabled: bool = Field(
        True,
        description="Enable per-user admission limiting on provider chat endpoints",
    )
    rate_limit_requests: int = Field(
        20,
        description="Maximum number of requests admitted per window (per provider and user)",
        ge=1,
    )
    rate_limit_window_ms: int = Field(
        60_000,
        description="Fixed window length in milliseconds",
        ge=1,
    )
    rate_limit_sweep_interval_ms: int = Field(
        300_000,
        description="How often expired buckets are swept from memory (0 disables sweeping)",
        ge=0,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* headers next to Retry-After when throttling",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class KnowledgeBaseSettings(BaseSettings):
    """Retrieval settings for the assistant's hybrid chat."""

    enabled: bool = Field(
        True,
        description="Answer from the knowledge base before asking a provider",
    )
    top_k: int = Field(3, description="Maximum matches returned per query", ge=1)
    min_score: float = Field(
        0.12,
        description="Minimum cosine similarity for a chunk to count as a match",
        ge=-1.0,
        le=1.0,
    )
    embedding_dim: int = Field(4096, description="Hashed embedding size", ge=1)
    chunk_size: int = Field(1000, description="Maximum characters per chunk", ge=1)
    chunk_overlap: int = Field(200, description="Characters shared by adjacent chunks", ge=0)
    excerpt_chars: int = Field(
        380,
        description="Chunks longer than this are truncated in the reply",
        ge=1,
    )

    model_config = SettingsConfigDict(
        env_prefix="KB_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="Either 'json' or 'plain'")
    output: str = Field("stdout", description="Either 'stdout' or 'file'")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int = Field(
        10 * 1024 * 1024,
        description="Rotate the log file after this many bytes (0 disables rotation)",
    )
    backup_count: int = Field(5, description="Number of rotated files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to read and echo the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.
    """

    app_env: str = APP_ENV
    app: AppSettings = Field(default_factory=AppSettings)
    log: LogSettings = Field(default_factory=LogSettings)
    kb: KnowledgeBaseSettings = Field(default_factory=KnowledgeBaseSettings)
    groq: GroqSettings = Field(default_factory=GroqSettings)
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    perplexity: PerplexitySettings = Field(default_factory=PerplexitySettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )

    def provider(self, name: str) -> ProviderSettings | None:
        """Return the settings group for a provider name, or None if unknown."""
        return {
            "groq": self.groq,
            "gemini": self.gemini,
            "perplexity": self.perplexity,
        }.get(name.lower())


settings = Settings()
