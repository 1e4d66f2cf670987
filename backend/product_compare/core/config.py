"""
Centralized configuration for the Product Compare backend.
Uses Pydantic Settings to load from environment variables and .env file.
"""

from pathlib import Path
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── API Keys ──
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    firecrawl_api_key: str = ""

    # ── LLM Configuration ──
    llm_provider: str = "openai"       # openai | anthropic | ollama | lmstudio
    llm_model: str = ""
    llm_temperature: float = 0.1
    llm_max_tokens: int = 4096
    ollama_base_url: str = "http://localhost:11434"
    lmstudio_base_url: str = "http://localhost:1234/v1"
    extraction_max_chars: int = 30000

    # ── Similarity ──
    embedding_model: str = "text-embedding-3-small"
    similarity_strategy: str = "embedding"   # embedding | token

    # ── Firecrawl ──
    firecrawl_base_url: str = "https://api.firecrawl.dev/v1"
    scraper_timeout: int = 60
    scraper_max_retries: int = 2
    firecrawl_crawl_timeout: int = 300
    firecrawl_poll_interval: float = 2.0

    # ── CORS ──
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    # ── Rate Limiting ──
    rate_limit_per_minute: int = 30

    # ── Application ──
    app_version: str = "1.0.0"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=str(Path(__file__).resolve().parent.parent.parent / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Cached singleton for application settings."""
    return Settings()
