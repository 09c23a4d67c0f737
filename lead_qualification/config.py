"""
lead_qualification/config.py — Central configuration loaded from environment variables.
All modules import settings from here; never read os.environ directly elsewhere.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── LLM ──────────────────────────────────────────────────────────────────
    openrouter_api_key: str = Field(..., description="OpenRouter API key")
    openrouter_model: str = Field(
        default="openai/gpt-4o",
        description="OpenRouter model identifier used as the analysis oracle",
    )
    oracle_max_retries: int = Field(
        default=2,
        ge=0,
        description="Transport-level retries performed by the LLM client per request",
    )

    # ── Oracle calls ──────────────────────────────────────────────────────────
    oracle_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-call timeout; a timed-out call falls back to its default",
    )
    max_context_chars: int = Field(
        default=4000,
        gt=0,
        description="Max characters of serialized lead/dimension context sent per prompt",
    )

    # ── Batch runs ────────────────────────────────────────────────────────────
    max_concurrent_runs: int = Field(
        default=5,
        gt=0,
        description="Max qualification runs executed concurrently by qualify_leads()",
    )


# Singleton — import this everywhere
settings = Settings()
