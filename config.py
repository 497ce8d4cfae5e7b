"""
Configuration settings for the intelligent-textbook generator.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Anthropic API
    # ========================================
    anthropic_api_key: str | None = Field(
        default=None,
        description="Anthropic API key for Claude models",
    )
    default_model: str = Field(
        default="claude-sonnet-4-5",
        description="Claude model used when --model is not given",
    )
    anthropic_timeout_seconds: float = Field(
        default=600.0,
        description="Per-request timeout passed to the Anthropic client",
    )
    anthropic_max_retries: int = Field(
        default=2,
        description="Retries performed by the Anthropic client on transient errors",
    )

    # ========================================
    # Generation Limits
    # ========================================
    default_max_tokens: int = Field(
        default=8192,
        description="Token limit for single-document generation calls",
    )
    content_max_tokens: int = Field(
        default=16384,
        description="Token limit for full chapter content",
    )
    quiz_max_tokens: int = Field(
        default=4096,
        description="Token limit for per-chapter quizzes",
    )
    readme_max_tokens: int = Field(
        default=4096,
        description="Token limit for the repository README",
    )
    generation_concurrency: int = Field(
        default=8,
        description="Maximum number of in-flight requests during a parallel fan-out",
    )

    # ========================================
    # Textbook Defaults
    # ========================================
    default_chapters: int = Field(
        default=12,
        description="Number of chapters when --chapters is not given",
    )
    default_simulations: int = Field(
        default=5,
        description="Number of interactive simulations when --simulations is not given",
    )
    default_concepts: int = Field(
        default=200,
        description="Number of learning-graph concepts when --concepts is not given",
    )

    # ========================================
    # Deployment
    # ========================================
    github_owner: str | None = Field(
        default=None,
        description="GitHub user or organisation that hosts the Pages site",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Minimum level for the stderr log sink",
    )

    def has_ai_configured(self) -> bool:
        """Check if an Anthropic credential is available."""
        return bool(self.anthropic_api_key)

    def pages_url(self, repo_name: str | None) -> str | None:
        """Build the GitHub Pages URL for a repository, if enough is known."""
        if not repo_name or not self.github_owner:
            return None
        return f"https://{self.github_owner}.github.io/{repo_name}/"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
