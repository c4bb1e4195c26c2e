"""
Configuration management for Privacy Guard.

This module uses Pydantic Settings for type-safe configuration
with automatic environment variable loading and validation.

Environment variables can be set in:
- Shell environment
- .env file in project root

Example:
    >>> from config.settings import settings
    >>> print(settings.MAX_DOCUMENT_SIZE)
    500000
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Analysis settings with environment variable support.
    
    All settings can be overridden via environment variables.
    The prefix is not used, so MAX_DOCUMENT_SIZE maps directly to the
    MAX_DOCUMENT_SIZE env var.
    
    Attributes:
        MAX_DOCUMENT_SIZE: Characters kept before analysis; longer text is truncated.
        MIN_SENTENCE_LENGTH: Shortest sentence counted for stats and summaries.
        MAX_SENTENCE_LENGTH: Longest sentence eligible for the summary.
        SUMMARY_MAX_SENTENCES: Number of sentences in the extractive summary.
        KEYWORD_TOP_N: Number of ranked keywords returned.
        DEFAULT_LANGUAGE: Language assumed when the page does not declare one.
        LOG_LEVEL: Logging verbosity level.
    """
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )
    
    # Input limits
    MAX_DOCUMENT_SIZE: int = Field(
        default=500_000,
        description="Maximum document length in characters"
    )
    
    # Sentence window
    MIN_SENTENCE_LENGTH: int = Field(
        default=30,
        description="Minimum sentence length in characters"
    )
    MAX_SENTENCE_LENGTH: int = Field(
        default=150,
        description="Maximum summary sentence length in characters"
    )
    
    # Extraction sizes
    SUMMARY_MAX_SENTENCES: int = Field(
        default=7,
        description="Sentences kept in the extractive summary"
    )
    KEYWORD_TOP_N: int = Field(
        default=15,
        description="Keywords returned by frequency ranking"
    )
    
    DEFAULT_LANGUAGE: str = Field(
        default="en",
        description="Fallback document language code"
    )
    
    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity"
    )
    
    @field_validator("MAX_DOCUMENT_SIZE", "SUMMARY_MAX_SENTENCES", "KEYWORD_TOP_N")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Ensure size limits are positive."""
        if v <= 0:
            raise ValueError("size limits must be positive integers")
        return v
    
    @field_validator("MAX_SENTENCE_LENGTH")
    @classmethod
    def validate_sentence_window(cls, v: int, info: ValidationInfo) -> int:
        """Ensure the sentence window is not empty."""
        minimum = info.data.get("MIN_SENTENCE_LENGTH")
        if minimum is not None and v <= minimum:
            raise ValueError(
                "MAX_SENTENCE_LENGTH must be greater than MIN_SENTENCE_LENGTH"
            )
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.
    
    Returns:
        Singleton Settings instance.
    """
    return Settings()


# Global settings instance
settings = get_settings()
