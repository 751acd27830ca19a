"""
Centralized configuration management for flashmatch.

Settings are read from FLASHMATCH_* environment variables or a .env file.
Command line options override them per invocation.
"""

from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_CHOICE_COUNT, DEFAULT_MIN_CHOICE_COUNT
from .faces import SubdivisionMode


class QuizSettings(BaseSettings):
    """
    Defines quiz defaults, loaded from environment variables or .env files.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLASHMATCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Choices per question, correct answer included. FLASHMATCH_CHOICE_COUNT
    choice_count: int = Field(default=DEFAULT_CHOICE_COUNT, ge=1)

    # Smallest count the builder may fall back to. FLASHMATCH_MIN_CHOICE_COUNT
    min_choice_count: int = Field(default=DEFAULT_MIN_CHOICE_COUNT, ge=1)

    # None runs until the user quits. FLASHMATCH_QUESTION_COUNT
    question_count: Optional[int] = Field(default=None, ge=0)

    # Seed for reproducible sessions. FLASHMATCH_SEED
    seed: Optional[int] = None

    subdivision_mode: SubdivisionMode = SubdivisionMode.PICK

    @field_validator("subdivision_mode", mode="before")
    @classmethod
    def normalize_mode(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @model_validator(mode="after")
    def check_choice_bounds(self) -> "QuizSettings":
        if self.min_choice_count > self.choice_count:
            raise ValueError(
                f"min_choice_count ({self.min_choice_count}) cannot exceed "
                f"choice_count ({self.choice_count})."
            )
        return self


def get_settings(**overrides) -> QuizSettings:
    """Build settings from the environment, applying keyword overrides."""
    return QuizSettings(**overrides)
