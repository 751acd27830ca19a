"""
Defines the raw deck models and the dataclasses used while loading decks.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from pydantic import BaseModel as PydanticBaseModel, ConfigDict, Field, StrictStr

# --- Internal Pydantic Models for Raw Deck Validation ---

# null -> absent, "text" -> single, ["text", ...] -> subdivided
RawFaceValue = Optional[Union[StrictStr, List[StrictStr]]]


class _RawDeckFile(PydanticBaseModel):
    name: Optional[StrictStr] = Field(default=None)
    faces: List[StrictStr] = Field(...)
    cards: List[List[RawFaceValue]] = Field(...)

    model_config = ConfigDict(extra="ignore")


# --- Dataclasses for Validation Context and Loader Configuration ---


@dataclass
class _DeckValidationContext:
    """Holds what every error raised for one deck needs to report."""

    deck_name: str
    source: Optional[Path]


@dataclass
class DeckLoaderConfig:
    """Configuration for loading deck files."""

    fail_fast: bool = False
    recursive: bool = True
    default_deck_name: str = "Untitled Deck"


RawDeckSource = Union[str, Path]
