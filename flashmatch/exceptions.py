from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence


class FlashmatchError(Exception):
    """Base exception for all flashmatch errors."""

    pass


# --- Load-time errors ---


@dataclass(eq=False)
class DeckError(FlashmatchError):
    """A deck was rejected while loading or validating.

    Fatal for the deck it describes, never for the whole load.
    """

    message: str
    deck_name: Optional[str] = None
    source: Optional[Path] = None
    card_index: Optional[int] = None
    face_index: Optional[int] = None

    def __str__(self) -> str:
        context_parts = []
        if self.source is not None:
            context_parts.append(f"File: {Path(self.source).name}")
        if self.deck_name:
            context_parts.append(f"Deck: '{self.deck_name}'")
        if self.card_index is not None:
            context_parts.append(f"Card Index: {self.card_index}")
        if self.face_index is not None:
            context_parts.append(f"Face Index: {self.face_index}")
        context_parts.append(f"Error: {self.message}")
        return " | ".join(context_parts)


class MalformedDeckError(DeckError):
    """Raw deck data does not have the expected shape."""

    pass


class EmptyFaceListError(DeckError):
    """Deck declares fewer than two faces."""

    pass


class DuplicateFaceError(DeckError):
    """Deck declares the same face name more than once."""

    pass


class FaceCountMismatchError(DeckError):
    """A card's slot count differs from the deck's face count."""

    pass


class CardTooSparseError(DeckError):
    """A card has fewer than two present faces."""

    pass


class EmptySubdivisionError(DeckError):
    """A subdivided face has no variants."""

    pass


class DuplicateDeckNameError(DeckError):
    """Two loaded decks share a name."""

    pass


class DeckFileError(DeckError):
    """A deck file could not be read or decoded."""

    pass


# --- Generation-time errors ---


class QuizGenerationError(FlashmatchError):
    """A question could not be generated. Recoverable."""

    pass


class InsufficientCandidatesError(QuizGenerationError):
    """Fewer distinct distractors exist than were requested."""

    def __init__(self, requested: int, found: Sequence[Any], face_name: str):
        super().__init__(
            f"Only {len(found)} distinct distractor(s) for face "
            f"'{face_name}', {requested} requested."
        )
        self.requested = requested
        self.found: List[Any] = list(found)
        self.face_name = face_name


class NoEligibleFaceError(QuizGenerationError):
    """No card in the pool has the requested face."""

    def __init__(self, face_name: str, card_key: str):
        super().__init__(
            f"No card in the pool has a '{face_name}' face "
            f"(needed for card {card_key})."
        )
        self.face_name = face_name
        self.card_key = card_key


# --- Contract errors ---


class ContractError(FlashmatchError):
    """The engine was called incorrectly. Not recoverable."""

    pass


class InvalidStateTransitionError(ContractError):
    """An operation was called in a session state that does not allow it."""

    def __init__(self, operation: str, state: Any):
        state_name = getattr(state, "value", state)
        super().__init__(
            f"Cannot call '{operation}' while session is '{state_name}'."
        )
        self.operation = operation
        self.state = state


class CardHasInsufficientFacesError(ContractError):
    """A card reached the question builder without two usable faces."""

    def __init__(self, card_key: str, detail: str = ""):
        message = f"Card {card_key} has fewer than two usable faces."
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)
        self.card_key = card_key


class EmptyPoolError(ContractError):
    """A session with a question quota was started on an empty pool."""

    pass


class UnknownDeckError(ContractError):
    """Deck scoping named a deck the pool does not hold."""

    def __init__(self, deck_names: Sequence[str]):
        names = ", ".join(f"'{name}'" for name in deck_names)
        super().__init__(f"Unknown deck(s): {names}.")
        self.deck_names = list(deck_names)
