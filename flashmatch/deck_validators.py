"""
Houses the validation functions that turn raw deck data into a Deck.

Validation is pure and deterministic. It stops at the first violation,
scanning cards by ascending index and faces by ascending index within a
card, and raises the matching DeckError subclass.
"""

from pathlib import Path
from typing import Any, Dict, Hashable, Iterable, List, Optional, Sequence, Set, Tuple

from pydantic import ValidationError

from .constants import MIN_FACE_COUNT
from .deck_models import RawFaceValue, _DeckValidationContext, _RawDeckFile
from .exceptions import (
    CardTooSparseError,
    DeckError,
    DuplicateDeckNameError,
    DuplicateFaceError,
    EmptyFaceListError,
    EmptySubdivisionError,
    FaceCountMismatchError,
    MalformedDeckError,
)
from .faces import FaceValue
from .models import Card, Deck


def _preview_name(raw_deck: Any) -> Optional[str]:
    if isinstance(raw_deck, dict) and isinstance(raw_deck.get("name"), str):
        return raw_deck["name"]
    return None


def parse_raw_deck(raw_deck: Any, source: Optional[Path] = None) -> _RawDeckFile:
    """
    Check the shape of a decoded deck file with the raw Pydantic model.

    Raises:
        MalformedDeckError: If the value is not a mapping, or a field has
            the wrong type. The first reported field is named in the
            message and, for card entries, the card/face index is set.
    """
    if not isinstance(raw_deck, dict):
        raise MalformedDeckError(
            f"Top level of a deck must be an object, got "
            f"{type(raw_deck).__name__}.",
            source=source,
        )

    try:
        return _RawDeckFile.model_validate(raw_deck)
    except ValidationError as e:
        error_details = e.errors()[0]
        loc = error_details["loc"]
        field = ".".join(map(str, loc))
        card_index = None
        face_index = None
        if len(loc) > 1 and loc[0] == "cards" and isinstance(loc[1], int):
            card_index = loc[1]
            if len(loc) > 2 and isinstance(loc[2], int):
                face_index = loc[2]
        raise MalformedDeckError(
            f"Validation error in field '{field}': {error_details['msg']}",
            deck_name=_preview_name(raw_deck),
            source=source,
            card_index=card_index,
            face_index=face_index,
        ) from e


def resolve_deck_name(
    raw: _RawDeckFile,
    source: Optional[Path],
    default_name: str,
) -> str:
    """Deck name from the file, else the file stem, else `default_name`."""
    if raw.name is not None and raw.name.strip():
        return raw.name.strip()
    if source is not None:
        return Path(source).stem
    return default_name


def check_face_names(faces: Sequence[str], context: _DeckValidationContext) -> None:
    if len(faces) < MIN_FACE_COUNT:
        raise EmptyFaceListError(
            f"Deck needs at least {MIN_FACE_COUNT} faces, has {len(faces)}.",
            deck_name=context.deck_name,
            source=context.source,
        )

    seen = set()
    for face_index, face in enumerate(faces):
        if face in seen:
            raise DuplicateFaceError(
                f"Face '{face}' is declared more than once.",
                deck_name=context.deck_name,
                source=context.source,
                face_index=face_index,
            )
        seen.add(face)


def convert_slot(slot: RawFaceValue) -> FaceValue:
    """Raw JSON slot to its model value: lists become tuples."""
    if isinstance(slot, list):
        return tuple(slot)
    return slot


def validate_card(
    raw_card: List[RawFaceValue],
    card_index: int,
    faces: Sequence[str],
    context: _DeckValidationContext,
) -> Card:
    """Validate one raw card and build its Card."""
    if len(raw_card) != len(faces):
        relation = "too many" if len(raw_card) > len(faces) else "not enough"
        raise FaceCountMismatchError(
            f"Card has {relation} faces. Has {len(raw_card)}, "
            f"needs {len(faces)}.",
            deck_name=context.deck_name,
            source=context.source,
            card_index=card_index,
        )

    present = sum(1 for slot in raw_card if slot is not None)
    if present < MIN_FACE_COUNT:
        raise CardTooSparseError(
            f"Card does not have enough usable (non-null) faces. "
            f"Has {present}, needs {MIN_FACE_COUNT}.",
            deck_name=context.deck_name,
            source=context.source,
            card_index=card_index,
        )

    for face_index, slot in enumerate(raw_card):
        if isinstance(slot, list) and not slot:
            raise EmptySubdivisionError(
                f"Face '{faces[face_index]}' is subdivided but has no variants.",
                deck_name=context.deck_name,
                source=context.source,
                card_index=card_index,
                face_index=face_index,
            )

    return Card(
        deck_name=context.deck_name,
        index=card_index,
        face_names=tuple(faces),
        values=tuple(convert_slot(slot) for slot in raw_card),
    )


def validate_deck(
    raw_deck: Any,
    source: Optional[Path] = None,
    default_name: str = "Untitled Deck",
) -> Deck:
    """
    Validate decoded deck data and build an immutable Deck.

    Parameters:
        raw_deck (Any): The decoded deck file (expected to be a dict with
            'name', 'faces' and 'cards').
        source (Optional[Path]): File the data came from, for error reports.
        default_name (str): Name used when the deck has none and there is
            no source file to take a name from.

    Returns:
        Deck: The validated deck. A deck with no cards is valid.

    Raises:
        DeckError: The first violation found. See exceptions.py for the
            subclasses.
    """
    source = Path(source) if source is not None else None
    raw = parse_raw_deck(raw_deck, source)
    context = _DeckValidationContext(
        deck_name=resolve_deck_name(raw, source, default_name),
        source=source,
    )

    check_face_names(raw.faces, context)

    cards = tuple(
        validate_card(raw_card, card_index, raw.faces, context)
        for card_index, raw_card in enumerate(raw.cards)
    )

    return Deck(
        name=context.deck_name,
        faces=tuple(raw.faces),
        cards=cards,
        source=source,
    )


def validate_raw_decks(
    raw_decks: Iterable[Tuple[Hashable, Any]],
    default_name: str = "Untitled Deck",
    fail_fast: bool = False,
) -> Tuple[List[Deck], Dict[Hashable, DeckError]]:
    """
    Validate several decoded decks, keeping the valid ones.

    Parameters:
        raw_decks: Pairs of (source identity, decoded deck). A source that
            is a str or Path is also used as the deck's file for naming
            and error context.
        default_name (str): Name for decks with neither name nor file.
        fail_fast (bool): Raise the first error instead of collecting.

    Returns:
        Tuple[List[Deck], Dict[Hashable, DeckError]]: Valid decks in input
        order, and the error for each rejected source. A deck whose name
        duplicates an earlier valid deck is rejected with
        DuplicateDeckNameError.
    """
    decks: List[Deck] = []
    errors: Dict[Hashable, DeckError] = {}
    seen_names: Set[str] = set()

    for source_id, raw_deck in raw_decks:
        source = Path(source_id) if isinstance(source_id, (str, Path)) else None
        try:
            deck = validate_deck(raw_deck, source=source, default_name=default_name)
            if deck.name in seen_names:
                raise DuplicateDeckNameError(
                    "At least two decks loaded have the same name.",
                    deck_name=deck.name,
                    source=source,
                )
        except DeckError as e:
            if fail_fast:
                raise
            errors[source_id] = e
            continue
        seen_names.add(deck.name)
        decks.append(deck)

    return decks, errors
