"""
Face resolution: turning one slot of a card into display text.

A slot is absent (None), a single string, or a tuple of variant strings.
Every random choice goes through the `random.Random` passed in by the
caller, so seeded sessions replay exactly.
"""

from __future__ import annotations

import random
from enum import Enum
from typing import TYPE_CHECKING, Optional, Tuple, Union

from .constants import COMMA_FACE_SEPARATOR, DEFAULT_FACE_SEPARATOR

if TYPE_CHECKING:
    from .models import Card

FaceValue = Optional[Union[str, Tuple[str, ...]]]


class SubdivisionMode(str, Enum):
    """How a subdivided face is rendered when shown in a question."""

    PICK = "pick"  # one variant, chosen uniformly
    JOIN = "join"  # every variant, shuffled and joined


def is_present(value: FaceValue) -> bool:
    return value is not None


def is_subdivided(value: FaceValue) -> bool:
    return isinstance(value, tuple)


def face_variants(value: FaceValue) -> Tuple[str, ...]:
    """All texts a slot can render to; empty for an absent slot."""
    if value is None:
        return ()
    if isinstance(value, tuple):
        return value
    return (value,)


def infer_separator(value: FaceValue) -> str:
    """Use '; ' when any variant already contains a comma."""
    if any("," in variant for variant in face_variants(value)):
        return COMMA_FACE_SEPARATOR
    return DEFAULT_FACE_SEPARATOR


def join_face(value: FaceValue, sep: str) -> str:
    return sep.join(face_variants(value))


def format_face(value: FaceValue) -> str:
    """Full, deterministic rendering of a slot (all variants, in order)."""
    return join_face(value, infer_separator(value))


def render_face_value(
    value: FaceValue,
    rng: random.Random,
    mode: SubdivisionMode = SubdivisionMode.PICK,
) -> Optional[str]:
    """
    Render a raw slot value to display text.

    Parameters:
        value (FaceValue): None, a string, or a non-empty tuple of variants.
        rng (random.Random): Source of randomness for subdivided values.
        mode (SubdivisionMode): PICK returns one variant chosen uniformly;
            JOIN returns every variant in shuffled order, joined with the
            inferred separator.

    Returns:
        Optional[str]: None for an absent slot, otherwise the rendered text.
    """
    if value is None:
        return None
    if not isinstance(value, tuple):
        return value
    if mode is SubdivisionMode.JOIN:
        variants = list(value)
        rng.shuffle(variants)
        return infer_separator(value).join(variants)
    return rng.choice(value)


def resolve_face(
    card: "Card",
    face_index: int,
    rng: random.Random,
    mode: SubdivisionMode = SubdivisionMode.PICK,
) -> Optional[str]:
    """Render face `face_index` of `card`, or None if that slot is absent."""
    return render_face_value(card.value_at(face_index), rng, mode)
