"""
Distractor sampling for multiple-choice questions.

Distractors for a question are drawn from the same face (by name) of
other cards in the pool, so every choice is the same kind of answer.
"""

import logging
import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Set

from .exceptions import InsufficientCandidatesError, NoEligibleFaceError
from .faces import (
    SubdivisionMode,
    face_variants,
    is_subdivided,
    render_face_value,
)
from .models import Card

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Distractor:
    """A wrong answer and the card it was drawn from."""

    text: str
    card: Card


def face_holders(pool: Iterable[Card], face_name: str) -> List[Card]:
    """Cards with a present `face_name` face."""
    return [card for card in pool if card.value_for(face_name) is not None]


def _shares_question(
    candidate: Card, question_face: Optional[str], question_variants: Set[str]
) -> bool:
    if question_face is None:
        return False
    return bool(question_variants.intersection(candidate.variants_for(question_face)))


def sample_distractors(
    pool: Iterable[Card],
    correct_card: Card,
    correct_face_index: int,
    count: int,
    rng: random.Random,
    *,
    correct_answer: Optional[str] = None,
    question_face_index: Optional[int] = None,
    mode: SubdivisionMode = SubdivisionMode.PICK,
) -> List[Distractor]:
    """
    Draw `count` distinct wrong answers for face `correct_face_index`.

    Candidates are visited in random order without replacement and each
    is rendered once. A text is taken when it equals the correct answer,
    any variant of the correct card's answer face, or a distractor already
    chosen. In PICK mode a subdivided candidate picks among its variants
    that are not taken; otherwise a taken rendering rejects the candidate
    and the next one is tried.

    Parameters:
        pool (Iterable[Card]): Cards to draw from; may include `correct_card`.
        correct_card (Card): The card the question is about.
        correct_face_index (int): Answer face index on `correct_card`.
        count (int): Number of distractors wanted.
        rng (random.Random): Source of randomness.
        correct_answer (Optional[str]): The rendered correct answer, if the
            caller already rendered it.
        question_face_index (Optional[int]): When given, candidates that
            share a question-face variant with `correct_card` are skipped,
            since they would also answer the question.
        mode (SubdivisionMode): How subdivided faces are rendered.

    Returns:
        List[Distractor]: Exactly `count` distractors, texts pairwise distinct.

    Raises:
        NoEligibleFaceError: No card in the pool has the answer face.
        InsufficientCandidatesError: Fewer than `count` distinct texts could
            be drawn; the partial list is on the error's `found` attribute.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}.")
    if count == 0:
        return []

    face_name = correct_card.face_names[correct_face_index]
    holders = face_holders(pool, face_name)
    if not holders:
        raise NoEligibleFaceError(face_name, correct_card.key)
    candidates = [card for card in holders if card.key != correct_card.key]

    question_face = None
    question_variants: Set[str] = set()
    if question_face_index is not None:
        question_face = correct_card.face_names[question_face_index]
        question_variants = set(
            face_variants(correct_card.value_at(question_face_index))
        )

    taken_texts: Set[str] = set(face_variants(correct_card.value_at(correct_face_index)))
    if correct_answer is not None:
        taken_texts.add(correct_answer)
    # Joined renderings are compared by content, not only by text.
    taken_variants: Set[str] = set(taken_texts)

    chosen: List[Distractor] = []
    for candidate in rng.sample(candidates, len(candidates)):
        if _shares_question(candidate, question_face, question_variants):
            logger.debug(
                "Skipping %s: same '%s' face as %s.",
                candidate.key,
                question_face,
                correct_card.key,
            )
            continue

        value = candidate.value_for(face_name)
        if mode is SubdivisionMode.PICK and is_subdivided(value):
            # Pick only among variants not already on the board.
            free = [v for v in value if v not in taken_texts]
            text = rng.choice(free) if free else None
        else:
            text = render_face_value(value, rng, mode)
        if text is None or text in taken_texts:
            continue
        variants = set(face_variants(value))
        if mode is SubdivisionMode.JOIN and variants & taken_variants:
            continue

        chosen.append(Distractor(text=text, card=candidate))
        taken_texts.add(text)
        taken_variants.update(variants)
        if len(chosen) == count:
            return chosen

    logger.debug(
        "Found %s of %s distractors for %s on face '%s'.",
        len(chosen),
        count,
        correct_card.key,
        face_name,
    )
    raise InsufficientCandidatesError(count, chosen, face_name)
