"""
Builds one multiple-choice Question from a card and the card pool.
"""

import logging
import random
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from .constants import DEFAULT_MIN_CHOICE_COUNT, MIN_FACE_COUNT
from .distractors import Distractor, sample_distractors
from .exceptions import (
    CardHasInsufficientFacesError,
    InsufficientCandidatesError,
    NoEligibleFaceError,
    QuizGenerationError,
)
from .faces import SubdivisionMode, resolve_face
from .models import Card, Question

logger = logging.getLogger(__name__)


@dataclass
class _Attempt:
    """A face pair that produced fewer distractors than requested."""

    question_face_index: int
    answer_face_index: int
    question_text: str
    answer_text: str
    distractors: List[Distractor]


def face_pairs(
    card: Card, question_faces: Optional[Sequence[str]] = None
) -> List[Tuple[int, int]]:
    """
    Ordered (question, answer) pairs of distinct present faces of `card`.

    When `question_faces` is given, only pairs whose question face is one
    of those names are returned.
    """
    present = card.present_face_indices()
    return [
        (q, a)
        for q in present
        for a in present
        if q != a and (not question_faces or card.face_names[q] in question_faces)
    ]


def _assemble(
    card: Card,
    question_face_index: int,
    answer_face_index: int,
    question_text: str,
    answer_text: str,
    distractors: List[Distractor],
    requested_choice_count: int,
    rng: random.Random,
) -> Question:
    entries = [(answer_text, card)] + [(d.text, d.card) for d in distractors]
    rng.shuffle(entries)
    return Question(
        card=card,
        question_face_index=question_face_index,
        answer_face_index=answer_face_index,
        question_face=card.face_names[question_face_index],
        answer_face=card.face_names[answer_face_index],
        question_text=question_text,
        answer_text=answer_text,
        choices=tuple(text for text, _ in entries),
        choice_cards=tuple(source for _, source in entries),
        requested_choice_count=requested_choice_count,
    )


def build_question(
    card: Card,
    pool: Iterable[Card],
    choice_count: int,
    rng: random.Random,
    *,
    min_choice_count: int = DEFAULT_MIN_CHOICE_COUNT,
    question_faces: Optional[Sequence[str]] = None,
    mode: SubdivisionMode = SubdivisionMode.PICK,
) -> Question:
    """
    Build a question about `card` with `choice_count` choices.

    The (question, answer) face pair is drawn uniformly from the ordered
    pairs of distinct present faces. If that pair cannot produce enough
    distractors the remaining pairs are tried in random order. If none
    can, the pair with the most distractors is used with a reduced choice
    count, as long as that count is at least `min_choice_count`.

    Parameters:
        card (Card): The card to ask about.
        pool (Iterable[Card]): Source of distractors.
        choice_count (int): Choices wanted, correct answer included.
        rng (random.Random): Source of randomness.
        min_choice_count (int): Smallest acceptable reduced choice count.
        question_faces (Optional[Sequence[str]]): Face names allowed as the
            question face. None allows every face.
        mode (SubdivisionMode): How subdivided faces are rendered.

    Returns:
        Question: The assembled question, choices in shuffled order.

    Raises:
        ValueError: If a count is below 1.
        CardHasInsufficientFacesError: If the card has fewer than two
            present faces.
        QuizGenerationError: If no present face matches `question_faces`.
        InsufficientCandidatesError: If even the best pair falls below
            `min_choice_count`.
        NoEligibleFaceError: If no pair had any candidate answer face.
    """
    if choice_count < 1:
        raise ValueError(f"choice_count must be at least 1, got {choice_count}.")
    if min_choice_count < 1:
        raise ValueError(
            f"min_choice_count must be at least 1, got {min_choice_count}."
        )

    if len(card.present_face_indices()) < MIN_FACE_COUNT:
        raise CardHasInsufficientFacesError(card.key)

    pairs = face_pairs(card, question_faces)
    if not pairs:
        raise QuizGenerationError(
            f"Card {card.key} has none of the question faces "
            f"{list(question_faces or [])}."
        )

    pool = list(pool)
    best: Optional[_Attempt] = None
    insufficient: Optional[InsufficientCandidatesError] = None
    no_eligible: Optional[NoEligibleFaceError] = None

    for question_face_index, answer_face_index in rng.sample(pairs, len(pairs)):
        question_text = resolve_face(card, question_face_index, rng, mode)
        answer_text = resolve_face(card, answer_face_index, rng, mode)
        if question_text is None or answer_text is None:
            raise CardHasInsufficientFacesError(
                card.key, "A present face resolved to nothing."
            )

        try:
            distractors = sample_distractors(
                pool,
                card,
                answer_face_index,
                choice_count - 1,
                rng,
                correct_answer=answer_text,
                question_face_index=question_face_index,
                mode=mode,
            )
        except InsufficientCandidatesError as e:
            insufficient = e
            if best is None or len(e.found) > len(best.distractors):
                best = _Attempt(
                    question_face_index,
                    answer_face_index,
                    question_text,
                    answer_text,
                    list(e.found),
                )
            continue
        except NoEligibleFaceError as e:
            no_eligible = e
            continue

        return _assemble(
            card,
            question_face_index,
            answer_face_index,
            question_text,
            answer_text,
            distractors,
            choice_count,
            rng,
        )

    if best is not None and 1 + len(best.distractors) >= min_choice_count:
        logger.debug(
            "Reducing choices for %s from %s to %s.",
            card.key,
            choice_count,
            1 + len(best.distractors),
        )
        return _assemble(
            card,
            best.question_face_index,
            best.answer_face_index,
            best.question_text,
            best.answer_text,
            best.distractors,
            choice_count,
            rng,
        )

    if insufficient is not None:
        raise insufficient
    if no_eligible is not None:
        raise no_eligible
    raise QuizGenerationError(f"Card {card.key} could not produce a question.")
