"""
Pydantic models for decks, cards, questions and session results.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .constants import MIN_FACE_COUNT
from .faces import FaceValue, face_variants, format_face, is_present


class SessionState(str, Enum):
    """
    Lifecycle of a quiz session.

    AwaitingQuestionBuild and Scored are passed through inside a single
    call; callers normally only observe the other three.
    """

    NotStarted = "not_started"
    AwaitingQuestionBuild = "awaiting_question_build"
    AwaitingUserChoice = "awaiting_user_choice"
    Scored = "scored"
    Finished = "finished"

    @property
    def in_progress(self) -> bool:
        return self in (
            SessionState.AwaitingQuestionBuild,
            SessionState.AwaitingUserChoice,
            SessionState.Scored,
        )


class Card(BaseModel):
    """
    One validated card: a value per face of its deck.

    Cards are immutable and shared by reference between the pool, the
    questions built from them and the session log.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    deck_name: str = Field(..., description="Name of the owning deck.")
    index: int = Field(..., ge=0, description="Position in the deck.")
    face_names: Tuple[str, ...] = Field(
        ..., description="The owning deck's face names, in order."
    )
    values: Tuple[FaceValue, ...] = Field(
        ..., description="One slot per face: None, text, or variants."
    )

    @model_validator(mode="after")
    def check_slots(self) -> "Card":
        if len(self.values) != len(self.face_names):
            raise ValueError(
                f"Card has {len(self.values)} slots but the deck has "
                f"{len(self.face_names)} faces."
            )
        if sum(1 for value in self.values if is_present(value)) < MIN_FACE_COUNT:
            raise ValueError(
                f"Card needs at least {MIN_FACE_COUNT} present faces."
            )
        if any(isinstance(value, tuple) and not value for value in self.values):
            raise ValueError("Subdivided faces need at least one variant.")
        return self

    @property
    def key(self) -> str:
        """Identity of the card within a pool: '<deck>:<index>'."""
        return f"{self.deck_name}:{self.index}"

    def value_at(self, face_index: int) -> FaceValue:
        return self.values[face_index]

    def face_index(self, face_name: str) -> Optional[int]:
        try:
            return self.face_names.index(face_name)
        except ValueError:
            return None

    def value_for(self, face_name: str) -> FaceValue:
        """Slot for a face name; None when absent or the deck lacks it."""
        index = self.face_index(face_name)
        if index is None:
            return None
        return self.values[index]

    def variants_for(self, face_name: str) -> Tuple[str, ...]:
        return face_variants(self.value_for(face_name))

    def present_face_indices(self) -> List[int]:
        return [i for i, value in enumerate(self.values) if is_present(value)]

    def format_face(self, face_index: int) -> str:
        return format_face(self.values[face_index])

    @property
    def front(self) -> str:
        """The first present face, shown in full."""
        return self.format_face(self.present_face_indices()[0])

    def describe(self, sep: str = "\n") -> str:
        """Every present face as 'Name: text', one per line."""
        return sep.join(
            f"{self.face_names[i]}: {self.format_face(i)}"
            for i in self.present_face_indices()
        )


class Deck(BaseModel):
    """A validated deck. Produced only by the deck validator."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    faces: Tuple[str, ...] = Field(..., min_length=MIN_FACE_COUNT)
    cards: Tuple[Card, ...] = Field(default_factory=tuple)
    source: Optional[Path] = Field(
        default=None, description="File the deck was loaded from."
    )

    def __len__(self) -> int:
        return len(self.cards)


class Question(BaseModel):
    """
    A single multiple-choice question built for one turn of a session.

    `choices` holds the correct answer and the distractors in display
    order; `choice_cards` holds the card each choice came from, in the
    same order, so a UI can reveal the full cards after an answer.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    card: Card
    question_face_index: int = Field(..., ge=0)
    answer_face_index: int = Field(..., ge=0)
    question_face: str
    answer_face: str
    question_text: str
    answer_text: str
    choices: Tuple[str, ...] = Field(..., min_length=1)
    choice_cards: Tuple[Card, ...] = Field(..., min_length=1)
    requested_choice_count: int = Field(..., ge=1)

    @model_validator(mode="after")
    def check_choices(self) -> "Question":
        if self.question_face_index == self.answer_face_index:
            raise ValueError("Question and answer faces must differ.")
        if len(set(self.choices)) != len(self.choices):
            raise ValueError("Choices must be pairwise distinct.")
        if self.answer_text not in self.choices:
            raise ValueError("Choices must include the correct answer.")
        if len(self.choice_cards) != len(self.choices):
            raise ValueError("Every choice needs its source card.")
        return self

    @property
    def answer_index(self) -> int:
        return self.choices.index(self.answer_text)

    @property
    def choice_count(self) -> int:
        return len(self.choices)

    @property
    def is_reduced(self) -> bool:
        """True when the builder fell back to fewer choices than requested."""
        return self.choice_count < self.requested_choice_count

    def is_correct(self, choice: str) -> bool:
        return choice == self.answer_text


class QuestionOutcome(BaseModel):
    """Log entry for one answered question."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    card_key: str
    deck_name: str
    question_text: str
    correct_answer: str
    chosen_answer: str
    was_correct: bool


class SessionResult(BaseModel):
    """
    Running score of a quiz session.

    Created when the session starts, updated after every answer and read
    once the session has finished.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    total: int = Field(default=0, ge=0, description="Questions answered.")
    correct: int = Field(default=0, ge=0, description="Correct answers.")
    outcomes: List[QuestionOutcome] = Field(default_factory=list)
    started_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="UTC timestamp when the session started.",
    )
    ended_at: Optional[datetime] = Field(
        default=None,
        description="UTC timestamp when the session finished.",
    )

    def record(self, question: Question, choice: str) -> QuestionOutcome:
        """Score `choice` against `question` and append it to the log."""
        was_correct = question.is_correct(choice)
        outcome = QuestionOutcome(
            card_key=question.card.key,
            deck_name=question.card.deck_name,
            question_text=question.question_text,
            correct_answer=question.answer_text,
            chosen_answer=choice,
            was_correct=was_correct,
        )
        self.outcomes.append(outcome)
        self.total += 1
        if was_correct:
            self.correct += 1
        return outcome

    def end(self) -> None:
        if self.ended_at is None:
            self.ended_at = datetime.now(timezone.utc)

    @property
    def incorrect(self) -> int:
        return self.total - self.correct

    @property
    def accuracy(self) -> float:
        if self.total == 0:
            return 0.0
        return self.correct / self.total

    @property
    def duration_ms(self) -> Optional[int]:
        if self.ended_at is None:
            return None
        return int((self.ended_at - self.started_at).total_seconds() * 1000)
