"""
This module defines the QuizSession class, the state machine that drives a
match quiz: it draws cards from the pool, builds a question for each one,
scores the answers and decides when the session is over.
"""

import logging
import random
from typing import List, Optional, Sequence, Set

from .constants import DEFAULT_CHOICE_COUNT, DEFAULT_MIN_CHOICE_COUNT
from .exceptions import (
    EmptyPoolError,
    InvalidStateTransitionError,
    QuizGenerationError,
)
from .faces import SubdivisionMode
from .models import Card, Question, QuestionOutcome, SessionResult, SessionState
from .pool import CardPool
from .question_builder import build_question

logger = logging.getLogger(__name__)


class QuizSession:
    """
    Runs one quiz session over a card pool.

    States: NotStarted -> (AwaitingQuestionBuild -> AwaitingUserChoice ->
    Scored)* -> Finished. Calling an operation in a state that does not
    allow it raises InvalidStateTransitionError.

    Card draw policy: cards are drawn in a shuffled pass without
    replacement. When a pass is used up the pool is reshuffled for the
    next one, and the card just asked is not drawn first again unless it
    is the only usable card. After a wrong answer the question card, and
    the card the wrong choice came from, are put back into the current
    pass at a random place other than the next draw. A card that cannot
    produce a question is dropped from the draw for the rest of the session.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        *,
        min_choice_count: int = DEFAULT_MIN_CHOICE_COUNT,
        question_faces: Optional[Sequence[str]] = None,
        mode: SubdivisionMode = SubdivisionMode.PICK,
    ):
        """
        Create a session in the NotStarted state.

        Parameters:
            rng (Optional[random.Random]): Source of every random choice
                made during the session. Pass a seeded instance for
                reproducible sessions; a fresh unseeded one is used if None.
            min_choice_count (int): Smallest choice count the question
                builder may fall back to when distractors run short.
            question_faces (Optional[Sequence[str]]): Face names allowed as
                question faces. None allows every face.
            mode (SubdivisionMode): How subdivided faces are rendered.
        """
        self.rng = rng if rng is not None else random.Random()
        self.min_choice_count = min_choice_count
        self.question_faces = list(question_faces) if question_faces else None
        self.mode = mode

        self._state = SessionState.NotStarted
        self._pool: Optional[CardPool] = None
        self._total_questions: Optional[int] = None
        self._choice_count = DEFAULT_CHOICE_COUNT
        self._result: Optional[SessionResult] = None
        self._question: Optional[Question] = None
        self._draw_queue: List[Card] = []
        self._unusable: Set[str] = set()
        self._last_card_key: Optional[str] = None
        self.last_outcome: Optional[QuestionOutcome] = None

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def pool(self) -> Optional[CardPool]:
        return self._pool

    @property
    def deck_count(self) -> int:
        return self._pool.deck_count if self._pool is not None else 0

    @property
    def card_count(self) -> int:
        return self._pool.card_count if self._pool is not None else 0

    @property
    def total_questions(self) -> Optional[int]:
        return self._total_questions

    @property
    def choice_count(self) -> int:
        return self._choice_count

    @property
    def asked(self) -> int:
        """Questions answered so far."""
        return self._result.total if self._result is not None else 0

    @property
    def remaining(self) -> Optional[int]:
        """Questions left in the quota; None for an unlimited session."""
        if self._total_questions is None:
            return None
        return max(self._total_questions - self.asked, 0)

    @property
    def progress(self) -> float:
        """Fraction of the quota answered. Without a quota: 1.0 once finished, else 0.0."""
        if not self._total_questions:
            return 1.0 if self._state is SessionState.Finished else 0.0
        return self.asked / self._total_questions

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def _require(self, operation: str, *allowed: SessionState) -> None:
        if self._state not in allowed:
            raise InvalidStateTransitionError(operation, self._state)

    def start(
        self,
        pool: CardPool,
        total_questions: Optional[int],
        choice_count: int = DEFAULT_CHOICE_COUNT,
        decks: Optional[Sequence[str]] = None,
    ) -> None:
        """
        Start the session and build the first question.

        Parameters:
            pool (CardPool): Cards to quiz on and to draw distractors from.
            total_questions (Optional[int]): Question quota. 0 finishes the
                session at once; None runs until finish() is called.
            choice_count (int): Choices per question, correct one included.
            decks (Optional[Sequence[str]]): Restrict the session to these
                decks of the pool. None uses every deck.

        Raises:
            InvalidStateTransitionError: If the session was already started.
            ValueError: If a count is out of range.
            UnknownDeckError: If `decks` names a deck not in the pool.
            EmptyPoolError: If a positive quota meets an empty pool.
            QuizGenerationError: If no card in the pool can produce a
                question. The session is Finished afterwards.
        """
        self._require("start", SessionState.NotStarted)
        if total_questions is not None and total_questions < 0:
            raise ValueError(
                f"total_questions must be non-negative, got {total_questions}."
            )
        if choice_count < 1:
            raise ValueError(f"choice_count must be at least 1, got {choice_count}.")

        scoped_pool = pool.scoped(decks)
        if scoped_pool.is_empty and total_questions != 0:
            raise EmptyPoolError("Cannot start a quiz on a pool with no cards.")

        self._pool = scoped_pool
        self._total_questions = total_questions
        self._choice_count = choice_count
        self._result = SessionResult()
        logger.info(
            "Starting quiz: %s questions, %s choices, %s cards from %s decks.",
            "unlimited" if total_questions is None else total_questions,
            choice_count,
            scoped_pool.card_count,
            scoped_pool.deck_count,
        )

        if total_questions == 0:
            self._finish()
            return

        self._build_next_question()

    def current_question(self) -> Question:
        """The question awaiting an answer."""
        self._require("current_question", SessionState.AwaitingUserChoice)
        assert self._question is not None
        return self._question

    def submit_answer(self, choice: str) -> bool:
        """
        Score `choice` against the current question and advance.

        The comparison is exact text equality with the correct answer.
        After scoring, the next question is built, or the session finishes
        when the quota has been reached.

        Returns:
            bool: True if the answer was correct.
        """
        self._require("submit_answer", SessionState.AwaitingUserChoice)
        assert self._question is not None and self._result is not None

        question = self._question
        outcome = self._result.record(question, choice)
        self.last_outcome = outcome
        self._question = None
        self._state = SessionState.Scored
        logger.debug(
            "Answered %s: %s",
            outcome.card_key,
            "correct" if outcome.was_correct else "incorrect",
        )

        if self.remaining == 0:
            self._finish()
            return outcome.was_correct

        if not outcome.was_correct:
            self._requeue_missed(question, choice)
        self._build_next_question()
        return outcome.was_correct

    def finish(self) -> SessionResult:
        """End an in-progress session early, e.g. when the user quits."""
        if not self._state.in_progress:
            raise InvalidStateTransitionError("finish", self._state)
        self._finish()
        assert self._result is not None
        return self._result

    def summary(self) -> SessionResult:
        """The final result. Valid once the session has finished."""
        self._require("summary", SessionState.Finished)
        assert self._result is not None
        return self._result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _finish(self) -> None:
        self._question = None
        self._state = SessionState.Finished
        if self._result is not None:
            self._result.end()
            logger.info(
                "Quiz finished: %s of %s correct.",
                self._result.correct,
                self._result.total,
            )

    def _usable_cards(self) -> List[Card]:
        assert self._pool is not None
        return [card for card in self._pool if card.key not in self._unusable]

    def _refill_draw_queue(self, usable: List[Card]) -> None:
        order = self.rng.sample(usable, len(usable))
        # The queue is popped from the end.
        if len(order) > 1 and order[-1].key == self._last_card_key:
            order[0], order[-1] = order[-1], order[0]
        self._draw_queue = order

    def _requeue_missed(self, question: Question, choice: str) -> None:
        missed = [question.card]
        if choice in question.choices:
            missed.append(question.choice_cards[question.choices.index(choice)])

        if not self._draw_queue:
            self._refill_draw_queue(self._usable_cards())
        for card in missed:
            queued = {queued_card.key for queued_card in self._draw_queue}
            if card.key in self._unusable or card.key in queued:
                continue
            # Never the last slot, which is the next draw.
            position = self.rng.randint(0, max(len(self._draw_queue) - 1, 0))
            self._draw_queue.insert(position, card)
            logger.debug("Re-queued %s after a wrong answer.", card.key)

    def _draw_card(self) -> Optional[Card]:
        while True:
            if not self._draw_queue:
                usable = self._usable_cards()
                if not usable:
                    return None
                self._refill_draw_queue(usable)
            card = self._draw_queue.pop()
            if card.key not in self._unusable:
                return card

    def _build_next_question(self) -> None:
        self._state = SessionState.AwaitingQuestionBuild
        last_error: Optional[QuizGenerationError] = None

        while (card := self._draw_card()) is not None:
            try:
                question = build_question(
                    card,
                    self._pool,
                    self._choice_count,
                    self.rng,
                    min_choice_count=self.min_choice_count,
                    question_faces=self.question_faces,
                    mode=self.mode,
                )
            except QuizGenerationError as e:
                logger.warning(
                    "Dropping card %s from this session: %s", card.key, e
                )
                self._unusable.add(card.key)
                last_error = e
                continue

            self._question = question
            self._last_card_key = card.key
            self._state = SessionState.AwaitingUserChoice
            logger.debug(
                "Next question from %s: '%s' -> '%s' (%s choices).",
                card.key,
                question.question_face,
                question.answer_face,
                question.choice_count,
            )
            return

        self._finish()
        if last_error is not None:
            raise last_error
        raise QuizGenerationError("No card in the pool can produce a question.")
