"""Flashmatch - a multiple-choice flashcard quiz engine."""

from .models import Card, Deck, Question, QuestionOutcome, SessionResult, SessionState
from .faces import SubdivisionMode, resolve_face
from .deck_validators import validate_deck, validate_raw_decks
from .distractors import sample_distractors
from .question_builder import build_question
from .pool import CardPool
from .quiz_session import QuizSession
from .loader import load_decks
from .config import QuizSettings, get_settings

__all__ = [
    "Card",
    "Deck",
    "Question",
    "QuestionOutcome",
    "SessionResult",
    "SessionState",
    "SubdivisionMode",
    "resolve_face",
    "validate_deck",
    "validate_raw_decks",
    "sample_distractors",
    "build_question",
    "CardPool",
    "QuizSession",
    "load_decks",
    "QuizSettings",
    "get_settings",
]
