import pytest
from pydantic import ValidationError

from flashmatch.models import (
    Card,
    Deck,
    Question,
    SessionResult,
    SessionState,
)


# --- Card Model Tests ---


def test_card_key_and_lookups(make_card):
    card = make_card(["Q", ["A1", "A2"]], deck_name="Deck", index=3)
    assert card.key == "Deck:3"
    assert card.face_index("Back") == 1
    assert card.face_index("Missing") is None
    assert card.value_for("Back") == ("A1", "A2")
    assert card.value_for("Missing") is None
    assert card.variants_for("Front") == ("Q",)
    assert card.variants_for("Missing") == ()


def test_card_list_values_become_tuples():
    card = Card(
        deck_name="D",
        index=0,
        face_names=("Front", "Back"),
        values=("Q", ["A1", "A2"]),
    )
    assert card.values[1] == ("A1", "A2")


def test_card_rejects_slot_count_mismatch():
    with pytest.raises(ValidationError, match="slots but the deck has"):
        Card(deck_name="D", index=0, face_names=("Front", "Back"), values=("Q",))


def test_card_rejects_fewer_than_two_present_faces():
    with pytest.raises(ValidationError, match="at least 2 present faces"):
        Card(
            deck_name="D",
            index=0,
            face_names=("Front", "Back", "Extra"),
            values=("Q", None, None),
        )


def test_card_rejects_empty_subdivision():
    with pytest.raises(ValidationError, match="at least one variant"):
        Card(deck_name="D", index=0, face_names=("Front", "Back"), values=("Q", ()))


def test_card_is_frozen(make_card):
    card = make_card(["Q", "A"])
    with pytest.raises(ValidationError):
        card.index = 5


def test_card_describe_skips_absent_faces(make_card):
    card = make_card(
        [None, "Middle", ["B1", "B2"]], faces=["Front", "Middle", "Back"]
    )
    assert card.present_face_indices() == [1, 2]
    assert card.front == "Middle"
    assert card.describe() == "Middle: Middle\nBack: B1, B2"


def test_card_format_face_uses_semicolon_when_variants_have_commas(make_card):
    card = make_card(["Q", ["Back 3,1", "Back 3,2"]])
    assert card.format_face(1) == "Back 3,1; Back 3,2"


# --- Deck Model Tests ---


def test_deck_requires_two_faces():
    with pytest.raises(ValidationError):
        Deck(name="D", faces=("Only",))


def test_deck_len(capitals_deck):
    assert len(capitals_deck) == 5


# --- Question Model Tests ---


def _question(card, **overrides):
    data = dict(
        card=card,
        question_face_index=0,
        answer_face_index=1,
        question_face="Front",
        answer_face="Back",
        question_text="Q",
        answer_text="A",
        choices=("X", "A"),
        choice_cards=(card, card),
        requested_choice_count=2,
    )
    data.update(overrides)
    return Question(**data)


def test_question_properties(make_card):
    card = make_card(["Q", "A"])
    question = _question(card, requested_choice_count=4)
    assert question.answer_index == 1
    assert question.choice_count == 2
    assert question.is_reduced is True
    assert question.is_correct("A")
    assert not question.is_correct("X")


@pytest.mark.parametrize(
    "overrides",
    [
        {"answer_face_index": 0},
        {"choices": ("A", "A")},
        {"choices": ("X", "Y")},
        {"choices": ("A",)},
    ],
    ids=["same-faces", "duplicate-choices", "answer-missing", "cards-mismatch"],
)
def test_question_rejects_inconsistent_choices(make_card, overrides):
    card = make_card(["Q", "A"])
    with pytest.raises(ValidationError):
        _question(card, **overrides)


# --- SessionResult Tests ---


def test_session_result_record_and_accuracy(make_card):
    card = make_card(["Q", "A"])
    question = _question(card)
    result = SessionResult()
    assert result.accuracy == 0.0

    first = result.record(question, "A")
    second = result.record(question, "X")

    assert first.was_correct is True
    assert second.was_correct is False
    assert second.correct_answer == "A"
    assert second.chosen_answer == "X"
    assert result.total == 2
    assert result.correct == 1
    assert result.incorrect == 1
    assert result.accuracy == 0.5
    assert [o.card_key for o in result.outcomes] == [card.key, card.key]


def test_session_result_end_sets_duration_once():
    result = SessionResult()
    assert result.duration_ms is None
    result.end()
    ended_at = result.ended_at
    result.end()
    assert result.ended_at == ended_at
    assert result.duration_ms >= 0


def test_session_state_in_progress():
    assert not SessionState.NotStarted.in_progress
    assert SessionState.AwaitingUserChoice.in_progress
    assert SessionState.Scored.in_progress
    assert not SessionState.Finished.in_progress
