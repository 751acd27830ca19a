import random

import pytest

from flashmatch.distractors import face_holders, sample_distractors
from flashmatch.exceptions import InsufficientCandidatesError, NoEligibleFaceError
from flashmatch.faces import SubdivisionMode


def test_samples_distinct_wrong_answers(capitals_pool, rng):
    correct = capitals_pool.cards[0]  # France / Paris

    distractors = sample_distractors(capitals_pool, correct, 1, 3, rng)

    texts = [d.text for d in distractors]
    assert len(texts) == 3
    assert len(set(texts)) == 3
    assert "Paris" not in texts
    assert all(d.card.key != correct.key for d in distractors)
    assert all(d.text == d.card.values[1] for d in distractors)


def test_zero_count_returns_empty(capitals_pool, rng):
    assert sample_distractors(capitals_pool, capitals_pool.cards[0], 1, 0, rng) == []


def test_negative_count_raises(capitals_pool, rng):
    with pytest.raises(ValueError):
        sample_distractors(capitals_pool, capitals_pool.cards[0], 1, -1, rng)


def test_insufficient_candidates_reports_partial_result(capitals_pool, rng):
    correct = capitals_pool.cards[0]
    with pytest.raises(InsufficientCandidatesError) as exc_info:
        sample_distractors(capitals_pool, correct, 1, 10, rng)
    error = exc_info.value
    assert error.requested == 10
    assert len(error.found) == 4
    assert error.face_name == "Capital"


def test_single_card_pool_is_insufficient(make_card, rng):
    card = make_card(["Q", "A"])
    with pytest.raises(InsufficientCandidatesError) as exc_info:
        sample_distractors([card], card, 1, 1, rng)
    assert exc_info.value.found == []


def test_no_card_with_face_raises_no_eligible(make_card, rng):
    card = make_card(["Q", "A"], faces=["Front", "Back"])
    other = make_card(["x", "y"], faces=["Left", "Right"], deck_name="Other")
    with pytest.raises(NoEligibleFaceError):
        sample_distractors([other], card, 1, 1, rng)


def test_duplicate_texts_are_skipped(make_card, rng):
    correct = make_card(["Q1", "Same"], index=0)
    pool = [
        correct,
        make_card(["Q2", "Same"], index=1),
        make_card(["Q3", "Other"], index=2),
        make_card(["Q4", "Other"], index=3),
    ]
    with pytest.raises(InsufficientCandidatesError) as exc_info:
        sample_distractors(pool, correct, 1, 2, rng)
    assert [d.text for d in exc_info.value.found] == ["Other"]


def test_variants_of_correct_answer_are_never_distractors(make_card):
    correct = make_card(["Q1", ["A", "B"]], index=0)
    pool = [
        correct,
        make_card(["Q2", "B"], index=1),
        make_card(["Q3", "C"], index=2),
    ]
    for seed in range(20):
        distractors = sample_distractors(
            pool, correct, 1, 1, random.Random(seed), correct_answer="A"
        )
        assert [d.text for d in distractors] == ["C"]


def test_cards_sharing_the_question_text_are_skipped(make_card, rng):
    correct = make_card(["Same question", "A"], index=0)
    pool = [
        correct,
        make_card(["Same question", "B"], index=1),
        make_card(["Different", "C"], index=2),
    ]
    distractors = sample_distractors(
        pool, correct, 1, 1, rng, question_face_index=0
    )
    assert [d.text for d in distractors] == ["C"]


def test_distractors_match_faces_by_name_across_decks(make_card, rng):
    correct = make_card(["Q", "A"], faces=["Front", "Back"], deck_name="One")
    other = make_card(
        ["extra", "B", "q2"], faces=["Extra", "Back", "Front"], deck_name="Two"
    )
    distractors = sample_distractors([correct, other], correct, 1, 1, rng)
    assert distractors[0].text == "B"
    assert distractors[0].card is other


def test_join_mode_rejects_overlapping_variants(make_card, rng):
    correct = make_card(["Q1", ["a", "b"]], index=0)
    pool = [
        correct,
        make_card(["Q2", ["b", "c"]], index=1),
        make_card(["Q3", ["d", "e"]], index=2),
    ]
    distractors = sample_distractors(
        pool, correct, 1, 1, rng, mode=SubdivisionMode.JOIN
    )
    assert sorted(distractors[0].text.split(", ")) == ["d", "e"]


def test_face_holders(make_card):
    with_face = make_card(["Q", "A"])
    without = make_card(["Q", None, "C"], faces=["Front", "Back", "Other"])
    assert face_holders([with_face, without], "Back") == [with_face]


def test_same_seed_same_distractors(capitals_pool):
    correct = capitals_pool.cards[2]
    first = sample_distractors(capitals_pool, correct, 1, 2, random.Random(99))
    second = sample_distractors(capitals_pool, correct, 1, 2, random.Random(99))
    assert [d.text for d in first] == [d.text for d in second]


@pytest.mark.parametrize("seed", range(50))
def test_pick_mode_uses_a_free_variant_of_a_subdivided_candidate(
    shared_variant_pool, seed
):
    correct = shared_variant_pool.cards[0]

    distractors = sample_distractors(
        shared_variant_pool,
        correct,
        1,
        1,
        random.Random(seed),
        correct_answer="b",
        question_face_index=0,
    )

    assert [d.text for d in distractors] == ["d"]
