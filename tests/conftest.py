import json
import random
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from flashmatch.deck_validators import validate_deck
from flashmatch.models import Card, Deck
from flashmatch.pool import CardPool


# each test runs on cwd to its temp dir
@pytest.fixture(autouse=True)
def go_to_tmpdir(request):
    """
    Temporarily change the process working directory to the test's tmpdir and prepend that tmpdir to sys.path.

    Running from an empty directory keeps a developer's .env file out of
    the settings tests.
    """
    tmpdir = request.getfixturevalue("tmpdir")
    sys.path.insert(0, str(tmpdir))
    with tmpdir.as_cwd():
        yield


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove FLASHMATCH_* variables so settings start from defaults."""
    for name in (
        "FLASHMATCH_CHOICE_COUNT",
        "FLASHMATCH_MIN_CHOICE_COUNT",
        "FLASHMATCH_QUESTION_COUNT",
        "FLASHMATCH_SEED",
        "FLASHMATCH_SUBDIVISION_MODE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def rng() -> random.Random:
    """A seeded random source for reproducible tests."""
    return random.Random(1234)


# --- Raw Deck Fixtures ---


@pytest.fixture
def capitals_data() -> Dict[str, Any]:
    """
    A two-face deck of countries and capitals with five complete cards.

    Returns:
        Dict[str, Any]: Raw deck data as it would be decoded from JSON.
    """
    return {
        "name": "Capitals",
        "faces": ["Country", "Capital"],
        "cards": [
            ["France", "Paris"],
            ["Germany", "Berlin"],
            ["Italy", "Rome"],
            ["Spain", "Madrid"],
            ["Japan", "Tokyo"],
        ],
    }


@pytest.fixture
def three_face_data() -> Dict[str, Any]:
    """
    A three-face deck with absent and subdivided faces.

    Card 2 has no Front and three Back variants; card 3 has no Middle.
    """
    return {
        "name": "Three Faces",
        "faces": ["Front", "Middle", "Back"],
        "cards": [
            ["Front 1", "Middle 1", "Back 1"],
            ["Front 2", "Middle 2", "Back 2"],
            [None, "Middle 3", ["Back 3,1", "Back 3,2", "Back 3,3"]],
            ["Front 4", None, "Back 4"],
        ],
    }


# --- Model Fixtures ---


@pytest.fixture
def capitals_deck(capitals_data) -> Deck:
    return validate_deck(capitals_data)


@pytest.fixture
def three_face_deck(three_face_data) -> Deck:
    return validate_deck(three_face_data)


@pytest.fixture
def capitals_pool(capitals_deck) -> CardPool:
    return CardPool([capitals_deck])


@pytest.fixture
def shared_variant_pool() -> CardPool:
    """
    Two cards whose answer faces share the variant "b".

    Card 1 holds ["c", "b"] on Q and ["d", "b"] on A, so "d" is the only
    distractor it can give when card 0 ("a" -> "b") is asked.
    """
    deck = validate_deck(
        {
            "name": "Letters",
            "faces": ["Q", "A"],
            "cards": [["a", "b"], [["c", "b"], ["d", "b"]]],
        }
    )
    return CardPool([deck])


@pytest.fixture
def make_card():
    """Factory that builds a Card directly, bypassing deck validation."""

    def _make(
        values: List[Any],
        faces: Optional[List[str]] = None,
        deck_name: str = "Test Deck",
        index: int = 0,
    ) -> Card:
        faces = faces or ["Front", "Back"]
        return Card(
            deck_name=deck_name,
            index=index,
            face_names=tuple(faces),
            values=tuple(tuple(v) if isinstance(v, list) else v for v in values),
        )

    return _make


@pytest.fixture
def write_deck(tmp_path: Path):
    """
    Factory that writes raw deck data to a JSON file under tmp_path.

    Returns:
        Callable[[str, Any], Path]: Takes a file name and the data to dump.
    """

    def _write(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write
