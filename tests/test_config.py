import pytest
from pydantic import ValidationError

from flashmatch.config import QuizSettings, get_settings
from flashmatch.faces import SubdivisionMode


def test_defaults():
    settings = get_settings()
    assert settings.choice_count == 4
    assert settings.min_choice_count == 2
    assert settings.question_count is None
    assert settings.seed is None
    assert settings.subdivision_mode is SubdivisionMode.PICK


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("FLASHMATCH_CHOICE_COUNT", "6")
    monkeypatch.setenv("FLASHMATCH_QUESTION_COUNT", "10")
    monkeypatch.setenv("FLASHMATCH_SEED", "42")
    monkeypatch.setenv("FLASHMATCH_SUBDIVISION_MODE", "JOIN")

    settings = QuizSettings()

    assert settings.choice_count == 6
    assert settings.question_count == 10
    assert settings.seed == 42
    assert settings.subdivision_mode is SubdivisionMode.JOIN


def test_reads_dotenv_file(tmp_path):
    # The autouse fixture has made tmp_path the working directory.
    (tmp_path / ".env").write_text("FLASHMATCH_MIN_CHOICE_COUNT=3\n")
    assert QuizSettings().min_choice_count == 3


def test_overrides_win_over_environment(monkeypatch):
    monkeypatch.setenv("FLASHMATCH_CHOICE_COUNT", "6")
    assert get_settings(choice_count=3).choice_count == 3


@pytest.mark.parametrize(
    "overrides",
    [
        {"choice_count": 0},
        {"question_count": -1},
        {"choice_count": 2, "min_choice_count": 3},
        {"subdivision_mode": "scramble"},
    ],
)
def test_invalid_settings_raise(overrides):
    with pytest.raises(ValidationError):
        get_settings(**overrides)
