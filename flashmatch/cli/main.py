"""
CLI entry point for flashmatch.
"""

# Standard library imports
import logging
from pathlib import Path
from typing import List, Optional

# Third-party imports
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

# Local application imports
from flashmatch.config import QuizSettings, get_settings
from flashmatch.exceptions import FlashmatchError
from flashmatch.faces import SubdivisionMode
from flashmatch.cli._check_logic import check_logic
from flashmatch.cli._quiz_logic import quiz_logic


console = Console()

app = typer.Typer(
    name="flashmatch",
    help="Flashmatch: multiple-choice quizzes built from flashcard decks.",
    add_completion=False,
    rich_markup_mode="markdown",
)


_paths_argument = typer.Argument(  # noqa: B008
    ...,
    help="Deck files (.json, .yaml, .yml) or directories containing them.",
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _build_settings(**overrides) -> QuizSettings:
    """
    Merge command line overrides over the environment settings.

    Options left unset on the command line are not passed on, so
    FLASHMATCH_* variables still apply to them. Exits with code 1 if the
    combined settings are invalid.
    """
    given = {key: value for key, value in overrides.items() if value is not None}
    try:
        return get_settings(**given)
    except ValidationError as e:
        console.print("[bold red]Invalid quiz settings:[/bold red]")
        console.print(str(e), markup=False)
        raise typer.Exit(code=1) from e


# ---------------------------------------------------------------------------
# Quiz
# ---------------------------------------------------------------------------


@app.command()
def quiz(
    paths: List[Path] = _paths_argument,
    count: Optional[int] = typer.Option(
        None,
        "--count",
        "-c",
        help="Number of questions to ask. Runs until you quit if omitted.",
    ),
    choices: Optional[int] = typer.Option(
        None,
        "--choices",
        "-n",
        help="Choices per question, the correct one included.",
    ),
    min_choices: Optional[int] = typer.Option(
        None,
        "--min-choices",
        help="Fewest choices a question may fall back to "
        "when a deck runs short of distractors.",
    ),
    faces: Optional[List[str]] = typer.Option(  # noqa: B008
        None,
        "--faces",
        "-f",
        help="Face name to ask about. Repeat to allow several.",
    ),
    decks: Optional[List[str]] = typer.Option(  # noqa: B008
        None,
        "--deck",
        "-d",
        help="Only quiz on this deck. Repeat to allow several.",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Seed for a reproducible session.",
    ),
    join_subfaces: bool = typer.Option(
        False,
        "--join-subfaces",
        help="Show every variant of a subdivided face, "
        "shuffled and joined, instead of one picked at random.",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show debug logging."
    ),
):
    """
    Run an interactive multiple-choice quiz over one or more decks.

    Each question shows one face of a card and asks you to pick the
    matching face among several choices drawn from the loaded decks.
    Enter the choice number, or `q` to stop early.
    """
    _configure_logging(verbose)
    settings = _build_settings(
        question_count=count,
        choice_count=choices,
        min_choice_count=min_choices,
        seed=seed,
        subdivision_mode=SubdivisionMode.JOIN if join_subfaces else None,
    )
    try:
        quiz_logic(paths, settings, faces=faces, decks=decks)
    except FlashmatchError as e:
        console.print(f"[bold red]Error: {escape(str(e))}[/bold red]")
        raise typer.Exit(code=1) from e


# ---------------------------------------------------------------------------
# Check
# ---------------------------------------------------------------------------


@app.command()
def check(
    paths: List[Path] = _paths_argument,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show debug logging."
    ),
):
    """
    Validate deck files without starting a quiz.

    Exits with 1 if any deck fails to load.
    """
    _configure_logging(verbose)
    if check_logic(paths):
        raise typer.Exit(code=1)


def main():
    """
    Run the CLI application.

    If an unexpected exception occurs, print a bold red error message to the console and exit the process with status code 1.
    """
    try:
        app()
    except Exception as e:
        console.print(f"[bold red]UNEXPECTED ERROR: {escape(str(e))}[/bold red]")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
