import random
from pathlib import Path
from typing import List, Optional, Sequence

import typer
from rich.console import Console
from rich.markup import escape

from flashmatch.config import QuizSettings
from flashmatch.loader import load_decks
from flashmatch.models import Deck, SessionResult
from flashmatch.pool import CardPool
from flashmatch.cli.quiz_ui import start_quiz_flow
from flashmatch.quiz_session import QuizSession

console = Console()


def load_decks_or_exit(paths: Sequence[Path]) -> List[Deck]:
    """
    Load decks from `paths`, report every load error, and return the decks.

    Exits with code 1 when no deck holding at least one card was loaded.
    """
    decks, errors = load_decks(paths)

    if errors:
        console.print("[bold red]Errors encountered while loading decks:[/bold red]")
        for error in errors:
            console.print(f"- {escape(str(error))}")

    if not any(len(deck) for deck in decks):
        console.print("[bold red]No deck with at least one valid card was loaded.[/bold red]")
        raise typer.Exit(code=1)

    return decks


def quiz_logic(
    paths: Sequence[Path],
    settings: QuizSettings,
    faces: Optional[List[str]] = None,
    decks: Optional[List[str]] = None,
) -> SessionResult:
    """
    Load decks, start a quiz session and run the interactive flow.

    Parameters:
        paths (Sequence[Path]): Deck files and directories.
        settings (QuizSettings): Question count, choice counts, seed and
            subdivision mode for this run.
        faces (Optional[List[str]]): Face names allowed as question faces.
        decks (Optional[List[str]]): Restrict the quiz to these decks.

    Returns:
        SessionResult: The final result of the session.
    """
    loaded = load_decks_or_exit(paths)
    pool = CardPool.from_decks(loaded)

    session = QuizSession(
        random.Random(settings.seed),
        min_choice_count=settings.min_choice_count,
        question_faces=faces,
        mode=settings.subdivision_mode,
    )
    session.start(
        pool,
        settings.question_count,
        settings.choice_count,
        decks=decks,
    )
    console.print(
        f"Loaded [cyan]{session.card_count}[/cyan] cards "
        f"from [cyan]{session.deck_count}[/cyan] decks."
    )
    return start_quiz_flow(session)
