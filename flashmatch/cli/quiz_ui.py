"""
Command-line interface for taking a match quiz.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from flashmatch.exceptions import QuizGenerationError
from flashmatch.models import Question, SessionResult, SessionState
from flashmatch.quiz_session import QuizSession

logger = logging.getLogger(__name__)
console = Console()

QUIT_INPUTS = {"q", "quit", "exit"}


def _prompt_choice(question: Question) -> Optional[int]:
    """
    Prompt until the user picks a choice number or quits.

    Returns:
        Optional[int]: Zero-based index of the chosen answer, or None if
        the user asked to quit.
    """
    count = question.choice_count
    while True:
        raw = console.input(
            f"[bold]Answer (1-{count}, q to quit): [/bold]"
        ).strip().lower()
        if raw in QUIT_INPUTS:
            return None
        try:
            number = int(raw)
        except ValueError:
            console.print("[bold red]Invalid input. Please enter a number.[/bold red]")
            continue
        if 1 <= number <= count:
            return number - 1
        console.print(
            f"[bold red]Invalid choice. Please enter a number between 1 and {count}.[/bold red]"
        )


def _display_question(question: Question) -> None:
    console.print(
        Panel(
            escape(question.question_text),
            title=escape(question.question_face),
            subtitle=f"Pick the {escape(question.answer_face)}",
            border_style="cyan",
        )
    )
    for number, choice in enumerate(question.choices, start=1):
        console.print(f"  [bold]{number}:[/bold] {escape(choice)}")
    if question.is_reduced:
        console.print(
            f"[dim]Only {question.choice_count} choices could be found for this card.[/dim]"
        )


def _display_answer(question: Question, chosen_index: int) -> None:
    """Mark the answer and reveal the full card behind every choice."""
    chosen = question.choices[chosen_index]
    if question.is_correct(chosen):
        console.print("[bold green]Correct![/bold green]")
    else:
        console.print(
            f"[bold red]Incorrect.[/bold red] The answer was "
            f"[bold]{question.answer_index + 1}: {escape(question.answer_text)}[/bold]"
        )

    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("No.", style="bold")
    table.add_column("Card")
    for i, card in enumerate(question.choice_cards):
        if i == question.answer_index:
            style = "green"
        elif i == chosen_index:
            style = "red"
        else:
            style = "dim"
        table.add_row(f"{i + 1}:", escape(card.describe()), style=style)
    console.print(table)


def display_summary(result: SessionResult) -> None:
    """Print the final score of a session."""
    table = Table(title="Quiz Summary", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="magenta")
    table.add_row("Questions", str(result.total))
    table.add_row("Correct", str(result.correct))
    table.add_row("Incorrect", str(result.incorrect))
    table.add_row("Accuracy", f"{result.accuracy:.0%}")
    console.print(table)


def start_quiz_flow(session: QuizSession) -> SessionResult:
    """
    Run the interactive loop for a session that has been started.

    Shows each question, reads a choice number, reveals the answer and
    moves on until the quota is reached or the user quits.

    Args:
        session: A started QuizSession.

    Returns:
        The session's final SessionResult.
    """
    while session.state is SessionState.AwaitingUserChoice:
        question = session.current_question()
        total = session.total_questions
        console.rule(
            f"[bold]Question {session.asked + 1}"
            f"{f' of {total}' if total is not None else ''}[/bold]"
        )
        _display_question(question)

        chosen_index = _prompt_choice(question)
        if chosen_index is None:
            session.finish()
            console.print("[yellow]Quiz stopped.[/yellow]")
            break

        _display_answer(question, chosen_index)
        try:
            session.submit_answer(question.choices[chosen_index])
        except QuizGenerationError as e:
            logger.error(f"Could not build the next question: {e}")
            console.print(
                f"[bold red]No more questions can be built: {escape(str(e))}[/bold red]"
            )
        console.print("")

    result = session.summary()
    display_summary(result)
    return result
