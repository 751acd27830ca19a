"""
Logic for the 'check' subcommand, which validates deck files without quizzing.
"""

from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from flashmatch.loader import load_decks

console = Console()


def check_logic(paths: Sequence[Path]) -> bool:
    """
    Validate every deck under `paths` and report the outcome.

    Prints a table of the decks that loaded (name, faces, card count,
    source file) followed by every error found.

    Returns:
        bool: True if any deck file failed to load or validate.
    """
    decks, errors = load_decks(paths)

    if not decks and not errors:
        console.print("[yellow]No deck files found to check.[/yellow]")
        return False

    if decks:
        table = Table(title="Decks")
        table.add_column("Deck Name", style="cyan")
        table.add_column("Faces", style="magenta")
        table.add_column("Cards", style="yellow")
        table.add_column("File", style="dim")
        for deck in decks:
            table.add_row(
                escape(deck.name),
                escape(", ".join(deck.faces)),
                str(len(deck)),
                escape(deck.source.name) if deck.source else "",
            )
        console.print(table)

    if errors:
        console.print(f"[bold red]{len(errors)} deck(s) failed validation:[/bold red]")
        for error in errors:
            console.print(f"- {escape(str(error))}")
        return True

    console.print(f"[bold green]All {len(decks)} deck(s) are valid.[/bold green]")
    return False
